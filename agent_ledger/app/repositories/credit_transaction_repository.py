"""Credit Transaction Repository Interface

Defines the contract for credit transaction persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Tuple
from agent_ledger.domain.credit_transaction import CreditTransaction


class CreditTransactionRepository(ABC):
    """
    Repository interface for CreditTransaction persistence

    Transactions are immutable and append-only. There is no update or
    delete operation.
    """

    @abstractmethod
    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Append a new credit transaction

        Args:
            transaction: CreditTransaction entity to persist

        Returns:
            Created CreditTransaction
        """
        pass

    @abstractmethod
    async def get_by_id(self, transaction_id: str) -> Optional[CreditTransaction]:
        pass

    @abstractmethod
    async def get_by_account_id(
        self, account_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        """
        Retrieve transactions of an account, most recent first

        Args:
            account_id: Account identifier
            limit: Maximum number of transactions to return
            offset: Number of transactions to skip

        Returns:
            Tuple of (transactions, total count)
        """
        pass

    @abstractmethod
    async def get_history(self, account_id: str) -> List[CreditTransaction]:
        """
        Retrieve the full history of an account in posting order (sequence ASC)
        """
        pass

    @abstractmethod
    async def get_transaction_sum_by_account(self, account_id: str) -> int:
        """
        Sum of amount_cents over all transactions of an account

        Returns:
            Sum in cents (0 when the account has no transactions)
        """
        pass

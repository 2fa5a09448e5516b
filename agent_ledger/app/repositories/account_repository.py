"""Account Repository Interface

Defines the contract for account persistence operations.
"""

from abc import ABC, abstractmethod
from typing import Optional, List
from agent_ledger.domain.account import Account


class AccountRepository(ABC):
    """
    Repository interface for Account persistence

    Reads with for_update=True take the account's row lock
    (SELECT FOR UPDATE). The lock is held until the surrounding unit of
    work commits or rolls back, which serializes balance mutations per
    account.
    """

    @abstractmethod
    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID

        Args:
            account_id: Account identifier
            for_update: If True, lock the row until the unit of work ends

        Returns:
            Account if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, account: Account) -> Account:
        """
        Create a new account

        Args:
            account: Account entity to persist

        Returns:
            Created Account
        """
        pass

    @abstractmethod
    async def update_balance(self, account_id: str, new_balance_cents: int, transaction_count: int) -> None:
        """
        Update account balance and ledger entry counter

        Args:
            account_id: Account ID (must already be locked)
            new_balance_cents: New balance value
            transaction_count: Sequence number of the entry just posted
        """
        pass

    @abstractmethod
    async def get_all(self) -> List[Account]:
        """Retrieve all accounts (used by reconciliation)"""
        pass

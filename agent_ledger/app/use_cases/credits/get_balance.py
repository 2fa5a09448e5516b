"""Get Balance Use Case

Retrieves an account's current credit balance.
"""

from libs.result import Result, Return
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.use_cases.errors import not_found
from .dtos import BalanceResponseDTO


class GetBalance:
    """
    Get Balance Use Case

    Read-only operation; takes no lock.
    """

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, account_id: str) -> Result[BalanceResponseDTO]:
        """
        Execute get balance operation

        Args:
            account_id: The account identifier

        Returns:
            Result[BalanceResponseDTO]: Success with balance data or NOT_FOUND
        """
        account = await self.account_repo.get_by_id(account_id)

        if not account:
            return Return.err(not_found("Account", account_id))

        return Return.ok(
            BalanceResponseDTO(
                account_id=account.id,
                balance_cents=account.balance_cents,
                last_updated=account.updated_at,
            )
        )

"""SQLAlchemy implementation of AccountRepository

Provides persistence for Account entities with pessimistic locking support
to prevent race conditions during concurrent balance mutations.
"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.domain.account import Account
from agent_ledger.domain.base import utc_now


class SqlAlchemyAccountRepository(AccountRepository):
    """
    SQLAlchemy implementation of AccountRepository

    Features:
    - Pessimistic locking via SELECT FOR UPDATE
    - Atomic balance updates
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, account_id: str, for_update: bool = False) -> Optional[Account]:
        """
        Retrieve account by ID with optional row-level locking

        Args:
            account_id: Account identifier
            for_update: If True, locks the row with SELECT FOR UPDATE (prevents concurrent modifications)

        Returns:
            Account if found, None otherwise
        """
        stmt = select(Account).where(Account.id == account_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, account: Account) -> Account:
        self.session.add(account)
        await self.session.flush()
        await self.session.refresh(account)
        return account

    async def update_balance(self, account_id: str, new_balance_cents: int, transaction_count: int) -> None:
        """
        Update account balance, entry counter and updated_at timestamp

        Note:
            Should be called within a transaction with the account already locked
        """
        account = await self.get_by_id(account_id, for_update=False)
        if account:
            account.balance_cents = new_balance_cents
            account.transaction_count = transaction_count
            account.updated_at = utc_now()
            self.session.add(account)
            await self.session.flush()

    async def get_all(self) -> List[Account]:
        result = await self.session.execute(select(Account).order_by(Account.created_at, Account.id))
        return list(result.scalars().all())

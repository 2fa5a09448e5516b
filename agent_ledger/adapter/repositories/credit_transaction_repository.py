"""SQLAlchemy implementation of CreditTransactionRepository

Append-only persistence for CreditTransaction entities. The unique
(account_id, sequence) constraint rejects a second entry claiming the same
position in an account's history.
"""

from typing import Optional, List, Tuple
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy import func
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.domain.credit_transaction import CreditTransaction


class SqlAlchemyCreditTransactionRepository(CreditTransactionRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, transaction: CreditTransaction) -> CreditTransaction:
        """
        Append a credit transaction

        Raises:
            IntegrityError: If the (account_id, sequence) slot is already taken
        """
        self.session.add(transaction)
        await self.session.flush()
        await self.session.refresh(transaction)
        return transaction

    async def get_by_id(self, transaction_id: str) -> Optional[CreditTransaction]:
        stmt = select(CreditTransaction).where(CreditTransaction.id == transaction_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_account_id(
        self, account_id: str, limit: int = 20, offset: int = 0
    ) -> Tuple[List[CreditTransaction], int]:
        count_stmt = select(func.count()).select_from(CreditTransaction).where(
            CreditTransaction.account_id == account_id
        )
        total = (await self.session.execute(count_stmt)).scalar_one()

        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.account_id == account_id)
            .order_by(CreditTransaction.sequence.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), total

    async def get_history(self, account_id: str) -> List[CreditTransaction]:
        stmt = (
            select(CreditTransaction)
            .where(CreditTransaction.account_id == account_id)
            .order_by(CreditTransaction.sequence)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_transaction_sum_by_account(self, account_id: str) -> int:
        stmt = select(func.coalesce(func.sum(CreditTransaction.amount_cents), 0)).where(
            CreditTransaction.account_id == account_id
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

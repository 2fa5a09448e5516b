"""SQLAlchemy implementation of PayoutRepository"""

from typing import Optional, List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agent_ledger.app.repositories.payout_repository import PayoutRepository
from agent_ledger.domain.payout import Payout


class SqlAlchemyPayoutRepository(PayoutRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payout: Payout) -> Payout:
        self.session.add(payout)
        await self.session.flush()
        await self.session.refresh(payout)
        return payout

    async def get_by_id(self, payout_id: str, for_update: bool = False) -> Optional[Payout]:
        stmt = select(Payout).where(Payout.id == payout_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, payout: Payout) -> Payout:
        self.session.add(payout)
        await self.session.flush()
        await self.session.refresh(payout)
        return payout

    async def get_by_account_id(self, account_id: str, limit: int = 50) -> List[Payout]:
        stmt = (
            select(Payout)
            .where(Payout.account_id == account_id)
            .order_by(Payout.created_at.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

"""SQLAlchemy implementation of CreditPurchaseRepository"""

from typing import Optional
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from agent_ledger.app.repositories.credit_purchase_repository import CreditPurchaseRepository
from agent_ledger.domain.credit_purchase import CreditPurchase


class SqlAlchemyCreditPurchaseRepository(CreditPurchaseRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, purchase: CreditPurchase) -> CreditPurchase:
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase

    async def get_by_id(self, purchase_id: str, for_update: bool = False) -> Optional[CreditPurchase]:
        stmt = select(CreditPurchase).where(CreditPurchase.id == purchase_id)

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_checkout_session_id(self, checkout_session_id: str) -> Optional[CreditPurchase]:
        stmt = select(CreditPurchase).where(CreditPurchase.checkout_session_id == checkout_session_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, purchase: CreditPurchase) -> CreditPurchase:
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase

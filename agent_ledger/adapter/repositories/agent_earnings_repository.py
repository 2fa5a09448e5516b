"""SQLAlchemy implementation of AgentEarningsRepository

increment() is a single INSERT ... ON CONFLICT DO UPDATE on the
(agent_id, owner_account_id) unique key, so concurrent executions of the
same agent can neither create duplicate rows nor lose an increment.
"""

from datetime import datetime
from typing import List
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.dialects import postgresql, sqlite
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.domain.agent_earnings import AgentEarnings
from agent_ledger.domain.base import generate_uuid

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyAgentEarningsRepository(AgentEarningsRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert(self):
        dialect = self.session.bind.dialect.name
        insert = UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Earnings upsert is not supported on {dialect}")
        return insert(AgentEarnings.__table__)

    async def increment(
        self,
        agent_id: str,
        owner_account_id: str,
        creator_earnings_cents: int,
        earned_at: datetime,
    ) -> AgentEarnings:
        table = AgentEarnings.__table__
        stmt = self._insert().values(
            id=generate_uuid(),
            agent_id=agent_id,
            owner_account_id=owner_account_id,
            total_earnings_cents=creator_earnings_cents,
            pending_earnings_cents=creator_earnings_cents,
            paid_out_cents=0,
            total_executions=1,
            last_earning_at=earned_at,
            created_at=earned_at,
            updated_at=earned_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.agent_id, table.c.owner_account_id],
            set_={
                "total_earnings_cents": table.c.total_earnings_cents + creator_earnings_cents,
                "pending_earnings_cents": table.c.pending_earnings_cents + creator_earnings_cents,
                "total_executions": table.c.total_executions + 1,
                "last_earning_at": earned_at,
                "updated_at": earned_at,
            },
        )
        await self.session.execute(stmt)

        result = await self.session.execute(
            select(AgentEarnings)
            .where(
                AgentEarnings.agent_id == agent_id,
                AgentEarnings.owner_account_id == owner_account_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one()

    async def list_by_owner(self, owner_account_id: str, for_update: bool = False) -> List[AgentEarnings]:
        stmt = (
            select(AgentEarnings)
            .where(AgentEarnings.owner_account_id == owner_account_id)
            .order_by(AgentEarnings.created_at, AgentEarnings.id)
        )

        if for_update:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def update(self, earnings: AgentEarnings) -> AgentEarnings:
        self.session.add(earnings)
        await self.session.flush()
        return earnings

    async def get_all(self) -> List[AgentEarnings]:
        result = await self.session.execute(
            select(AgentEarnings).order_by(AgentEarnings.owner_account_id, AgentEarnings.created_at)
        )
        return list(result.scalars().all())

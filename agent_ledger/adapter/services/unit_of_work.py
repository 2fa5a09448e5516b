"""SQLAlchemy Unit of Work

Ends the database transaction of the AsyncSession shared by one request's
repositories. Commit and rollback both release the row locks taken by
for_update reads.
"""

import logging
from sqlmodel.ext.asyncio.session import AsyncSession
from agent_ledger.app.services.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aexit__(self, exc_type, exc, tb):
        if exc_type is not None:
            logger.warning(f"Rolling back ledger transaction after {exc_type.__name__}: {exc}")
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        if self.session.in_transaction():
            await self.session.rollback()

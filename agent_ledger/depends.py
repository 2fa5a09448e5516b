from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.adapter.services.payout_rail import create_payout_rail
from agent_ledger.app.services.payout_rail import PayoutRail
from agent_ledger.domain.policy import LedgerPolicy
import agent_ledger.domain  # noqa: F401  registers the tables on SQLModel.metadata

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_policy() -> LedgerPolicy:
    return LedgerPolicy.from_config(ApplicationConfig)


def get_payout_rail() -> PayoutRail:
    return create_payout_rail(ApplicationConfig)

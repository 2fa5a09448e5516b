import os
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
import agent_ledger.domain  # noqa: F401
from agent_ledger.adapter.services.payout_rail import SimulatedPayoutRail
from agent_ledger.depends import get_session, get_payout_rail
from agent_ledger.domain import Account


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """
    Test database engine

    Defaults to a throwaway SQLite file; set TEST_DB_URI to run the suite
    against a PostgreSQL test database instead.
    """
    test_db_url = os.environ.get("TEST_DB_URI") or f"sqlite+aiosqlite:///{tmp_path / 'ledger_test.db'}"

    engine = create_async_engine(test_db_url, echo=False, future=True)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def account(db_session):
    """
    An empty account committed to the test database

    Returned detached, so a use case rolling back the shared session does
    not expire it under the test.
    """
    account = Account(id="acct_test", email="owner@example.com", balance_cents=0, transaction_count=0)
    db_session.add(account)
    await db_session.commit()
    db_session.expunge(account)
    return account


@pytest_asyncio.fixture
def payout_rail():
    return SimulatedPayoutRail()


@pytest_asyncio.fixture
async def client(db_session, payout_rail):
    """Create test client with database session and payout rail overrides"""
    from agent_ledger.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig, init_database=False)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_payout_rail] = lambda: payout_rail

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

import pytest
from unittest.mock import AsyncMock, MagicMock

from agent_ledger.domain.policy import LedgerPolicy


@pytest.fixture
def mock_uow():
    """Mock unit of work"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def policy():
    """Default ledger policy (10% platform fee, $5.00 minimum payout)"""
    return LedgerPolicy()

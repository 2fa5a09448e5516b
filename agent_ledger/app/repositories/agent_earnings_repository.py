"""Agent Earnings Repository Interface

Defines the contract for AgentEarnings persistence operations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List
from agent_ledger.domain.agent_earnings import AgentEarnings


class AgentEarningsRepository(ABC):
    """
    Repository interface for AgentEarnings persistence

    increment() is a single atomic upsert so that concurrent executions of
    the same agent never lose an increment. list_by_owner(for_update=True)
    locks every earnings row of an owner for multi-row payout reservations.
    """

    @abstractmethod
    async def increment(
        self,
        agent_id: str,
        owner_account_id: str,
        creator_earnings_cents: int,
        earned_at: datetime,
    ) -> AgentEarnings:
        """
        Create or atomically increment the (agent, owner) earnings row

        A new row starts with total = pending = creator_earnings_cents and
        total_executions = 1. An existing row gets total and pending
        increased by creator_earnings_cents, total_executions increased by 1
        and last_earning_at set to earned_at.

        Returns:
            The row as stored after the upsert
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_account_id: str, for_update: bool = False) -> List[AgentEarnings]:
        """
        Retrieve all earnings rows of an owner

        Rows are ordered by created_at, then id, so reservations walk them
        in a deterministic order.

        Args:
            owner_account_id: Owner account identifier
            for_update: If True, lock all returned rows

        Returns:
            List of AgentEarnings (possibly empty)
        """
        pass

    @abstractmethod
    async def update(self, earnings: AgentEarnings) -> AgentEarnings:
        pass

    @abstractmethod
    async def get_all(self) -> List[AgentEarnings]:
        pass

"""Agent Earnings Domain Entity

Accumulates the creator share of every billable execution per
(agent, owner) pair. Earnings are a separate pool from the owner's
spendable Account balance; a Payout is the only way out of it.
"""

from datetime import datetime
from typing import Optional, Tuple
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String, UniqueConstraint
from agent_ledger.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


def calculate_revenue_split(execution_cost_cents: int, platform_fee_percentage: int) -> Tuple[int, int]:
    """
    Split an execution cost into (platform_fee_cents, creator_earnings_cents)

    The fee is floored and the creator receives the remainder, so the two
    parts always add up to the execution cost.
    """
    if execution_cost_cents < 0:
        raise ValueError("execution_cost_cents must be >= 0")
    platform_fee_cents = (execution_cost_cents * platform_fee_percentage) // 100
    creator_earnings_cents = execution_cost_cents - platform_fee_cents
    return platform_fee_cents, creator_earnings_cents


class AgentEarnings(BaseModel, table=True):
    """
    Agent Earnings - Revenue share of an agent owner

    Domain Rules:
    - One row per (agent_id, owner_account_id)
    - total_earnings_cents = pending_earnings_cents + paid_out_cents
    - Incremented atomically on every billable execution
    - pending -> paid_out moves only through the payout workflow
    """

    __tablename__ = "agent_earnings"
    __table_args__ = (
        UniqueConstraint('agent_id', 'owner_account_id', name='uq_agent_earnings_agent_owner'),
        Index('ix_agent_earnings_owner_account_id', 'owner_account_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Earnings row identifier"
    )

    agent_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Agent that produced the revenue"
    )

    owner_account_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Account owning the agent"
    )

    total_earnings_cents: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Lifetime creator earnings"
    )

    pending_earnings_cents: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Earnings not yet reserved by a payout"
    )

    paid_out_cents: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Earnings reserved by or settled through payouts"
    )

    total_executions: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Number of billable executions"
    )

    last_earning_at: Optional[datetime] = Field(
        default=None,
        sa_column=timestamp_column(nullable=True),
        description="Timestamp of the latest earning"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Row creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Last update timestamp"
    )

    @property
    def is_consistent(self) -> bool:
        return self.total_earnings_cents == self.pending_earnings_cents + self.paid_out_cents

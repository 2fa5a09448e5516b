"""Payout Domain Entity

A request to convert pending earnings into an external transfer.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, String, JSON
from agent_ledger.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class PayoutStatus(str, Enum):
    """Payout status types"""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


ALLOWED_TRANSITIONS = {
    PayoutStatus.PENDING: {PayoutStatus.PROCESSING, PayoutStatus.FAILED},
    PayoutStatus.PROCESSING: {PayoutStatus.COMPLETED, PayoutStatus.FAILED},
    PayoutStatus.COMPLETED: set(),
    PayoutStatus.FAILED: set(),
}


class InvalidPayoutTransition(Exception):
    def __init__(self, current: PayoutStatus, target: PayoutStatus):
        super().__init__(f"Payout cannot move from {current.value} to {target.value}")
        self.current = current
        self.target = target


class Payout(BaseModel, table=True):
    """
    Payout - Conversion of pending earnings into an external transfer

    Domain Rules:
    - Created pending; the requested amount is reserved from the owner's
      pending earnings at creation time
    - Status transitions: pending -> processing -> completed | failed,
      or pending -> failed
    - completed and failed are terminal; failed payouts are not retried
    - allocations records how many cents were reserved from each
      AgentEarnings row
    """

    __tablename__ = "payouts"
    __table_args__ = (
        Index('ix_payouts_account_id', 'account_id'),
        Index('ix_payouts_status', 'status'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Payout identifier"
    )

    account_id: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Owner account receiving the transfer"
    )

    amount_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Requested amount in cents"
    )

    status: PayoutStatus = Field(
        default=PayoutStatus.PENDING,
        description="Payout status (pending, processing, completed, failed)"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Payout description"
    )

    failure_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(1000), nullable=True),
        description="Why the payout failed"
    )

    destination_ref: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External destination (bank account / connected account)"
    )

    transfer_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External transfer reference"
    )

    external_payout_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External payout reference"
    )

    allocations: Dict[str, int] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False, default=dict),
        description="Cents reserved per AgentEarnings id"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Payout request timestamp"
    )

    processed_at: Optional[datetime] = Field(
        default=None,
        sa_column=timestamp_column(nullable=True),
        description="When the payout reached a terminal state"
    )

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, target: PayoutStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidPayoutTransition(self.status, target)
        self.status = target
        if self.is_terminal:
            self.processed_at = utc_now()

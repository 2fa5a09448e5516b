"""Credit Purchase Domain Entity

Intent to add funds to an account through the external payment rail.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String
from agent_ledger.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class PurchaseStatus(str, Enum):
    """Credit purchase status types"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class CreditPurchase(BaseModel, table=True):
    """
    Credit Purchase - Pending-to-completed intent to add funds

    Domain Rules:
    - Created pending when the checkout session is created
    - Transitions to completed exactly once, when the payment rail confirms
      success; that transition posts one 'purchase' CreditTransaction
    - Transitions to failed when the payment fails or the session expires
    - completed and failed are terminal
    """

    __tablename__ = "credit_purchases"
    __table_args__ = (
        Index('ix_credit_purchases_account_id', 'account_id'),
        Index('ix_credit_purchases_checkout_session_id', 'checkout_session_id'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Purchase identifier"
    )

    account_id: str = Field(
        sa_column=Column(String, ForeignKey("accounts.id"), nullable=False),
        description="Account receiving the credits"
    )

    amount_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Amount charged in cents"
    )

    credits_purchased: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Credits (cents of balance) granted on completion"
    )

    currency: str = Field(
        default="usd",
        sa_column=Column(String(3), nullable=False, default="usd"),
        description="ISO currency code"
    )

    checkout_session_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External checkout session id"
    )

    payment_reference: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="External payment reference (e.g., payment intent id)"
    )

    status: PurchaseStatus = Field(
        default=PurchaseStatus.PENDING,
        description="Purchase status (pending, completed, failed)"
    )

    failure_reason: Optional[str] = Field(
        default=None,
        sa_column=Column(String(500), nullable=True),
        description="Why the payment failed"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Purchase creation timestamp"
    )

    completed_at: Optional[datetime] = Field(
        default=None,
        sa_column=timestamp_column(nullable=True),
        description="When the purchase was completed"
    )

    @property
    def is_terminal(self) -> bool:
        return self.status in (PurchaseStatus.COMPLETED, PurchaseStatus.FAILED)

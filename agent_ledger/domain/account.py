"""Account Domain Entity

Holds the spendable credit balance of a marketplace user. Each user has
exactly one account, created on first sign-in with a zero balance.
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import CheckConstraint, BigInteger, String
from agent_ledger.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class Account(BaseModel, table=True):
    """
    Account - Spendable credit balance of a user (1 credit = 1 cent)

    Domain Rules:
    - balance_cents equals the sum of all CreditTransaction amounts of the account
    - balance_cents is never driven below zero by a deduction
    - Balance updates only through the credit ledger use cases
    - Accounts are never deleted
    """

    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint('balance_cents >= 0', name='balance_cents_non_negative'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Account identifier (user id)"
    )

    email: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="Contact e-mail of the account holder"
    )

    balance_cents: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Current spendable balance in cents"
    )

    transaction_count: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Number of ledger entries posted (sequence of the latest entry)"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Account creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Last balance update timestamp"
    )

"""Credit Transaction Domain Entity

Immutable append-only audit trail of all balance mutations.
Each transaction records the balance before and after the mutation.
"""

from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any
from sqlmodel import Field, Column, Index
from sqlalchemy import ForeignKey, BigInteger, String, JSON, UniqueConstraint
from agent_ledger.domain.base import BaseModel, generate_uuid, timestamp_column, utc_now


class TransactionType(str, Enum):
    """Credit transaction types"""
    PURCHASE = "purchase"      # Credits bought through the payment rail
    USAGE = "usage"            # Credits spent on an agent execution
    REFUND = "refund"          # Credits returned for a failed execution
    BONUS = "bonus"            # Promotional credits
    ADJUSTMENT = "adjustment"  # Manual admin correction (either sign)


class CreditTransaction(BaseModel, table=True):
    """
    Credit Transaction - Immutable ledger entry

    Domain Rules:
    - amount_cents is signed: positive = credit, negative = debit
    - balance_after_cents = balance_before_cents + amount_cents
    - balance_after_cents of entry N equals balance_before_cents of entry N+1
      for the same account
    - Entries are created exactly once per mutation, never updated or deleted
    - sequence numbers the entries of an account 1..n without gaps
    - reference_type/reference_id link to the originating purchase or execution
    """

    __tablename__ = "credit_transactions"
    __table_args__ = (
        Index('ix_credit_transactions_account_created', 'account_id', 'created_at'),
        Index('ix_credit_transactions_reference', 'reference_type', 'reference_id'),
        UniqueConstraint('account_id', 'sequence', name='uq_credit_transactions_account_sequence'),
    )

    id: str = Field(
        default_factory=generate_uuid,
        primary_key=True,
        description="Transaction identifier"
    )

    account_id: str = Field(
        sa_column=Column(String, ForeignKey("accounts.id"), nullable=False),
        description="Account the entry belongs to"
    )

    sequence: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Position of the entry in the account history (1-based)"
    )

    transaction_type: TransactionType = Field(
        description="Kind of mutation (purchase, usage, refund, bonus, adjustment)"
    )

    amount_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Signed amount in cents"
    )

    description: str = Field(
        default="",
        sa_column=Column(String(500), nullable=False, default=""),
        description="Human readable description"
    )

    balance_before_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance snapshot before the mutation"
    )

    balance_after_cents: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Balance snapshot after the mutation"
    )

    reference_type: Optional[str] = Field(
        default=None,
        sa_column=Column(String(50), nullable=True),
        description="Type of reference (e.g., 'purchase', 'execution')"
    )

    reference_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(255), nullable=True),
        description="ID of referenced entity"
    )

    credit_purchase_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String, ForeignKey("credit_purchases.id"), nullable=True),
        description="Originating credit purchase, for purchase entries"
    )

    details: Optional[Dict[str, Any]] = Field(
        default=None,
        sa_column=Column("metadata", JSON, nullable=True),
        description="Free-form metadata for the audit trail"
    )

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column=timestamp_column(),
        description="Transaction timestamp (immutable)"
    )

"""Data Transfer Objects for Credit Ledger Use Cases

Pydantic models for command inputs and response outputs.
All amounts are integer cents (1 credit = 1 cent).
"""

from datetime import datetime
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field

from agent_ledger.domain.credit_transaction import TransactionType


class AddCreditsCommandDTO(BaseModel):
    """
    Command DTO for a signed balance mutation

    Used as input to AddCredits. Positive amounts credit the account,
    negative amounts debit it.
    """

    account_id: str = Field(
        ...,
        description="Account identifier"
    )

    amount_cents: int = Field(
        ...,
        description="Signed amount in cents (positive = credit, negative = debit)"
    )

    transaction_type: TransactionType = Field(
        ...,
        description="Kind of mutation (purchase, usage, refund, bonus, adjustment)"
    )

    description: str = Field(
        default="",
        description="Human readable description"
    )

    reference_id: Optional[str] = Field(
        default=None,
        description="ID of the originating entity"
    )

    reference_type: Optional[str] = Field(
        default=None,
        description="Type of the originating entity (e.g., 'purchase', 'execution')"
    )

    metadata: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Optional metadata for audit trail"
    )

    credit_purchase_id: Optional[str] = Field(
        default=None,
        description="Originating credit purchase, for purchase entries"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acct_123",
                "amount_cents": 1000,
                "transaction_type": "bonus",
                "description": "Welcome bonus",
            }
        }


class DeductCreditsCommandDTO(BaseModel):
    """
    Command DTO for charging an account

    The caller passes the magnitude; the ledger records a negative 'usage'
    entry.
    """

    account_id: str = Field(..., description="Account identifier")
    amount_cents: int = Field(..., description="Amount to deduct in cents (positive magnitude)")
    description: str = Field(default="", description="Human readable description")
    reference_id: Optional[str] = Field(default=None, description="ID of the originating entity")
    reference_type: Optional[str] = Field(default=None, description="Type of the originating entity")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Optional metadata for audit trail")


class CreditTransactionResponseDTO(BaseModel):
    """Response DTO describing one ledger entry"""

    transaction_id: str
    account_id: str
    transaction_type: str
    amount_cents: int
    description: str
    sequence: int
    balance_before_cents: int
    balance_after_cents: int
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: datetime


class CreditMutationResponseDTO(BaseModel):
    """
    Response DTO for AddCredits / DeductCredits

    Carries the posted entry and the account balance after it.
    """

    transaction: CreditTransactionResponseDTO
    new_balance_cents: int

    class Config:
        json_schema_extra = {
            "example": {
                "transaction": {
                    "transaction_id": "5b0c...",
                    "account_id": "acct_123",
                    "transaction_type": "usage",
                    "amount_cents": -50,
                    "description": "Agent execution: summarizer",
                    "sequence": 2,
                    "balance_before_cents": 1000,
                    "balance_after_cents": 950,
                    "reference_type": "execution",
                    "reference_id": "exec_789",
                    "created_at": "2024-01-01T00:00:00Z"
                },
                "new_balance_cents": 950
            }
        }


class BalanceResponseDTO(BaseModel):
    """Response DTO for GetBalance"""

    account_id: str = Field(..., description="Account identifier")
    balance_cents: int = Field(..., description="Current balance in cents")
    last_updated: datetime = Field(..., description="Timestamp of last balance update")


class SufficientCreditsResponseDTO(BaseModel):
    """
    Response DTO for HasSufficientCredits

    Advisory only: the balance may change before the actual deduction.
    """

    account_id: str
    sufficient: bool
    current_balance_cents: int
    required_cents: int


class OpenAccountCommandDTO(BaseModel):
    account_id: Optional[str] = Field(default=None, description="Account id to use (generated when omitted)")
    email: Optional[str] = Field(default=None, description="Contact e-mail")


class AccountResponseDTO(BaseModel):
    account_id: str
    email: Optional[str] = None
    balance_cents: int
    created_at: datetime
    created: bool = Field(default=True, description="False when the account already existed")


class CreatePurchaseCommandDTO(BaseModel):
    """
    Command DTO for recording a pending credit purchase

    Created when the checkout session is created; completed later by the
    payment confirmation.
    """

    account_id: str = Field(..., description="Account receiving the credits")
    amount_cents: int = Field(..., description="Amount charged in cents")
    currency: Optional[str] = Field(default=None, description="ISO currency code (default from config)")
    checkout_session_id: Optional[str] = Field(default=None, description="External checkout session id")


class CreditPurchaseResponseDTO(BaseModel):
    purchase_id: str
    account_id: str
    amount_cents: int
    credits_purchased: int
    currency: str
    status: str
    checkout_session_id: Optional[str] = None
    payment_reference: Optional[str] = None
    failure_reason: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None


class ProcessPurchaseResponseDTO(BaseModel):
    """
    Response DTO for ProcessPurchaseSuccess

    already_processed is True when a duplicate confirmation arrived for a
    purchase that was completed earlier; no entry is posted in that case.
    """

    purchase_id: str
    status: str
    already_processed: bool = False
    transaction: Optional[CreditTransactionResponseDTO] = None
    new_balance_cents: Optional[int] = None


class FailPurchaseCommandDTO(BaseModel):
    purchase_id: str
    reason: str = "payment_failed"


class TransactionDTO(BaseModel):
    """Single transaction in a history listing"""

    id: str
    transaction_type: str
    amount_cents: int
    description: str
    balance_after_cents: int
    reference_type: Optional[str] = None
    reference_id: Optional[str] = None
    created_at: datetime


class ListTransactionsResponseDTO(BaseModel):
    transactions: List[TransactionDTO]
    total: int
    limit: int
    offset: int


class ChargeExecutionCommandDTO(BaseModel):
    """
    Command DTO for billing a completed agent execution

    Deducts the cost from the payer and credits the agent owner's earnings
    in one unit of work.
    """

    payer_account_id: str = Field(..., description="Account that executed the agent")
    agent_id: str = Field(..., description="Executed agent")
    owner_account_id: str = Field(..., description="Account owning the agent")
    execution_cost_cents: int = Field(..., description="Execution cost in cents")
    execution_id: Optional[str] = Field(default=None, description="Execution identifier")
    description: Optional[str] = Field(default=None, description="Ledger entry description")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Optional metadata for audit trail")


class ChargeExecutionResponseDTO(BaseModel):
    transaction: CreditTransactionResponseDTO
    new_balance_cents: int
    platform_fee_cents: int
    creator_earnings_cents: int
    earnings_recorded: bool


class LedgerDiscrepancyDTO(BaseModel):
    """Account whose stored balance or history chain is inconsistent"""

    account_id: str
    balance_cents: int
    calculated_balance_cents: int
    discrepancy_cents: int
    broken_chain_at: Optional[int] = Field(
        default=None,
        description="Sequence of the first entry whose snapshots do not chain"
    )


class EarningsDiscrepancyDTO(BaseModel):
    """Earnings row violating total = pending + paid_out"""

    earnings_id: str
    agent_id: str
    owner_account_id: str
    total_earnings_cents: int
    pending_earnings_cents: int
    paid_out_cents: int


class ReconciliationResultDTO(BaseModel):
    total_accounts_checked: int
    total_earnings_checked: int
    discrepancies_found: int
    discrepancies: List[LedgerDiscrepancyDTO]
    earnings_discrepancies: List[EarningsDiscrepancyDTO]
    reconciliation_time: datetime
    execution_time_ms: int

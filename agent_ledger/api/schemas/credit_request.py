"""Request schemas for the credit ledger API

Pydantic models for validating incoming HTTP requests. Amounts are whole
cents; StrictInt rejects fractional or string amounts before they reach
the ledger.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel, Field, StrictInt
from agent_ledger.domain.credit_transaction import TransactionType


class OpenAccountRequestSchema(BaseModel):
    account_id: Optional[str] = Field(default=None, min_length=1, description="Account id (generated when omitted)")
    email: Optional[str] = Field(default=None, description="Contact e-mail")


class AddCreditsRequestSchema(BaseModel):
    """Request schema for POST /credits/add (signed amount)"""

    account_id: str = Field(..., min_length=1, description="Account identifier")
    amount_cents: StrictInt = Field(..., description="Amount in cents")
    transaction_type: TransactionType = Field(default=TransactionType.BONUS, description="Kind of credit")
    description: str = Field(default="", max_length=500)
    reference_type: Optional[str] = Field(default=None, max_length=50)
    reference_id: Optional[str] = Field(default=None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acct_123",
                "amount_cents": 1000,
                "transaction_type": "bonus",
                "description": "Welcome bonus",
            }
        }


class DeductCreditsRequestSchema(BaseModel):
    account_id: str = Field(..., min_length=1, description="Account identifier")
    amount_cents: StrictInt = Field(..., gt=0, description="Amount to deduct in cents (must be > 0)")
    description: str = Field(default="", max_length=500)
    reference_type: Optional[str] = Field(default=None, max_length=50)
    reference_id: Optional[str] = Field(default=None, max_length=255)
    metadata: Optional[Dict[str, Any]] = None


class CreatePurchaseRequestSchema(BaseModel):
    account_id: str = Field(..., min_length=1)
    amount_cents: StrictInt = Field(..., description="Amount charged in cents")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    checkout_session_id: Optional[str] = None


class CompletePurchaseRequestSchema(BaseModel):
    payment_reference: Optional[str] = Field(default=None, description="Payment intent or charge id")


class FailPurchaseRequestSchema(BaseModel):
    reason: str = Field(default="payment_failed", min_length=1, max_length=255)


class ChargeExecutionRequestSchema(BaseModel):
    """
    Request schema for POST /executions/charge

    Debits the payer and credits the agent owner in one transaction.
    """

    payer_account_id: str = Field(..., min_length=1)
    agent_id: str = Field(..., min_length=1)
    owner_account_id: str = Field(..., min_length=1)
    execution_cost_cents: StrictInt = Field(..., gt=0)
    execution_id: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=500)
    metadata: Optional[Dict[str, Any]] = None

    class Config:
        json_schema_extra = {
            "example": {
                "payer_account_id": "acct_payer",
                "agent_id": "agent_summarizer",
                "owner_account_id": "acct_owner",
                "execution_cost_cents": 100,
                "execution_id": "exec_789",
            }
        }

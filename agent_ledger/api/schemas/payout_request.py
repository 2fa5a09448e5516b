"""Request schemas for the earnings and payout API"""

from typing import Optional
from pydantic import BaseModel, Field, StrictInt


class RecordEarningsRequestSchema(BaseModel):
    agent_id: str = Field(..., min_length=1)
    owner_account_id: str = Field(..., min_length=1)
    execution_cost_cents: StrictInt = Field(..., ge=0)
    payer_account_id: Optional[str] = None
    execution_id: Optional[str] = None


class CreatePayoutRequestSchema(BaseModel):
    account_id: str = Field(..., min_length=1)
    amount_cents: StrictInt = Field(..., description="Payout amount in cents")
    description: Optional[str] = Field(default=None, max_length=500)

    class Config:
        json_schema_extra = {
            "example": {"account_id": "acct_owner", "amount_cents": 2500}
        }


class ProcessPayoutRequestSchema(BaseModel):
    destination_ref: Optional[str] = Field(default=None, description="Connected account id on the payout rail")


class RejectPayoutRequestSchema(BaseModel):
    reason: str = Field(..., min_length=1, max_length=255)

"""Data Transfer Objects for Earnings and Payout Use Cases

Pydantic models for command inputs and response outputs.
All amounts are integer cents.
"""

from datetime import datetime
from typing import Optional, List, Dict
from pydantic import BaseModel, Field


class RecordEarningsCommandDTO(BaseModel):
    """
    Command DTO for crediting an agent owner with an execution's revenue share
    """

    agent_id: str = Field(..., description="Executed agent")
    owner_account_id: str = Field(..., description="Account owning the agent")
    execution_cost_cents: int = Field(..., description="Execution cost in cents")
    payer_account_id: Optional[str] = Field(
        default=None,
        description="Account that executed the agent (for the self-earnings policy)"
    )
    execution_id: Optional[str] = Field(default=None, description="Execution identifier")

    class Config:
        json_schema_extra = {
            "example": {
                "agent_id": "agent_summarizer",
                "owner_account_id": "acct_owner",
                "execution_cost_cents": 100,
                "payer_account_id": "acct_payer",
                "execution_id": "exec_789",
            }
        }


class EarningsRecordedDTO(BaseModel):
    """
    Response DTO for RecordEarnings

    recorded is False when the self-earnings policy suppressed the
    increment; the split is still reported.
    """

    agent_id: str
    owner_account_id: str
    platform_fee_cents: int
    creator_earnings_cents: int
    total_earnings_cents: int
    pending_earnings_cents: int
    total_executions: int
    recorded: bool = True


class AgentEarningsBreakdownDTO(BaseModel):
    agent_id: str
    total_earnings_cents: int
    pending_earnings_cents: int
    paid_out_cents: int
    total_executions: int
    last_earning_at: Optional[datetime] = None


class EarningsSummaryDTO(BaseModel):
    """Aggregated earnings of an owner across all their agents"""

    owner_account_id: str
    total_earnings_cents: int
    pending_earnings_cents: int
    paid_out_cents: int
    total_executions: int
    agent_breakdown: List[AgentEarningsBreakdownDTO]


class PlatformRevenueSummaryDTO(BaseModel):
    total_platform_revenue_cents: int
    total_creator_earnings_cents: int
    total_executions: int
    average_revenue_per_execution_cents: float


class CreatePayoutCommandDTO(BaseModel):
    account_id: str = Field(..., description="Owner account requesting the payout")
    amount_cents: int = Field(..., description="Requested amount in cents")
    description: Optional[str] = Field(default=None, description="Payout description")

    class Config:
        json_schema_extra = {
            "example": {
                "account_id": "acct_owner",
                "amount_cents": 2500,
                "description": "Monthly payout",
            }
        }


class PayoutResponseDTO(BaseModel):
    payout_id: str
    account_id: str
    amount_cents: int
    status: str
    description: Optional[str] = None
    failure_reason: Optional[str] = None
    destination_ref: Optional[str] = None
    transfer_id: Optional[str] = None
    external_payout_id: Optional[str] = None
    allocations: Dict[str, int] = Field(default_factory=dict)
    created_at: datetime
    processed_at: Optional[datetime] = None


class ProcessPayoutResponseDTO(BaseModel):
    payout_id: str
    status: str
    transfer_id: Optional[str] = None
    external_payout_id: Optional[str] = None
    processed_at: Optional[datetime] = None


class PayoutConfigDTO(BaseModel):
    minimum_payout_cents: int
    maximum_payout_cents: int
    platform_fee_percentage: int
    creator_earnings_percentage: int
    formatted: Dict[str, str]

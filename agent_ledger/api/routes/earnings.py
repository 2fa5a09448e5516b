"""Earnings API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.payout_request import RecordEarningsRequestSchema
from agent_ledger.app.use_cases.payouts.dtos import (
    RecordEarningsCommandDTO,
    EarningsRecordedDTO,
    EarningsSummaryDTO,
    PlatformRevenueSummaryDTO,
)
from agent_ledger.app.use_cases.payouts.record_earnings import RecordEarnings
from agent_ledger.app.use_cases.payouts.get_earnings_summary import GetEarningsSummary
from agent_ledger.app.use_cases.payouts.get_platform_revenue_summary import GetPlatformRevenueSummary
from agent_ledger.adapter.repositories.agent_earnings_repository import SqlAlchemyAgentEarningsRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session, get_policy
from agent_ledger.domain.policy import LedgerPolicy
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/earnings", tags=["Earnings"])


@router.post("/record", response_model=EarningsRecordedDTO, status_code=status.HTTP_200_OK)
async def record_earnings(
    request: RecordEarningsRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    uow = SqlAlchemyUnitOfWork(session)
    earnings_repo = SqlAlchemyAgentEarningsRepository(session)

    command = RecordEarningsCommandDTO(
        agent_id=request.agent_id,
        owner_account_id=request.owner_account_id,
        execution_cost_cents=request.execution_cost_cents,
        payer_account_id=request.payer_account_id,
        execution_id=request.execution_id,
    )
    result = await RecordEarnings(uow, earnings_repo, policy).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/platform/summary", response_model=PlatformRevenueSummaryDTO, status_code=status.HTTP_200_OK)
async def platform_revenue_summary(
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    earnings_repo = SqlAlchemyAgentEarningsRepository(session)

    result = await GetPlatformRevenueSummary(earnings_repo, policy).execute()

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{owner_account_id}", response_model=EarningsSummaryDTO, status_code=status.HTTP_200_OK)
async def earnings_summary(
    owner_account_id: str,
    session: AsyncSession = Depends(get_session),
):
    """
    Earnings of an owner across all their agents.

    Owners without any earnings get an all-zero summary.
    """
    earnings_repo = SqlAlchemyAgentEarningsRepository(session)

    result = await GetEarningsSummary(earnings_repo).execute(owner_account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

"""Payout API Routes

Owners request payouts from their pending earnings; admins process or
reject them.
"""

from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.payout_request import (
    CreatePayoutRequestSchema,
    ProcessPayoutRequestSchema,
    RejectPayoutRequestSchema,
)
from agent_ledger.app.services.payout_rail import PayoutRail
from agent_ledger.app.use_cases.payouts.dtos import (
    CreatePayoutCommandDTO,
    PayoutResponseDTO,
    ProcessPayoutResponseDTO,
    PayoutConfigDTO,
)
from agent_ledger.app.use_cases.payouts.create_payout_request import CreatePayoutRequest
from agent_ledger.app.use_cases.payouts.process_payout import ProcessPayout
from agent_ledger.app.use_cases.payouts.reject_payout import RejectPayout
from agent_ledger.app.use_cases.payouts.list_payouts import ListPayouts
from agent_ledger.app.use_cases.payouts.get_payout_config import GetPayoutConfig
from agent_ledger.adapter.repositories.agent_earnings_repository import SqlAlchemyAgentEarningsRepository
from agent_ledger.adapter.repositories.payout_repository import SqlAlchemyPayoutRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session, get_policy, get_payout_rail
from agent_ledger.domain.policy import LedgerPolicy
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/payouts", tags=["Payouts"])


@router.get("/config", response_model=PayoutConfigDTO, status_code=status.HTTP_200_OK)
async def payout_config(policy: LedgerPolicy = Depends(get_policy)):
    """Payout limits and revenue split shown to owners."""
    return GetPayoutConfig(policy).execute().value


@router.post(
    "",
    response_model=PayoutResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {
            "description": "Not enough pending earnings",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_PENDING_EARNINGS",
                            "message": "Insufficient pending earnings for payout. Required: 2500, Available: 1800",
                            "details": {"required": 2500, "available": 1800},
                        }
                    }
                }
            }
        }
    },
)
async def create_payout(
    request: CreatePayoutRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    """
    Request a payout of pending earnings.

    The amount is reserved immediately: pending earnings drop and paid-out
    rises by the requested amount.

    **Returns:**
    - 201: Payout created in pending status
    - 400: Amount below the minimum or above the maximum
    - 402: Not enough pending earnings
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = CreatePayoutRequest(
        uow,
        SqlAlchemyAgentEarningsRepository(session),
        SqlAlchemyPayoutRepository(session),
        policy,
    )

    result = await use_case.execute(
        CreatePayoutCommandDTO(
            account_id=request.account_id,
            amount_cents=request.amount_cents,
            description=request.description,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/account/{account_id}", response_model=List[PayoutResponseDTO], status_code=status.HTTP_200_OK)
async def list_payouts(
    account_id: str,
    limit: int = Query(50, ge=1, le=200),
    session: AsyncSession = Depends(get_session),
):
    payout_repo = SqlAlchemyPayoutRepository(session)

    result = await ListPayouts(payout_repo).execute(account_id, limit=limit)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{payout_id}/process", response_model=ProcessPayoutResponseDTO, status_code=status.HTTP_200_OK)
async def process_payout(
    payout_id: str,
    request: ProcessPayoutRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
    payout_rail: PayoutRail = Depends(get_payout_rail),
):
    """
    Send a pending payout through the payout rail.

    **Returns:**
    - 200: Payout completed
    - 404: Payout not found
    - 409: Payout is not pending
    - 502: Payout rail unavailable or transfer failed (payout marked failed)
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ProcessPayout(
        uow,
        SqlAlchemyPayoutRepository(session),
        SqlAlchemyAgentEarningsRepository(session),
        payout_rail,
        policy,
    )

    result = await use_case.execute(payout_id, destination_ref=request.destination_ref)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post("/{payout_id}/reject", response_model=PayoutResponseDTO, status_code=status.HTTP_200_OK)
async def reject_payout(
    payout_id: str,
    request: RejectPayoutRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    uow = SqlAlchemyUnitOfWork(session)
    use_case = RejectPayout(
        uow,
        SqlAlchemyPayoutRepository(session),
        SqlAlchemyAgentEarningsRepository(session),
        policy,
    )

    result = await use_case.execute(payout_id, request.reason)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

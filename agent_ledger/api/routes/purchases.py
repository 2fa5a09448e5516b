"""Credit Purchase API Routes

Payment confirmations arrive here once the payment rail reports the
outcome of a checkout session.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.credit_request import (
    CreatePurchaseRequestSchema,
    CompletePurchaseRequestSchema,
    FailPurchaseRequestSchema,
)
from agent_ledger.app.use_cases.credits.dtos import (
    CreatePurchaseCommandDTO,
    CreditPurchaseResponseDTO,
    FailPurchaseCommandDTO,
    ProcessPurchaseResponseDTO,
)
from agent_ledger.app.use_cases.credits.create_credit_purchase import CreateCreditPurchase
from agent_ledger.app.use_cases.credits.process_purchase_success import ProcessPurchaseSuccess
from agent_ledger.app.use_cases.credits.fail_credit_purchase import FailCreditPurchase
from agent_ledger.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from agent_ledger.adapter.repositories.credit_purchase_repository import SqlAlchemyCreditPurchaseRepository
from agent_ledger.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session, get_policy
from agent_ledger.domain.policy import LedgerPolicy
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.post("", response_model=CreditPurchaseResponseDTO, status_code=status.HTTP_201_CREATED)
async def create_purchase(
    request: CreatePurchaseRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    """
    Record a pending credit purchase (1 credit = 1 cent).

    **Returns:**
    - 201: Purchase recorded
    - 400: Amount outside the purchase range
    - 404: Account not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    purchase_repo = SqlAlchemyCreditPurchaseRepository(session)
    account_repo = SqlAlchemyAccountRepository(session)

    command = CreatePurchaseCommandDTO(
        account_id=request.account_id,
        amount_cents=request.amount_cents,
        currency=request.currency,
        checkout_session_id=request.checkout_session_id,
    )

    result = await CreateCreditPurchase(uow, purchase_repo, account_repo, policy).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{purchase_id}/complete",
    response_model=ProcessPurchaseResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def complete_purchase(
    purchase_id: str,
    request: CompletePurchaseRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """
    Credit a paid purchase to its account.

    Safe to call repeatedly for the same purchase: only the first call posts
    credits, later calls report `already_processed: true`.

    **Returns:**
    - 200: Purchase completed (or already completed)
    - 404: Purchase not found
    - 409: Purchase already failed
    """
    uow = SqlAlchemyUnitOfWork(session)
    purchase_repo = SqlAlchemyCreditPurchaseRepository(session)
    account_repo = SqlAlchemyAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    use_case = ProcessPurchaseSuccess(uow, purchase_repo, account_repo, transaction_repo)
    result = await use_case.execute(purchase_id, payment_reference=request.payment_reference)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/{purchase_id}/fail",
    response_model=CreditPurchaseResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def fail_purchase(
    purchase_id: str,
    request: FailPurchaseRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    uow = SqlAlchemyUnitOfWork(session)
    purchase_repo = SqlAlchemyCreditPurchaseRepository(session)

    result = await FailCreditPurchase(uow, purchase_repo).execute(
        FailPurchaseCommandDTO(purchase_id=purchase_id, reason=request.reason)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value

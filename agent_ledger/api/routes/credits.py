"""Credit API Routes

FastAPI routes for balance reads and credit mutations.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.credit_request import AddCreditsRequestSchema, DeductCreditsRequestSchema
from agent_ledger.app.use_cases.credits.dtos import (
    AddCreditsCommandDTO,
    DeductCreditsCommandDTO,
    CreditMutationResponseDTO,
    BalanceResponseDTO,
    SufficientCreditsResponseDTO,
    ListTransactionsResponseDTO,
)
from agent_ledger.app.use_cases.credits.add_credits import AddCredits
from agent_ledger.app.use_cases.credits.deduct_credits import DeductCredits
from agent_ledger.app.use_cases.credits.get_balance import GetBalance
from agent_ledger.app.use_cases.credits.has_sufficient_credits import HasSufficientCredits
from agent_ledger.app.use_cases.credits.list_transactions import ListTransactions
from agent_ledger.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from agent_ledger.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/credits", tags=["Credits"])

INSUFFICIENT_CREDITS_RESPONSE = {
    402: {
        "description": "Insufficient credits",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "INSUFFICIENT_CREDITS",
                        "message": "Insufficient credits. Required: 500, Available: 120",
                        "details": {"required": 500, "available": 120},
                    }
                }
            }
        }
    },
}


@router.post(
    "/add",
    response_model=CreditMutationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=INSUFFICIENT_CREDITS_RESPONSE,
)
async def add_credits(
    request: AddCreditsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Apply a signed balance mutation and append the ledger entry.

    **Returns:**
    - 200: Entry posted
    - 400: Zero amount
    - 402: A negative amount would drive the balance below zero
    - 404: Account not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    command = AddCreditsCommandDTO(
        account_id=request.account_id,
        amount_cents=request.amount_cents,
        transaction_type=request.transaction_type,
        description=request.description,
        reference_type=request.reference_type,
        reference_id=request.reference_id,
        metadata=request.metadata,
    )

    result = await AddCredits(uow, account_repo, transaction_repo).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/deduct",
    response_model=CreditMutationResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=INSUFFICIENT_CREDITS_RESPONSE,
)
async def deduct_credits(
    request: DeductCreditsRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Charge an account for usage.

    **Returns:**
    - 200: Credits deducted
    - 402: Insufficient credits
    - 404: Account not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyAccountRepository(session)
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    command = DeductCreditsCommandDTO(
        account_id=request.account_id,
        amount_cents=request.amount_cents,
        description=request.description,
        reference_type=request.reference_type,
        reference_id=request.reference_id,
        metadata=request.metadata,
    )

    result = await DeductCredits(uow, account_repo, transaction_repo).execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{account_id}/balance",
    response_model=BalanceResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def get_balance(
    account_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get the current balance of an account.

    **Returns:**
    - 200: Balance retrieved successfully
    - 404: Account not found
    """
    account_repo = SqlAlchemyAccountRepository(session)

    result = await GetBalance(account_repo).execute(account_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{account_id}/check",
    response_model=SufficientCreditsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def check_credits(
    account_id: str,
    amount_cents: int = Query(..., ge=0),
    session: AsyncSession = Depends(get_session)
):
    """Advisory pre-check; the authoritative check happens inside the deduction."""
    account_repo = SqlAlchemyAccountRepository(session)

    result = await HasSufficientCredits(account_repo).execute(account_id, amount_cents)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{account_id}/transactions",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    account_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    session: AsyncSession = Depends(get_session)
):
    """Paginated transaction history, newest first."""
    transaction_repo = SqlAlchemyCreditTransactionRepository(session)

    result = await ListTransactions(transaction_repo).execute(account_id, limit=limit, offset=offset)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

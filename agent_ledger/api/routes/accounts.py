"""Account API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.credit_request import OpenAccountRequestSchema
from agent_ledger.app.use_cases.credits.dtos import OpenAccountCommandDTO, AccountResponseDTO
from agent_ledger.app.use_cases.credits.open_account import OpenAccount
from agent_ledger.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/accounts", tags=["Accounts"])


@router.post("", response_model=AccountResponseDTO, status_code=status.HTTP_200_OK)
async def open_account(
    request: OpenAccountRequestSchema,
    session: AsyncSession = Depends(get_session)
):
    """
    Open an account with a zero balance.

    Idempotent: posting an existing `account_id` returns that account with
    `created: false`.
    """
    uow = SqlAlchemyUnitOfWork(session)
    account_repo = SqlAlchemyAccountRepository(session)

    use_case = OpenAccount(uow, account_repo)
    result = await use_case.execute(
        OpenAccountCommandDTO(account_id=request.account_id, email=request.email)
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value

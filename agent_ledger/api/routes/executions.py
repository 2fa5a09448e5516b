"""Execution billing API Routes"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from agent_ledger.api.schemas.credit_request import ChargeExecutionRequestSchema
from agent_ledger.app.use_cases.credits.dtos import ChargeExecutionCommandDTO, ChargeExecutionResponseDTO
from agent_ledger.app.use_cases.credits.charge_execution import ChargeExecution
from agent_ledger.adapter.repositories.account_repository import SqlAlchemyAccountRepository
from agent_ledger.adapter.repositories.credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from agent_ledger.adapter.repositories.agent_earnings_repository import SqlAlchemyAgentEarningsRepository
from agent_ledger.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from agent_ledger.depends import get_session, get_policy
from agent_ledger.domain.policy import LedgerPolicy
from agent_ledger.api.error import ClientError

router = APIRouter(prefix="/executions", tags=["Executions"])


@router.post("/charge", response_model=ChargeExecutionResponseDTO, status_code=status.HTTP_200_OK)
async def charge_execution(
    request: ChargeExecutionRequestSchema,
    session: AsyncSession = Depends(get_session),
    policy: LedgerPolicy = Depends(get_policy),
):
    """
    Charge a paid agent execution.

    Deducts the execution cost from the payer and credits the owner's
    earnings atomically.

    **Returns:**
    - 200: Execution charged
    - 402: Payer has insufficient credits (nothing is written)
    - 404: Payer account not found
    """
    uow = SqlAlchemyUnitOfWork(session)
    use_case = ChargeExecution(
        uow,
        SqlAlchemyAccountRepository(session),
        SqlAlchemyCreditTransactionRepository(session),
        SqlAlchemyAgentEarningsRepository(session),
        policy,
    )

    command = ChargeExecutionCommandDTO(
        payer_account_id=request.payer_account_id,
        agent_id=request.agent_id,
        owner_account_id=request.owner_account_id,
        execution_cost_cents=request.execution_cost_cents,
        execution_id=request.execution_id,
        description=request.description,
        metadata=request.metadata,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value

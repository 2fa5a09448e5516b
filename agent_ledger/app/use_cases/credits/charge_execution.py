"""ChargeExecution Use Case

Bills a paid agent execution: debits the payer and credits the agent
owner's earnings in one unit of work.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.use_cases.errors import invalid_amount, internal_error, is_whole_cents
from agent_ledger.app.use_cases.payouts.earnings import EarningsPosting
from agent_ledger.domain.credit_transaction import TransactionType
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import ChargeExecutionCommandDTO, ChargeExecutionResponseDTO
from .posting import CreditPosting

logger = logging.getLogger(__name__)


class ChargeExecution:
    """
    Use Case: Charge an agent execution

    Business Rules:
    1. The payer is debited execution_cost_cents as a usage entry with
       reference_type="execution"
    2. The owner is credited the creator share of the same cost
    3. Both writes commit together; if either fails nothing is written
    4. INSUFFICIENT_CREDITS leaves both balance and earnings untouched
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
        earnings_repo: AgentEarningsRepository,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.posting = CreditPosting(account_repo, transaction_repo)
        self.earnings = EarningsPosting(earnings_repo, policy)

    async def execute(self, command: ChargeExecutionCommandDTO) -> Result[ChargeExecutionResponseDTO]:
        cost = command.execution_cost_cents
        if not is_whole_cents(cost) or cost <= 0:
            return Return.err(invalid_amount("Execution cost must be a positive whole number of cents", cost))

        try:
            metadata = dict(command.metadata or {})
            metadata.setdefault("agent_id", command.agent_id)

            debit = await self.posting.post(
                account_id=command.payer_account_id,
                amount_cents=-cost,
                transaction_type=TransactionType.USAGE,
                description=command.description or f"Agent execution: {command.agent_id}",
                reference_type="execution",
                reference_id=command.execution_id,
                metadata=metadata,
            )
            if debit.is_err():
                await self.uow.rollback()
                return debit

            earned = await self.earnings.record(
                agent_id=command.agent_id,
                owner_account_id=command.owner_account_id,
                execution_cost_cents=cost,
                payer_account_id=command.payer_account_id,
            )
            if earned.is_err():
                await self.uow.rollback()
                return earned

            await self.uow.commit()

            logger.info(
                f"Charged {cost} cents to account {command.payer_account_id} for agent "
                f"{command.agent_id} (execution {command.execution_id}); "
                f"owner {command.owner_account_id} earned {earned.value.creator_earnings_cents}"
            )
            return Return.ok(
                ChargeExecutionResponseDTO(
                    transaction=debit.value.transaction,
                    new_balance_cents=debit.value.new_balance_cents,
                    platform_fee_cents=earned.value.platform_fee_cents,
                    creator_earnings_cents=earned.value.creator_earnings_cents,
                    earnings_recorded=earned.value.recorded,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"ChargeExecution failed for execution {command.execution_id}: {e}")
            return Return.err(internal_error("Failed to charge execution", e))

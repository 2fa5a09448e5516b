"""RecordEarnings Use Case

Credits the agent owner with the creator share of a billable execution.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.use_cases.errors import internal_error
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import RecordEarningsCommandDTO, EarningsRecordedDTO
from .earnings import EarningsPosting

logger = logging.getLogger(__name__)


class RecordEarnings:
    """
    Use Case: Record earnings for an agent execution

    Business Rules:
    1. Split: platform_fee = floor(cost * fee% / 100), creator = cost - fee
    2. Upsert: first earning creates the (agent, owner) row, later ones
       increment total, pending and total_executions atomically
    3. Self-execution: recorded unless allow_self_earnings is disabled
    """

    def __init__(
        self,
        uow: UnitOfWork,
        earnings_repo: AgentEarningsRepository,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.earnings = EarningsPosting(earnings_repo, policy)

    async def execute(self, command: RecordEarningsCommandDTO) -> Result[EarningsRecordedDTO]:
        try:
            result = await self.earnings.record(
                agent_id=command.agent_id,
                owner_account_id=command.owner_account_id,
                execution_cost_cents=command.execution_cost_cents,
                payer_account_id=command.payer_account_id,
            )

            if result.is_err() or not result.value.recorded:
                await self.uow.rollback()
                if result.is_ok():
                    logger.info(
                        f"Self-execution of agent {command.agent_id} by owner "
                        f"{command.owner_account_id}: earnings not recorded"
                    )
                return result

            await self.uow.commit()

            logger.info(
                f"Recorded {result.value.creator_earnings_cents} cents for agent {command.agent_id} "
                f"(owner {command.owner_account_id}, execution {command.execution_id}, "
                f"platform fee {result.value.platform_fee_cents})"
            )
            return result

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"RecordEarnings failed for agent {command.agent_id}: {e}")
            return Return.err(internal_error("Failed to record earnings", e))

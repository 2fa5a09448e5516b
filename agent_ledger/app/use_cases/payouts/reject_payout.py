"""RejectPayout Use Case

Admin decision to fail a payout before it is sent to the rail
(pending -> failed).
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.repositories.payout_repository import PayoutRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, not_found, internal_error
from agent_ledger.domain.payout import PayoutStatus
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import PayoutResponseDTO
from .reservation import release_reservation, to_payout_dto

logger = logging.getLogger(__name__)


class RejectPayout:

    def __init__(
        self,
        uow: UnitOfWork,
        payout_repo: PayoutRepository,
        earnings_repo: AgentEarningsRepository,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.payout_repo = payout_repo
        self.earnings_repo = earnings_repo
        self.policy = policy

    async def execute(self, payout_id: str, reason: str) -> Result[PayoutResponseDTO]:
        try:
            payout = await self.payout_repo.get_by_id(payout_id, for_update=True)

            if not payout:
                await self.uow.rollback()
                return Return.err(not_found("Payout", payout_id))

            if payout.status != PayoutStatus.PENDING:
                error = ledger_error(
                    ErrorCode.ALREADY_PROCESSED,
                    f"Payout {payout_id} is not in pending status",
                    status=payout.status.value,
                )
                await self.uow.rollback()
                return Return.err(error)

            payout.transition_to(PayoutStatus.FAILED)
            payout.failure_reason = reason
            if self.policy.restore_earnings_on_failed_payout:
                await release_reservation(self.earnings_repo, payout)

            payout = await self.payout_repo.update(payout)
            await self.uow.commit()

            logger.warning(f"Payout {payout_id} rejected: {reason}")
            return Return.ok(to_payout_dto(payout))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"RejectPayout failed for payout {payout_id}: {e}")
            return Return.err(internal_error("Failed to reject payout", e))

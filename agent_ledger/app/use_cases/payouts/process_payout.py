"""ProcessPayout Use Case

Settles a pending payout through the external payout rail.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.services.payout_rail import PayoutRail, PayoutTransfer
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.repositories.payout_repository import PayoutRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, not_found, internal_error
from agent_ledger.domain.payout import Payout, PayoutStatus
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import ProcessPayoutResponseDTO
from .reservation import release_reservation

logger = logging.getLogger(__name__)


class ProcessPayout:
    """
    Use Case: Process a payout

    Business Rules:
    1. Only pending payouts are processed; anything else is
       ALREADY_PROCESSED and has no side effects
    2. No lock is held while the rail is called:
       - transaction 1 locks the payout and moves it pending -> processing
       - the rail call happens outside any transaction
       - transaction 2 moves it processing -> completed | failed
    3. A rail failure is stored as failure_reason and reported as
       EXTERNAL_SERVICE_ERROR; the payout record is never lost
    4. With restore_earnings_on_failed_payout the reservation returns to
       pending earnings in transaction 2
    """

    def __init__(
        self,
        uow: UnitOfWork,
        payout_repo: PayoutRepository,
        earnings_repo: AgentEarningsRepository,
        payout_rail: PayoutRail,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.payout_repo = payout_repo
        self.earnings_repo = earnings_repo
        self.payout_rail = payout_rail
        self.policy = policy

    async def execute(self, payout_id: str, destination_ref: Optional[str] = None) -> Result[ProcessPayoutResponseDTO]:
        claimed = await self._claim(payout_id, destination_ref)
        if claimed.is_err():
            return claimed
        payout = claimed.value

        transfer: Optional[PayoutTransfer] = None
        rail_error: Optional[Exception] = None
        try:
            transfer = await self.payout_rail.initiate_transfer(payout, payout.destination_ref)
        except Exception as e:
            rail_error = e
            logger.warning(f"Payout rail failed for payout {payout_id}: {e}")

        return await self._settle(payout_id, transfer, rail_error)

    async def _claim(self, payout_id: str, destination_ref: Optional[str]) -> Result[Payout]:
        """Transaction 1: pending -> processing"""
        try:
            payout = await self.payout_repo.get_by_id(payout_id, for_update=True)

            if not payout:
                await self.uow.rollback()
                return Return.err(not_found("Payout", payout_id))

            # Rollback expires loaded rows, so errors are built before it
            if payout.status != PayoutStatus.PENDING:
                error = ledger_error(
                    ErrorCode.ALREADY_PROCESSED,
                    f"Payout {payout_id} is not in pending status",
                    reason=f"status={payout.status.value}",
                    status=payout.status.value,
                )
                await self.uow.rollback()
                return Return.err(error)

            if not self.payout_rail.is_configured():
                error = ledger_error(
                    ErrorCode.EXTERNAL_SERVICE_ERROR,
                    "Payout rail is not configured",
                    payout_id=payout_id,
                    status=payout.status.value,
                )
                await self.uow.rollback()
                return Return.err(error)

            payout.transition_to(PayoutStatus.PROCESSING)
            payout.destination_ref = destination_ref or payout.destination_ref
            payout = await self.payout_repo.update(payout)
            await self.uow.commit()

            logger.info(f"Payout {payout_id} moved to processing")
            return Return.ok(payout)

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"ProcessPayout failed to claim payout {payout_id}: {e}")
            return Return.err(internal_error("Failed to start payout processing", e))

    async def _settle(
        self,
        payout_id: str,
        transfer: Optional[PayoutTransfer],
        rail_error: Optional[Exception],
    ) -> Result[ProcessPayoutResponseDTO]:
        """Transaction 2: processing -> completed | failed"""
        try:
            payout = await self.payout_repo.get_by_id(payout_id, for_update=True)

            if rail_error is None:
                payout.transition_to(PayoutStatus.COMPLETED)
                payout.transfer_id = transfer.transfer_id
                payout.external_payout_id = transfer.payout_id
            else:
                payout.transition_to(PayoutStatus.FAILED)
                payout.failure_reason = str(rail_error) or type(rail_error).__name__
                if self.policy.restore_earnings_on_failed_payout:
                    released = await release_reservation(self.earnings_repo, payout)
                    logger.info(f"Released {released} cents of failed payout {payout_id} back to pending")

            payout = await self.payout_repo.update(payout)
            await self.uow.commit()

        except Exception as e:
            await self.uow.rollback()
            # The rail may already have moved money; this needs manual reconciliation
            logger.critical(
                f"Payout {payout_id} left in processing after rail call "
                f"(transfer={transfer.transfer_id if transfer else None}): {e}"
            )
            return Return.err(
                ledger_error(
                    ErrorCode.INTERNAL_ERROR,
                    "Failed to record payout outcome",
                    reason=str(e),
                    payout_id=payout_id,
                    transfer_id=transfer.transfer_id if transfer else None,
                )
            )

        if rail_error is not None:
            return Return.err(
                ledger_error(
                    ErrorCode.EXTERNAL_SERVICE_ERROR,
                    f"Payout {payout_id} failed at the payout rail",
                    reason=payout.failure_reason,
                    payout_id=payout_id,
                    status=PayoutStatus.FAILED.value,
                )
            )

        logger.info(f"Payout {payout_id} completed with transfer {payout.transfer_id}")
        return Return.ok(
            ProcessPayoutResponseDTO(
                payout_id=payout.id,
                status=PayoutStatus.COMPLETED.value,
                transfer_id=payout.transfer_id,
                external_payout_id=payout.external_payout_id,
                processed_at=payout.processed_at,
            )
        )

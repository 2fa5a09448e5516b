"""CreatePayoutRequest Use Case

Creates a payout and reserves the requested amount from the owner's
pending earnings in the same transaction.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.repositories.payout_repository import PayoutRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, invalid_amount, internal_error, is_whole_cents
from agent_ledger.domain.payout import Payout, PayoutStatus
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import CreatePayoutCommandDTO, PayoutResponseDTO
from .get_payout_config import format_cents
from .reservation import plan_reservation, apply_reservation, to_payout_dto

logger = logging.getLogger(__name__)


class CreatePayoutRequest:
    """
    Use Case: Request a payout of pending earnings

    Business Rules:
    1. minimum_payout_cents <= amount <= maximum_payout_cents
    2. amount <= sum of pending earnings over all the owner's agents
    3. Reservation at request time: pending -> paid_out moves immediately,
       so a second concurrent request cannot spend the same pool
    4. All the owner's earnings rows are locked for the whole region, and
       the payout insert plus every row update commit together

    Flow:
    1. Validate amount
    2. Lock the owner's earnings rows (SELECT FOR UPDATE)
    3. Check the summed pending pool
    4. Create the pending payout with its allocation
    5. Move the allocation from pending to paid_out row by row
    6. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        earnings_repo: AgentEarningsRepository,
        payout_repo: PayoutRepository,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.earnings_repo = earnings_repo
        self.payout_repo = payout_repo
        self.policy = policy

    async def execute(self, command: CreatePayoutCommandDTO) -> Result[PayoutResponseDTO]:
        validation_error = self._validate_amount(command.amount_cents)
        if validation_error:
            return Return.err(validation_error)

        try:
            rows = await self.earnings_repo.list_by_owner(command.account_id, for_update=True)
            available = sum(row.pending_earnings_cents for row in rows)

            if command.amount_cents > available:
                await self.uow.rollback()
                return Return.err(
                    ledger_error(
                        ErrorCode.INSUFFICIENT_PENDING_EARNINGS,
                        f"Insufficient pending earnings for payout. "
                        f"Required: {command.amount_cents}, Available: {available}",
                        reason=f"pending={available}, required={command.amount_cents}",
                        required=command.amount_cents,
                        available=available,
                    )
                )

            allocations = plan_reservation(rows, command.amount_cents)

            payout = await self.payout_repo.create(
                Payout(
                    account_id=command.account_id,
                    amount_cents=command.amount_cents,
                    status=PayoutStatus.PENDING,
                    description=command.description or f"Payout of {format_cents(command.amount_cents)}",
                    allocations=allocations,
                )
            )

            await apply_reservation(self.earnings_repo, rows, allocations)

            await self.uow.commit()

            logger.info(
                f"Payout {payout.id} requested by account {command.account_id} for "
                f"{command.amount_cents} cents across {len(allocations)} earnings rows"
            )
            return Return.ok(to_payout_dto(payout))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"CreatePayoutRequest failed for account {command.account_id}: {e}")
            return Return.err(internal_error("Failed to create payout request", e))

    def _validate_amount(self, amount_cents):
        if not is_whole_cents(amount_cents) or amount_cents <= 0:
            return invalid_amount("Payout amount must be a positive whole number of cents", amount_cents)
        if amount_cents < self.policy.minimum_payout_cents:
            return invalid_amount(
                f"Minimum payout amount is {format_cents(self.policy.minimum_payout_cents)}", amount_cents
            )
        if amount_cents > self.policy.maximum_payout_cents:
            return invalid_amount(
                f"Maximum payout amount is {format_cents(self.policy.maximum_payout_cents)}", amount_cents
            )
        return None

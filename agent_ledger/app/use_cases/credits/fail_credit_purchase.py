"""FailCreditPurchase Use Case

Marks a pending purchase failed when the payment fails or the checkout
session expires.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.credit_purchase_repository import CreditPurchaseRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, not_found, internal_error
from agent_ledger.domain.credit_purchase import PurchaseStatus
from .create_credit_purchase import to_purchase_dto
from .dtos import FailPurchaseCommandDTO, CreditPurchaseResponseDTO

logger = logging.getLogger(__name__)


class FailCreditPurchase:

    def __init__(self, uow: UnitOfWork, purchase_repo: CreditPurchaseRepository):
        self.uow = uow
        self.purchase_repo = purchase_repo

    async def execute(self, command: FailPurchaseCommandDTO) -> Result[CreditPurchaseResponseDTO]:
        try:
            purchase = await self.purchase_repo.get_by_id(command.purchase_id, for_update=True)

            if not purchase:
                await self.uow.rollback()
                return Return.err(not_found("CreditPurchase", command.purchase_id))

            if purchase.is_terminal:
                error = ledger_error(
                    ErrorCode.ALREADY_PROCESSED,
                    f"Credit purchase {purchase.id} is already {purchase.status.value}",
                    status=purchase.status.value,
                )
                await self.uow.rollback()
                return Return.err(error)

            purchase.status = PurchaseStatus.FAILED
            purchase.failure_reason = command.reason
            purchase = await self.purchase_repo.update(purchase)
            await self.uow.commit()

            logger.warning(f"Credit purchase {purchase.id} failed: {command.reason}")
            return Return.ok(to_purchase_dto(purchase))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"FailCreditPurchase failed for purchase {command.purchase_id}: {e}")
            return Return.err(internal_error("Failed to mark credit purchase as failed", e))

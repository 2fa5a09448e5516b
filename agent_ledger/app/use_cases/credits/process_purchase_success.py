"""ProcessPurchaseSuccess Use Case

Turns a confirmed payment into credits. Payment confirmations can be
delivered more than once, so the transition is idempotent.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.repositories.credit_purchase_repository import CreditPurchaseRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, not_found, internal_error
from agent_ledger.domain.credit_purchase import CreditPurchase, PurchaseStatus
from agent_ledger.domain.credit_transaction import TransactionType
from agent_ledger.domain.base import utc_now
from .dtos import ProcessPurchaseResponseDTO
from .posting import CreditPosting

logger = logging.getLogger(__name__)


class ProcessPurchaseSuccess:
    """
    Use Case: Complete a credit purchase

    Business Rules:
    1. Idempotency: an already completed purchase returns success with
       already_processed=True and posts nothing
    2. A failed purchase cannot be completed (ALREADY_PROCESSED)
    3. The status flip and the 'purchase' entry commit together; if the
       credit posting fails the purchase stays pending and can be retried
    4. The purchase row is locked so duplicate confirmations are serialized

    Flow:
    1. Get purchase with lock (SELECT FOR UPDATE)
    2. Short-circuit on terminal status
    3. Mark completed with timestamp and payment reference
    4. Post the purchased credits to the account
    5. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: CreditPurchaseRepository,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.posting = CreditPosting(account_repo, transaction_repo)

    async def execute(
        self, purchase_id: str, payment_reference: Optional[str] = None
    ) -> Result[ProcessPurchaseResponseDTO]:
        """
        Execute purchase completion

        Args:
            purchase_id: CreditPurchase identifier
            payment_reference: External payment reference (e.g., payment intent id)

        Returns:
            Result[ProcessPurchaseResponseDTO]: completion details or error
        """
        try:
            purchase = await self.purchase_repo.get_by_id(purchase_id, for_update=True)

            if not purchase:
                await self.uow.rollback()
                return Return.err(not_found("CreditPurchase", purchase_id))

            # Rollback expires loaded rows, so results are built before it
            if purchase.status == PurchaseStatus.COMPLETED:
                response = ProcessPurchaseResponseDTO(
                    purchase_id=purchase.id,
                    status=PurchaseStatus.COMPLETED.value,
                    already_processed=True,
                )
                await self.uow.rollback()
                logger.info(f"Credit purchase {purchase_id} already completed, skipping")
                return Return.ok(response)

            if purchase.status == PurchaseStatus.FAILED:
                error = ledger_error(
                    ErrorCode.ALREADY_PROCESSED,
                    f"Credit purchase {purchase_id} has failed and cannot be completed",
                    reason=purchase.failure_reason,
                    status=purchase.status.value,
                )
                await self.uow.rollback()
                return Return.err(error)

            purchase.status = PurchaseStatus.COMPLETED
            purchase.completed_at = utc_now()
            purchase.payment_reference = payment_reference or purchase.payment_reference
            await self.purchase_repo.update(purchase)

            posted = await self.posting.post(
                account_id=purchase.account_id,
                amount_cents=purchase.credits_purchased,
                transaction_type=TransactionType.PURCHASE,
                description=f"Credit purchase - {purchase.credits_purchased} credits",
                reference_type="purchase",
                reference_id=purchase.id,
                metadata=self._metadata(purchase),
                credit_purchase_id=purchase.id,
            )

            if posted.is_err():
                await self.uow.rollback()
                return posted

            await self.uow.commit()

            logger.info(
                f"Completed credit purchase {purchase.id}: "
                f"{purchase.credits_purchased} credits to account {purchase.account_id}"
            )

            return Return.ok(
                ProcessPurchaseResponseDTO(
                    purchase_id=purchase.id,
                    status=PurchaseStatus.COMPLETED.value,
                    already_processed=False,
                    transaction=posted.value.transaction,
                    new_balance_cents=posted.value.new_balance_cents,
                )
            )

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"ProcessPurchaseSuccess failed for purchase {purchase_id}: {e}")
            return Return.err(internal_error("Failed to process credit purchase", e))

    @staticmethod
    def _metadata(purchase: CreditPurchase) -> dict:
        return {
            "purchase_amount_cents": purchase.amount_cents,
            "currency": purchase.currency,
            "payment_reference": purchase.payment_reference,
        }

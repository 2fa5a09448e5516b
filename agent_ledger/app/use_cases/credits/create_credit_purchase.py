"""CreateCreditPurchase Use Case

Records the pending intent to buy credits when a checkout session is
opened. Credits are only granted by ProcessPurchaseSuccess.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_purchase_repository import CreditPurchaseRepository
from agent_ledger.app.use_cases.errors import not_found, invalid_amount, internal_error, is_whole_cents
from agent_ledger.domain.credit_purchase import CreditPurchase, PurchaseStatus
from agent_ledger.domain.policy import LedgerPolicy
from .dtos import CreatePurchaseCommandDTO, CreditPurchaseResponseDTO

logger = logging.getLogger(__name__)


def to_purchase_dto(purchase: CreditPurchase) -> CreditPurchaseResponseDTO:
    status = purchase.status
    return CreditPurchaseResponseDTO(
        purchase_id=purchase.id,
        account_id=purchase.account_id,
        amount_cents=purchase.amount_cents,
        credits_purchased=purchase.credits_purchased,
        currency=purchase.currency,
        status=status.value if hasattr(status, "value") else status,
        checkout_session_id=purchase.checkout_session_id,
        payment_reference=purchase.payment_reference,
        failure_reason=purchase.failure_reason,
        created_at=purchase.created_at,
        completed_at=purchase.completed_at,
    )


class CreateCreditPurchase:
    """
    Use Case: Record a pending credit purchase

    Business Rules:
    1. Amount must lie within the configured purchase range
    2. 1 credit = 1 cent, so credits_purchased = amount_cents
    3. The account must exist
    """

    def __init__(
        self,
        uow: UnitOfWork,
        purchase_repo: CreditPurchaseRepository,
        account_repo: AccountRepository,
        policy: LedgerPolicy,
    ):
        self.uow = uow
        self.purchase_repo = purchase_repo
        self.account_repo = account_repo
        self.policy = policy

    async def execute(self, command: CreatePurchaseCommandDTO) -> Result[CreditPurchaseResponseDTO]:
        amount = command.amount_cents
        if not is_whole_cents(amount):
            return Return.err(invalid_amount("Amount must be a whole number of cents", amount))
        if amount < self.policy.minimum_purchase_cents:
            return Return.err(
                invalid_amount(f"Minimum purchase amount is {self.policy.minimum_purchase_cents} cents", amount)
            )
        if amount > self.policy.maximum_purchase_cents:
            return Return.err(
                invalid_amount(f"Maximum purchase amount is {self.policy.maximum_purchase_cents} cents", amount)
            )

        try:
            account = await self.account_repo.get_by_id(command.account_id)
            if not account:
                return Return.err(not_found("Account", command.account_id))

            purchase = await self.purchase_repo.create(
                CreditPurchase(
                    account_id=account.id,
                    amount_cents=amount,
                    credits_purchased=amount,
                    currency=(command.currency or self.policy.default_currency).lower(),
                    checkout_session_id=command.checkout_session_id,
                    status=PurchaseStatus.PENDING,
                )
            )
            await self.uow.commit()

            logger.info(f"Created pending credit purchase {purchase.id} for account {account.id}")
            return Return.ok(to_purchase_dto(purchase))

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"CreateCreditPurchase failed for account {command.account_id}: {e}")
            return Return.err(internal_error("Failed to create credit purchase", e))

"""AddCredits Use Case

Applies a signed balance mutation to an account and appends the matching
ledger entry, atomically and serialized per account.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.use_cases.errors import internal_error
from .dtos import AddCreditsCommandDTO, CreditMutationResponseDTO
from .posting import CreditPosting

logger = logging.getLogger(__name__)


class AddCredits:
    """
    Use Case: Add (or, with a negative amount, remove) credits

    Business Rules:
    1. Pessimistic locking: the account row is locked for the whole operation
    2. Non-negative balance: a debit that would go below zero is rejected
       with INSUFFICIENT_CREDITS and nothing is written
    3. Atomic updates: balance write and transaction insert commit together
    4. Storage failures roll back and return INTERNAL_ERROR
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.posting = CreditPosting(account_repo, transaction_repo)

    async def execute(self, command: AddCreditsCommandDTO) -> Result[CreditMutationResponseDTO]:
        """
        Execute the balance mutation

        Args:
            command: AddCreditsCommandDTO with account_id, signed amount and kind

        Returns:
            Result[CreditMutationResponseDTO]: posted entry and new balance, or error
        """
        try:
            result = await self.posting.post(
                account_id=command.account_id,
                amount_cents=command.amount_cents,
                transaction_type=command.transaction_type,
                description=command.description,
                reference_type=command.reference_type,
                reference_id=command.reference_id,
                metadata=command.metadata,
                credit_purchase_id=command.credit_purchase_id,
            )

            if result.is_err():
                await self.uow.rollback()
                return result

            await self.uow.commit()

            logger.info(
                f"Posted {command.transaction_type.value} of {command.amount_cents} cents "
                f"to account {command.account_id}, balance now {result.value.new_balance_cents}"
            )
            return result

        except Exception as e:
            await self.uow.rollback()
            logger.error(f"AddCredits failed for account {command.account_id}: {e}")
            return Return.err(internal_error("Failed to add credits", e))

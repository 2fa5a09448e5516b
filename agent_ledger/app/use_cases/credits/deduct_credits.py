"""DeductCredits Use Case

Charges an account for usage. The caller passes the magnitude; the entry
is recorded as a negative 'usage' mutation through AddCredits.
"""

from libs.result import Result, Return
from agent_ledger.app.services.unit_of_work import UnitOfWork
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.use_cases.errors import invalid_amount, is_whole_cents
from agent_ledger.domain.credit_transaction import TransactionType
from .add_credits import AddCredits
from .dtos import AddCreditsCommandDTO, DeductCreditsCommandDTO, CreditMutationResponseDTO


class DeductCredits:
    """
    Use Case: Deduct credits from an account

    Same atomicity contract as AddCredits; the insufficient-balance check
    inside the locked region is the authoritative one.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.add_credits = AddCredits(uow, account_repo, transaction_repo)

    async def execute(self, command: DeductCreditsCommandDTO) -> Result[CreditMutationResponseDTO]:
        if not is_whole_cents(command.amount_cents) or command.amount_cents <= 0:
            return Return.err(invalid_amount("Deduction must be a positive whole number of cents", command.amount_cents))

        return await self.add_credits.execute(
            AddCreditsCommandDTO(
                account_id=command.account_id,
                amount_cents=-command.amount_cents,
                transaction_type=TransactionType.USAGE,
                description=command.description,
                reference_id=command.reference_id,
                reference_type=command.reference_type,
                metadata=command.metadata,
            )
        )

"""HasSufficientCredits Use Case

Advisory pre-check used before dispatching an execution. It takes no lock,
so the answer can be stale by the time the deduction runs; DeductCredits
remains the authoritative check.
"""

import logging
from libs.result import Result, Return
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.use_cases.errors import invalid_amount, is_whole_cents
from .dtos import SufficientCreditsResponseDTO

logger = logging.getLogger(__name__)


class HasSufficientCredits:

    def __init__(self, account_repo: AccountRepository):
        self.account_repo = account_repo

    async def execute(self, account_id: str, amount_cents: int) -> Result[SufficientCreditsResponseDTO]:
        if not is_whole_cents(amount_cents) or amount_cents < 0:
            return Return.err(invalid_amount("Amount must be a non-negative whole number of cents", amount_cents))

        account = await self.account_repo.get_by_id(account_id)

        # Unknown accounts can never afford anything
        current_balance = account.balance_cents if account else 0
        if not account:
            logger.debug(f"Sufficiency check for unknown account {account_id}")

        return Return.ok(
            SufficientCreditsResponseDTO(
                account_id=account_id,
                sufficient=account is not None and current_balance >= amount_cents,
                current_balance_cents=current_balance,
                required_cents=amount_cents,
            )
        )

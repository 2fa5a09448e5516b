"""ReconcileLedger Use Case

Audits account balances against their transaction history and earnings
rows against their own totals.
"""

import logging
import time
from typing import List, Optional
from libs.result import Result, Return
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.repositories.agent_earnings_repository import AgentEarningsRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error
from agent_ledger.domain.credit_transaction import CreditTransaction
from agent_ledger.domain.base import utc_now
from .dtos import LedgerDiscrepancyDTO, EarningsDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)


def find_broken_chain(history: List[CreditTransaction]) -> Optional[int]:
    """
    Return the sequence of the first entry breaking the balance chain

    Entries must be numbered 1..n, start from a zero balance, satisfy
    after = before + amount and link each before to the previous after.
    """
    previous_after = 0
    for expected_sequence, txn in enumerate(history, start=1):
        if (
            txn.sequence != expected_sequence
            or txn.balance_before_cents != previous_after
            or txn.balance_after_cents != txn.balance_before_cents + txn.amount_cents
        ):
            return txn.sequence
        previous_after = txn.balance_after_cents
    return None


class ReconcileLedger:
    """
    Use Case: Reconcile the ledger

    Business Rules:
    1. balance_cents of every account equals the sum of its transactions
    2. The before/after chain of every account is unbroken
    3. total = pending + paid_out for every earnings row
    4. Does NOT modify any data (read-only reconciliation)
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
        earnings_repo: AgentEarningsRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.earnings_repo = earnings_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = utc_now()

        try:
            logger.info("Starting credit ledger reconciliation")

            accounts = await self.account_repo.get_all()
            discrepancies: List[LedgerDiscrepancyDTO] = []

            for account in accounts:
                transaction_sum = await self.transaction_repo.get_transaction_sum_by_account(account.id)
                history = await self.transaction_repo.get_history(account.id)
                broken_chain_at = find_broken_chain(history)

                if account.balance_cents != transaction_sum or broken_chain_at is not None:
                    discrepancy = LedgerDiscrepancyDTO(
                        account_id=account.id,
                        balance_cents=account.balance_cents,
                        calculated_balance_cents=transaction_sum,
                        discrepancy_cents=account.balance_cents - transaction_sum,
                        broken_chain_at=broken_chain_at,
                    )
                    discrepancies.append(discrepancy)
                    logger.warning(
                        f"Discrepancy found for account {account.id}: "
                        f"balance={account.balance_cents}, transaction_sum={transaction_sum}, "
                        f"broken_chain_at={broken_chain_at}"
                    )

            earnings_rows = await self.earnings_repo.get_all()
            earnings_discrepancies: List[EarningsDiscrepancyDTO] = []

            for row in earnings_rows:
                if not row.is_consistent:
                    earnings_discrepancies.append(
                        EarningsDiscrepancyDTO(
                            earnings_id=row.id,
                            agent_id=row.agent_id,
                            owner_account_id=row.owner_account_id,
                            total_earnings_cents=row.total_earnings_cents,
                            pending_earnings_cents=row.pending_earnings_cents,
                            paid_out_cents=row.paid_out_cents,
                        )
                    )
                    logger.warning(
                        f"Earnings row {row.id} (agent {row.agent_id}) inconsistent: "
                        f"total={row.total_earnings_cents}, pending={row.pending_earnings_cents}, "
                        f"paid_out={row.paid_out_cents}"
                    )

            execution_time_ms = int((time.time() - start_time) * 1000)
            found = len(discrepancies) + len(earnings_discrepancies)

            response = ReconciliationResultDTO(
                total_accounts_checked=len(accounts),
                total_earnings_checked=len(earnings_rows),
                discrepancies_found=found,
                discrepancies=discrepancies,
                earnings_discrepancies=earnings_discrepancies,
                reconciliation_time=reconciliation_time,
                execution_time_ms=execution_time_ms,
            )

            if found:
                logger.warning(
                    f"Reconciliation complete. Found {found} discrepancies "
                    f"out of {len(accounts)} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {len(accounts)} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(response)

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                ledger_error(ErrorCode.INTERNAL_ERROR, "Failed to reconcile credit ledger", reason=str(e))
            )

import pytest
from unittest.mock import AsyncMock, MagicMock

from agent_ledger.app.use_cases.credits.reconcile_ledger import ReconcileLedger, find_broken_chain
from agent_ledger.domain.account import Account
from agent_ledger.domain.agent_earnings import AgentEarnings
from agent_ledger.domain.credit_transaction import CreditTransaction, TransactionType


def txn(sequence, before, amount, after=None, account_id="acct_1"):
    return CreditTransaction(
        account_id=account_id,
        sequence=sequence,
        transaction_type=TransactionType.BONUS if amount > 0 else TransactionType.USAGE,
        amount_cents=amount,
        balance_before_cents=before,
        balance_after_cents=before + amount if after is None else after,
    )


def history(*amounts):
    entries, balance = [], 0
    for sequence, amount in enumerate(amounts, start=1):
        entries.append(txn(sequence, balance, amount))
        balance += amount
    return entries


@pytest.fixture
def repos():
    account_repo = MagicMock()
    transaction_repo = MagicMock()
    earnings_repo = MagicMock()
    earnings_repo.get_all = AsyncMock(return_value=[])
    return account_repo, transaction_repo, earnings_repo


class TestFindBrokenChain:

    def test_intact_chain(self):
        assert find_broken_chain(history(1000, -300, 50)) is None

    def test_empty_history(self):
        assert find_broken_chain([]) is None

    def test_wrong_after(self):
        entries = history(1000, -300)
        entries.append(txn(3, 700, 50, after=760))
        assert find_broken_chain(entries) == 3

    def test_before_not_linked_to_previous_after(self):
        entries = history(1000)
        entries.append(txn(2, 900, -100))
        assert find_broken_chain(entries) == 2

    def test_sequence_gap(self):
        entries = history(1000)
        entries.append(txn(3, 1000, 10))
        assert find_broken_chain(entries) == 3

    def test_first_entry_must_start_from_zero(self):
        assert find_broken_chain([txn(1, 100, 50)]) == 1


@pytest.mark.asyncio
class TestReconcileLedger:

    async def test_balanced_ledger(self, repos):
        account_repo, transaction_repo, earnings_repo = repos
        account_repo.get_all = AsyncMock(return_value=[Account(id="acct_1", balance_cents=700, transaction_count=2)])
        transaction_repo.get_transaction_sum_by_account = AsyncMock(return_value=700)
        transaction_repo.get_history = AsyncMock(return_value=history(1000, -300))

        result = await ReconcileLedger(*repos).execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 1
        assert result.value.discrepancies_found == 0

    async def test_balance_mismatch(self, repos):
        account_repo, transaction_repo, earnings_repo = repos
        account_repo.get_all = AsyncMock(return_value=[Account(id="acct_1", balance_cents=800, transaction_count=2)])
        transaction_repo.get_transaction_sum_by_account = AsyncMock(return_value=700)
        transaction_repo.get_history = AsyncMock(return_value=history(1000, -300))

        result = await ReconcileLedger(*repos).execute()

        discrepancy = result.value.discrepancies[0]
        assert discrepancy.account_id == "acct_1"
        assert discrepancy.calculated_balance_cents == 700
        assert discrepancy.discrepancy_cents == 100
        assert discrepancy.broken_chain_at is None

    async def test_broken_chain_reported_even_when_sum_matches(self, repos):
        account_repo, transaction_repo, earnings_repo = repos
        entries = history(1000)
        entries.append(txn(2, 1000, -300, after=600))
        account_repo.get_all = AsyncMock(return_value=[Account(id="acct_1", balance_cents=700, transaction_count=2)])
        transaction_repo.get_transaction_sum_by_account = AsyncMock(return_value=700)
        transaction_repo.get_history = AsyncMock(return_value=entries)

        result = await ReconcileLedger(*repos).execute()

        assert result.value.discrepancies_found == 1
        assert result.value.discrepancies[0].discrepancy_cents == 0
        assert result.value.discrepancies[0].broken_chain_at == 2

    async def test_inconsistent_earnings_row(self, repos):
        account_repo, transaction_repo, earnings_repo = repos
        account_repo.get_all = AsyncMock(return_value=[])
        earnings_repo.get_all = AsyncMock(
            return_value=[
                AgentEarnings(
                    id="earn_1",
                    agent_id="agent_1",
                    owner_account_id="owner",
                    total_earnings_cents=900,
                    pending_earnings_cents=500,
                    paid_out_cents=300,
                ),
                AgentEarnings(
                    id="earn_2",
                    agent_id="agent_2",
                    owner_account_id="owner",
                    total_earnings_cents=90,
                    pending_earnings_cents=90,
                ),
            ]
        )

        result = await ReconcileLedger(*repos).execute()

        assert result.value.total_earnings_checked == 2
        assert result.value.discrepancies_found == 1
        assert result.value.earnings_discrepancies[0].earnings_id == "earn_1"

    async def test_does_not_write(self, repos):
        account_repo, transaction_repo, earnings_repo = repos
        account_repo.get_all = AsyncMock(return_value=[Account(id="acct_1", balance_cents=5, transaction_count=0)])
        account_repo.update_balance = AsyncMock()
        transaction_repo.get_transaction_sum_by_account = AsyncMock(return_value=0)
        transaction_repo.get_history = AsyncMock(return_value=[])

        await ReconcileLedger(*repos).execute()

        account_repo.update_balance.assert_not_awaited()

    async def test_repository_failure(self, repos):
        account_repo, _, _ = repos
        account_repo.get_all = AsyncMock(side_effect=Exception("db down"))

        result = await ReconcileLedger(*repos).execute()

        assert result.error.code == "INTERNAL_ERROR"
        assert result.error.reason == "db down"

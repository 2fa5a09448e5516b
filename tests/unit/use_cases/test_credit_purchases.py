"""Unit tests for the credit purchase use cases

Tests cover:
- CreateCreditPurchase range validation
- ProcessPurchaseSuccess idempotence and atomic posting
- FailCreditPurchase terminal-state handling
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from agent_ledger.app.use_cases.credits.create_credit_purchase import CreateCreditPurchase
from agent_ledger.app.use_cases.credits.process_purchase_success import ProcessPurchaseSuccess
from agent_ledger.app.use_cases.credits.fail_credit_purchase import FailCreditPurchase
from agent_ledger.app.use_cases.credits.dtos import CreatePurchaseCommandDTO, FailPurchaseCommandDTO
from agent_ledger.domain.account import Account
from agent_ledger.domain.credit_purchase import CreditPurchase, PurchaseStatus
from agent_ledger.domain.base import utc_now


@pytest.fixture
def mock_purchase_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda purchase: purchase)
    repo.update = AsyncMock(side_effect=lambda purchase: purchase)
    return repo


@pytest.fixture
def mock_account_repo():
    repo = MagicMock()
    repo.update_balance = AsyncMock()
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=lambda transaction: transaction)
    return repo


@pytest.fixture
def account():
    return Account(id="acct_123", balance_cents=0, transaction_count=0)


def make_purchase(status=PurchaseStatus.PENDING, amount=2500):
    return CreditPurchase(
        id="purchase_1",
        account_id="acct_123",
        amount_cents=amount,
        credits_purchased=amount,
        currency="usd",
        status=status,
        created_at=utc_now(),
    )


@pytest.mark.asyncio
class TestCreateCreditPurchase:

    async def test_creates_pending_purchase(self, mock_uow, mock_purchase_repo, mock_account_repo, account, policy):
        mock_account_repo.get_by_id = AsyncMock(return_value=account)
        use_case = CreateCreditPurchase(mock_uow, mock_purchase_repo, mock_account_repo, policy)

        result = await use_case.execute(
            CreatePurchaseCommandDTO(account_id="acct_123", amount_cents=2500, checkout_session_id="cs_test_1")
        )

        assert result.is_ok()
        assert result.value.status == "pending"
        assert result.value.credits_purchased == 2500
        assert result.value.currency == "usd"
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.parametrize("amount", [499, 100001, 0, -500])
    async def test_amount_outside_range_invalid(
        self, mock_uow, mock_purchase_repo, mock_account_repo, policy, amount
    ):
        mock_account_repo.get_by_id = AsyncMock()
        use_case = CreateCreditPurchase(mock_uow, mock_purchase_repo, mock_account_repo, policy)

        result = await use_case.execute(CreatePurchaseCommandDTO(account_id="acct_123", amount_cents=amount))

        assert result.is_err()
        assert result.error.code == "INVALID_AMOUNT"
        mock_purchase_repo.create.assert_not_awaited()

    @pytest.mark.parametrize("amount", [500, 100000])
    async def test_range_bounds_accepted(self, mock_uow, mock_purchase_repo, mock_account_repo, account, policy, amount):
        mock_account_repo.get_by_id = AsyncMock(return_value=account)
        use_case = CreateCreditPurchase(mock_uow, mock_purchase_repo, mock_account_repo, policy)

        result = await use_case.execute(CreatePurchaseCommandDTO(account_id="acct_123", amount_cents=amount))

        assert result.is_ok()

    async def test_unknown_account_not_found(self, mock_uow, mock_purchase_repo, mock_account_repo, policy):
        mock_account_repo.get_by_id = AsyncMock(return_value=None)
        use_case = CreateCreditPurchase(mock_uow, mock_purchase_repo, mock_account_repo, policy)

        result = await use_case.execute(CreatePurchaseCommandDTO(account_id="missing", amount_cents=1000))

        assert result.error.code == "NOT_FOUND"


@pytest.mark.asyncio
class TestProcessPurchaseSuccess:

    @pytest.fixture
    def use_case(self, mock_uow, mock_purchase_repo, mock_account_repo, mock_transaction_repo):
        return ProcessPurchaseSuccess(mock_uow, mock_purchase_repo, mock_account_repo, mock_transaction_repo)

    async def test_completes_and_posts_purchase_entry(
        self, use_case, mock_uow, mock_purchase_repo, mock_account_repo, mock_transaction_repo, account
    ):
        purchase = make_purchase()
        mock_purchase_repo.get_by_id = AsyncMock(return_value=purchase)
        mock_account_repo.get_by_id = AsyncMock(return_value=account)

        result = await use_case.execute("purchase_1", payment_reference="pi_123")

        assert result.is_ok()
        assert result.value.already_processed is False
        assert result.value.new_balance_cents == 2500
        assert purchase.status == PurchaseStatus.COMPLETED
        assert purchase.completed_at is not None
        assert purchase.payment_reference == "pi_123"

        posted = mock_transaction_repo.create.await_args.args[0]
        assert posted.reference_type == "purchase"
        assert posted.reference_id == "purchase_1"
        assert posted.credit_purchase_id == "purchase_1"
        assert posted.description == "Credit purchase - 2500 credits"
        assert posted.details["purchase_amount_cents"] == 2500
        assert posted.details["payment_reference"] == "pi_123"

        mock_purchase_repo.get_by_id.assert_awaited_once_with("purchase_1", for_update=True)
        mock_uow.commit.assert_awaited_once()

    async def test_already_completed_is_success_without_posting(
        self, use_case, mock_uow, mock_purchase_repo, mock_transaction_repo
    ):
        mock_purchase_repo.get_by_id = AsyncMock(return_value=make_purchase(PurchaseStatus.COMPLETED))

        result = await use_case.execute("purchase_1")

        assert result.is_ok()
        assert result.value.already_processed is True
        assert result.value.transaction is None
        mock_transaction_repo.create.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()

    async def test_failed_purchase_cannot_complete(self, use_case, mock_purchase_repo, mock_transaction_repo):
        mock_purchase_repo.get_by_id = AsyncMock(return_value=make_purchase(PurchaseStatus.FAILED))

        result = await use_case.execute("purchase_1")

        assert result.is_err()
        assert result.error.code == "ALREADY_PROCESSED"
        mock_transaction_repo.create.assert_not_awaited()

    async def test_unknown_purchase_not_found(self, use_case, mock_purchase_repo):
        mock_purchase_repo.get_by_id = AsyncMock(return_value=None)

        result = await use_case.execute("missing")

        assert result.error.code == "NOT_FOUND"

    async def test_posting_failure_rolls_back_status_change(
        self, use_case, mock_uow, mock_purchase_repo, mock_account_repo, mock_transaction_repo, account
    ):
        mock_purchase_repo.get_by_id = AsyncMock(return_value=make_purchase())
        mock_account_repo.get_by_id = AsyncMock(return_value=account)
        mock_transaction_repo.create = AsyncMock(side_effect=Exception("Database error"))

        result = await use_case.execute("purchase_1")

        assert result.is_err()
        assert result.error.code == "INTERNAL_ERROR"
        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
class TestFailCreditPurchase:

    async def test_pending_purchase_fails_with_reason(self, mock_uow, mock_purchase_repo):
        purchase = make_purchase()
        mock_purchase_repo.get_by_id = AsyncMock(return_value=purchase)

        result = await FailCreditPurchase(mock_uow, mock_purchase_repo).execute(
            FailPurchaseCommandDTO(purchase_id="purchase_1", reason="session_expired")
        )

        assert result.is_ok()
        assert result.value.status == "failed"
        assert result.value.failure_reason == "session_expired"
        mock_uow.commit.assert_awaited_once()

    @pytest.mark.parametrize("status", [PurchaseStatus.COMPLETED, PurchaseStatus.FAILED])
    async def test_terminal_purchase_already_processed(self, mock_uow, mock_purchase_repo, status):
        mock_purchase_repo.get_by_id = AsyncMock(return_value=make_purchase(status))

        result = await FailCreditPurchase(mock_uow, mock_purchase_repo).execute(
            FailPurchaseCommandDTO(purchase_id="purchase_1")
        )

        assert result.error.code == "ALREADY_PROCESSED"
        mock_purchase_repo.update.assert_not_awaited()


class TestOpenAccount:

    @pytest.mark.asyncio
    async def test_opens_account_with_zero_balance(self):
        from agent_ledger.app.use_cases.credits.open_account import OpenAccount
        from agent_ledger.app.use_cases.credits.dtos import OpenAccountCommandDTO

        uow = AsyncMock()
        account_repo = AsyncMock()
        account_repo.get_by_id.return_value = None
        account_repo.create.side_effect = lambda account: account

        result = await OpenAccount(uow, account_repo).execute(
            OpenAccountCommandDTO(account_id="acct_new", email="a@example.com")
        )

        assert result.is_ok()
        assert result.value.account_id == "acct_new"
        assert result.value.balance_cents == 0
        assert result.value.created is True
        uow.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_existing_account_is_returned(self):
        from agent_ledger.app.use_cases.credits.open_account import OpenAccount
        from agent_ledger.app.use_cases.credits.dtos import OpenAccountCommandDTO

        uow = AsyncMock()
        account_repo = AsyncMock()
        account_repo.get_by_id.return_value = Account(
            id="acct_1", balance_cents=500, transaction_count=1, created_at=utc_now()
        )

        result = await OpenAccount(uow, account_repo).execute(OpenAccountCommandDTO(account_id="acct_1"))

        assert result.value.created is False
        assert result.value.balance_cents == 500
        account_repo.create.assert_not_awaited()
        uow.commit.assert_not_awaited()

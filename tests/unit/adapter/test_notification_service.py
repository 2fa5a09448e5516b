import json
import httpx
import pytest
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch

from agent_ledger.adapter.services.notification_service import (
    CompositeNotificationService,
    LoggingNotificationService,
    WebhookNotificationService,
    create_notification_service,
)
from agent_ledger.app.use_cases.credits.dtos import LedgerDiscrepancyDTO, ReconciliationResultDTO


@pytest.fixture
def result():
    return ReconciliationResultDTO(
        total_accounts_checked=3,
        total_earnings_checked=1,
        discrepancies_found=1,
        discrepancies=[
            LedgerDiscrepancyDTO(
                account_id="acct_1",
                balance_cents=1000,
                calculated_balance_cents=900,
                discrepancy_cents=100,
                broken_chain_at=4,
            )
        ],
        earnings_discrepancies=[],
        reconciliation_time=datetime(2026, 1, 1, 3, 0, 0),
        execution_time_ms=12,
    )


def patch_client(handler):
    """Route WebhookNotificationService's AsyncClient through a MockTransport"""
    real_client = httpx.AsyncClient

    def build(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    return patch("agent_ledger.adapter.services.notification_service.httpx.AsyncClient", side_effect=build)


@pytest.mark.asyncio
class TestWebhookNotificationService:

    async def test_posts_alert_payload(self, result):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["body"] = json.loads(request.content)
            return httpx.Response(200)

        with patch_client(handler):
            sent = await WebhookNotificationService("https://hooks.example.com/ledger").send_discrepancy_alert(result)

        assert sent is True
        assert captured["url"] == "https://hooks.example.com/ledger"
        assert captured["body"]["type"] == "ledger_discrepancy_alert"
        assert captured["body"]["discrepancies_found"] == 1
        assert captured["body"]["discrepancies"][0]["account_id"] == "acct_1"
        assert captured["body"]["discrepancies"][0]["broken_chain_at"] == 4

    async def test_http_error_returns_false(self, result):
        with patch_client(lambda request: httpx.Response(503)):
            sent = await WebhookNotificationService("https://hooks.example.com/ledger").send_discrepancy_alert(result)

        assert sent is False


@pytest.mark.asyncio
class TestCompositeNotificationService:

    async def test_succeeds_if_any_service_succeeds(self, result):
        failing = MagicMock()
        failing.send_discrepancy_alert = AsyncMock(side_effect=Exception("boom"))

        sent = await CompositeNotificationService([failing, LoggingNotificationService()]).send_discrepancy_alert(result)

        assert sent is True

    async def test_fails_if_all_fail(self, result):
        failing = MagicMock()
        failing.send_discrepancy_alert = AsyncMock(return_value=False)

        assert await CompositeNotificationService([failing]).send_discrepancy_alert(result) is False


class TestCreateNotificationService:

    def test_logging_only_without_webhook(self):
        assert isinstance(create_notification_service(None), LoggingNotificationService)

    def test_composite_with_webhook(self):
        service = create_notification_service("https://hooks.example.com/ledger")

        assert isinstance(service, CompositeNotificationService)
        assert isinstance(service.services[1], WebhookNotificationService)

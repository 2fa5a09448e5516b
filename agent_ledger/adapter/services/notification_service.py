"""Notification Service Implementations

Provides concrete implementations for reconciliation alerts.
"""

import logging
from typing import Optional
import httpx
from agent_ledger.app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs alerts

    Useful for development and testing, or as a fallback.
    """

    async def send_discrepancy_alert(self, result) -> bool:
        for discrepancy in result.discrepancies:
            logger.warning(
                f"[LEDGER DISCREPANCY] Account: {discrepancy.account_id}, "
                f"Balance: {discrepancy.balance_cents}, "
                f"Calculated: {discrepancy.calculated_balance_cents}, "
                f"Difference: {discrepancy.discrepancy_cents}, "
                f"Broken chain at: {discrepancy.broken_chain_at}"
            )
        for discrepancy in result.earnings_discrepancies:
            logger.warning(
                f"[EARNINGS DISCREPANCY] Agent: {discrepancy.agent_id}, "
                f"Owner: {discrepancy.owner_account_id}, "
                f"Total: {discrepancy.total_earnings_cents}, "
                f"Pending: {discrepancy.pending_earnings_cents}, "
                f"Paid out: {discrepancy.paid_out_cents}"
            )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that sends alerts via HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_discrepancy_alert(self, result) -> bool:
        """
        Send reconciliation alert via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {
            "type": "ledger_discrepancy_alert",
            "reconciliation_time": result.reconciliation_time.isoformat(),
            "total_accounts_checked": result.total_accounts_checked,
            "total_earnings_checked": result.total_earnings_checked,
            "discrepancies_found": result.discrepancies_found,
            "discrepancies": [d.model_dump() for d in result.discrepancies],
            "earnings_discrepancies": [d.model_dump() for d in result.earnings_discrepancies],
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification sent for {result.discrepancies_found} discrepancies to {self.webhook_url}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send discrepancy webhook notification: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_discrepancy_alert(self, result) -> bool:
        """
        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_discrepancy_alert(result):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)

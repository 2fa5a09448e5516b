"""Notification Service Interface

Defines the contract for alerting about ledger discrepancies.
"""

from abc import ABC, abstractmethod


class NotificationService(ABC):
    """
    Abstract notification service for reconciliation alerts

    Implementations can send notifications via:
    - Log
    - Webhook (HTTP POST)
    """

    @abstractmethod
    async def send_discrepancy_alert(self, result) -> bool:
        """
        Send alert for a reconciliation run that found discrepancies

        Args:
            result: ReconciliationResultDTO of the run

        Returns:
            True if notification sent successfully, False otherwise
        """
        pass

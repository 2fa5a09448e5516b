from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .payout_rail import SimulatedPayoutRail, StripePayoutRail, create_payout_rail

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "SimulatedPayoutRail",
    "StripePayoutRail",
    "create_payout_rail",
]

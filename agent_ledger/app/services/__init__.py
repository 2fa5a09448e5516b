from .unit_of_work import UnitOfWork
from .payout_rail import PayoutRail, PayoutRailError, PayoutTransfer
from .notification_service import NotificationService

__all__ = [
    "UnitOfWork",
    "PayoutRail",
    "PayoutRailError",
    "PayoutTransfer",
    "NotificationService",
]

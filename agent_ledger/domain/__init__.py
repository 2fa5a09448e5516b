from .base import BaseModel, generate_uuid, utc_now
from .account import Account
from .credit_transaction import CreditTransaction, TransactionType
from .credit_purchase import CreditPurchase, PurchaseStatus
from .agent_earnings import AgentEarnings, calculate_revenue_split
from .payout import Payout, PayoutStatus, InvalidPayoutTransition
from .policy import LedgerPolicy

__all__ = [
    "BaseModel",
    "generate_uuid",
    "utc_now",
    "Account",
    "CreditTransaction",
    "TransactionType",
    "CreditPurchase",
    "PurchaseStatus",
    "AgentEarnings",
    "calculate_revenue_split",
    "Payout",
    "PayoutStatus",
    "InvalidPayoutTransition",
    "LedgerPolicy",
]

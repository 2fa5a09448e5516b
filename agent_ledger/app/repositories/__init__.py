from .account_repository import AccountRepository
from .credit_transaction_repository import CreditTransactionRepository
from .credit_purchase_repository import CreditPurchaseRepository
from .agent_earnings_repository import AgentEarningsRepository
from .payout_repository import PayoutRepository

__all__ = [
    "AccountRepository",
    "CreditTransactionRepository",
    "CreditPurchaseRepository",
    "AgentEarningsRepository",
    "PayoutRepository",
]

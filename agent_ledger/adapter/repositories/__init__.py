from .account_repository import SqlAlchemyAccountRepository
from .credit_transaction_repository import SqlAlchemyCreditTransactionRepository
from .credit_purchase_repository import SqlAlchemyCreditPurchaseRepository
from .agent_earnings_repository import SqlAlchemyAgentEarningsRepository
from .payout_repository import SqlAlchemyPayoutRepository

__all__ = [
    "SqlAlchemyAccountRepository",
    "SqlAlchemyCreditTransactionRepository",
    "SqlAlchemyCreditPurchaseRepository",
    "SqlAlchemyAgentEarningsRepository",
    "SqlAlchemyPayoutRepository",
]

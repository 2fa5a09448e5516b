"""Credit ledger use cases"""
from .add_credits import AddCredits
from .deduct_credits import DeductCredits
from .has_sufficient_credits import HasSufficientCredits
from .get_balance import GetBalance
from .open_account import OpenAccount
from .create_credit_purchase import CreateCreditPurchase
from .process_purchase_success import ProcessPurchaseSuccess
from .fail_credit_purchase import FailCreditPurchase
from .list_transactions import ListTransactions
from .charge_execution import ChargeExecution
from .reconcile_ledger import ReconcileLedger
from .dtos import (
    AddCreditsCommandDTO,
    DeductCreditsCommandDTO,
    CreditTransactionResponseDTO,
    CreditMutationResponseDTO,
    BalanceResponseDTO,
    SufficientCreditsResponseDTO,
    OpenAccountCommandDTO,
    AccountResponseDTO,
    CreatePurchaseCommandDTO,
    CreditPurchaseResponseDTO,
    ProcessPurchaseResponseDTO,
    FailPurchaseCommandDTO,
    TransactionDTO,
    ListTransactionsResponseDTO,
    ChargeExecutionCommandDTO,
    ChargeExecutionResponseDTO,
    LedgerDiscrepancyDTO,
    EarningsDiscrepancyDTO,
    ReconciliationResultDTO,
)

__all__ = [
    "AddCredits",
    "DeductCredits",
    "HasSufficientCredits",
    "GetBalance",
    "OpenAccount",
    "CreateCreditPurchase",
    "ProcessPurchaseSuccess",
    "FailCreditPurchase",
    "ListTransactions",
    "ChargeExecution",
    "ReconcileLedger",
    "AddCreditsCommandDTO",
    "DeductCreditsCommandDTO",
    "CreditTransactionResponseDTO",
    "CreditMutationResponseDTO",
    "BalanceResponseDTO",
    "SufficientCreditsResponseDTO",
    "OpenAccountCommandDTO",
    "AccountResponseDTO",
    "CreatePurchaseCommandDTO",
    "CreditPurchaseResponseDTO",
    "ProcessPurchaseResponseDTO",
    "FailPurchaseCommandDTO",
    "TransactionDTO",
    "ListTransactionsResponseDTO",
    "ChargeExecutionCommandDTO",
    "ChargeExecutionResponseDTO",
    "LedgerDiscrepancyDTO",
    "EarningsDiscrepancyDTO",
    "ReconciliationResultDTO",
]

"""Balance posting

The single place where an account balance changes. Callers own the unit
of work: post() never commits, so it can be combined with other writes
(purchase completion, earnings) in one atomic region.
"""

from typing import Optional, Dict, Any
from libs.result import Result, Return
from agent_ledger.app.repositories.account_repository import AccountRepository
from agent_ledger.app.repositories.credit_transaction_repository import CreditTransactionRepository
from agent_ledger.app.use_cases.errors import ErrorCode, ledger_error, not_found, invalid_amount, is_whole_cents
from agent_ledger.domain.credit_transaction import CreditTransaction, TransactionType
from .dtos import CreditMutationResponseDTO, CreditTransactionResponseDTO


def to_transaction_dto(transaction: CreditTransaction) -> CreditTransactionResponseDTO:
    transaction_type = transaction.transaction_type
    return CreditTransactionResponseDTO(
        transaction_id=transaction.id,
        account_id=transaction.account_id,
        transaction_type=transaction_type.value if hasattr(transaction_type, "value") else transaction_type,
        amount_cents=transaction.amount_cents,
        description=transaction.description,
        sequence=transaction.sequence,
        balance_before_cents=transaction.balance_before_cents,
        balance_after_cents=transaction.balance_after_cents,
        reference_type=transaction.reference_type,
        reference_id=transaction.reference_id,
        created_at=transaction.created_at,
    )


class CreditPosting:
    """
    Applies one signed mutation to an account

    Flow:
    1. Lock the account row (SELECT FOR UPDATE)
    2. Read balance_before
    3. balance_after = balance_before + amount
    4. Reject a debit that would leave a negative balance
    5. Write the new balance
    6. Append the transaction with both snapshots

    Nothing is written before step 5, so a rejected posting leaves no state
    behind even if the caller commits.
    """

    def __init__(
        self,
        account_repo: AccountRepository,
        transaction_repo: CreditTransactionRepository,
    ):
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo

    async def post(
        self,
        account_id: str,
        amount_cents: int,
        transaction_type: TransactionType,
        description: str = "",
        reference_type: Optional[str] = None,
        reference_id: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        credit_purchase_id: Optional[str] = None,
    ) -> Result[CreditMutationResponseDTO]:
        if not is_whole_cents(amount_cents) or amount_cents == 0:
            return Return.err(invalid_amount("Amount must be a non-zero whole number of cents", amount_cents))

        account = await self.account_repo.get_by_id(account_id, for_update=True)
        if not account:
            return Return.err(not_found("Account", account_id))

        balance_before = account.balance_cents
        balance_after = balance_before + amount_cents

        if amount_cents < 0 and balance_after < 0:
            return Return.err(
                ledger_error(
                    ErrorCode.INSUFFICIENT_CREDITS,
                    f"Insufficient credits. Required: {-amount_cents}, Available: {balance_before}",
                    reason=f"balance={balance_before}, required={-amount_cents}",
                    required=-amount_cents,
                    available=balance_before,
                )
            )

        sequence = account.transaction_count + 1
        await self.account_repo.update_balance(account.id, balance_after, sequence)

        transaction = CreditTransaction(
            account_id=account.id,
            sequence=sequence,
            transaction_type=transaction_type,
            amount_cents=amount_cents,
            description=description,
            balance_before_cents=balance_before,
            balance_after_cents=balance_after,
            reference_type=reference_type,
            reference_id=reference_id,
            credit_purchase_id=credit_purchase_id,
            details=metadata,
        )
        created_transaction = await self.transaction_repo.create(transaction)

        return Return.ok(
            CreditMutationResponseDTO(
                transaction=to_transaction_dto(created_transaction),
                new_balance_cents=balance_after,
            )
        )

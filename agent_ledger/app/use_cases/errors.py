"""Error taxonomy of the ledger use cases

Every use case reports failures as a libs.result.Error whose code is one
of ErrorCode. The HTTP layer maps codes to status codes.
"""

from enum import Enum
from typing import Optional
from libs.result import Error


class ErrorCode(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_CREDITS = "INSUFFICIENT_CREDITS"
    INSUFFICIENT_PENDING_EARNINGS = "INSUFFICIENT_PENDING_EARNINGS"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    ALREADY_PROCESSED = "ALREADY_PROCESSED"
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def ledger_error(code: ErrorCode, message: str, reason: Optional[str] = None, **details) -> Error:
    return Error(code=code.value, message=message, reason=reason, details=details)


def not_found(entity: str, entity_id: str) -> Error:
    return ledger_error(
        ErrorCode.NOT_FOUND,
        f"{entity} {entity_id} not found",
        reason=f"{entity.lower()}_id={entity_id}",
        entity=entity,
        id=entity_id,
    )


def invalid_amount(message: str, amount_cents) -> Error:
    return ledger_error(ErrorCode.INVALID_AMOUNT, message, reason=f"amount_cents={amount_cents!r}", amount_cents=amount_cents)


def internal_error(message: str, exc: Exception) -> Error:
    return ledger_error(ErrorCode.INTERNAL_ERROR, message, reason=str(exc))


def is_whole_cents(amount_cents) -> bool:
    return isinstance(amount_cents, int) and not isinstance(amount_cents, bool)

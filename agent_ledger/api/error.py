"""HTTP error mapping

Use cases return libs.result.Error values; routes raise ClientError and
the application handler renders {"error": {...}} with the mapped status.
"""

from typing import Optional
from fastapi import status
from libs.result import Error
from agent_ledger.app.use_cases.errors import ErrorCode

ERROR_STATUS_CODES = {
    ErrorCode.NOT_FOUND.value: status.HTTP_404_NOT_FOUND,
    ErrorCode.INSUFFICIENT_CREDITS.value: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.INSUFFICIENT_PENDING_EARNINGS.value: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.ALREADY_PROCESSED.value: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_AMOUNT.value: status.HTTP_400_BAD_REQUEST,
    ErrorCode.EXTERNAL_SERVICE_ERROR.value: status.HTTP_502_BAD_GATEWAY,
    ErrorCode.INTERNAL_ERROR.value: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ClientError(Exception):
    def __init__(self, error: Error, status_code: Optional[int] = None):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code or ERROR_STATUS_CODES.get(error.code, status.HTTP_400_BAD_REQUEST)

    def to_content(self) -> dict:
        content = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            content["reason"] = self.error.reason
        if self.error.details:
            content["details"] = self.error.details
        return {"error": content}

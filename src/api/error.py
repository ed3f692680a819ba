"""HTTP error raised by route handlers for failed use case results"""

from fastapi import status
from libs.result import Error
from src.app.use_cases.errors import (
    CODE_EXHAUSTED,
    INVALID_CONFIGURATION,
    NOT_FOUND_CODES,
    PAYMENT_ALREADY_REDEEMED,
    TRANSIENT_STORAGE_FAILURE,
)


class ClientError(Exception):
    def __init__(self, error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code

    def to_body(self) -> dict:
        body = {"code": self.error.code, "message": self.error.message}
        if self.error.reason:
            body["reason"] = self.error.reason
        return {"error": body}


def status_for(error: Error) -> int:
    """HTTP status for a use case error code"""
    if error.code in NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if error.code in (CODE_EXHAUSTED, PAYMENT_ALREADY_REDEEMED):
        return status.HTTP_409_CONFLICT
    if error.code == INVALID_CONFIGURATION:
        return status.HTTP_422_UNPROCESSABLE_ENTITY
    if error.code == TRANSIENT_STORAGE_FAILURE:
        return status.HTTP_503_SERVICE_UNAVAILABLE
    return status.HTTP_400_BAD_REQUEST


def raise_for(error: Error):
    raise ClientError(error, status_code=status_for(error))

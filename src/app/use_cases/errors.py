"""Error codes shared by the use cases"""

from sqlalchemy.exc import OperationalError
from libs.result import Error

SUBJECT_NOT_FOUND = "SUBJECT_NOT_FOUND"
EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
DOMAIN_EVENT_NOT_FOUND = "DOMAIN_EVENT_NOT_FOUND"
RULE_NOT_FOUND = "RULE_NOT_FOUND"
TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"
INVALID_CONFIGURATION = "INVALID_CONFIGURATION"
TRANSIENT_STORAGE_FAILURE = "TRANSIENT_STORAGE_FAILURE"

CODE_NOT_FOUND = "CODE_NOT_FOUND"
CODE_INACTIVE = "CODE_INACTIVE"
CODE_EXPIRED = "CODE_EXPIRED"
CODE_NOT_OWNED = "CODE_NOT_OWNED"
CODE_EXHAUSTED = "CODE_EXHAUSTED"
PAYMENT_ALREADY_REDEEMED = "PAYMENT_ALREADY_REDEEMED"

NOT_FOUND_CODES = frozenset({
    SUBJECT_NOT_FOUND,
    EVENT_NOT_FOUND,
    DOMAIN_EVENT_NOT_FOUND,
    RULE_NOT_FOUND,
    TEMPLATE_NOT_FOUND,
    CODE_NOT_FOUND,
})


def failure(code: str, message: str, exc: Exception) -> Error:
    """
    Error for an unexpected exception raised inside a use case

    Storage connectivity problems are reported as TRANSIENT_STORAGE_FAILURE so
    callers know a retry is safe; everything else keeps the operation's code.
    """
    if isinstance(exc, OperationalError):
        return Error(
            code=TRANSIENT_STORAGE_FAILURE,
            message="Storage temporarily unavailable",
            reason=str(exc),
        )
    return Error(code=code, message=message, reason=str(exc))

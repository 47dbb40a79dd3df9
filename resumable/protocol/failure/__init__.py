from .failure import FAILURE_TAG, Failure
from .status_code import (
    MAX_STATUS_CODE,
    ProtocolErrorCode,
    StatusCode,
    normalize_error_code,
    normalize_failure_code,
)

__all__ = [
    "FAILURE_TAG",
    "Failure",
    "MAX_STATUS_CODE",
    "ProtocolErrorCode",
    "StatusCode",
    "normalize_error_code",
    "normalize_failure_code",
]

from enum import IntEnum


class StatusCode(IntEnum):
    """
    gRPC status vocabulary carried by per-entry Failure results.

    See https://github.com/grpc/grpc/blob/master/doc/statuscodes.md
    """

    OK = 0
    CANCELLED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16


class ProtocolErrorCode(IntEnum):
    """Codes only valid on the top-level Error message."""

    JOURNAL_MISMATCH = 32
    PROTOCOL_VIOLATION = 33


MAX_STATUS_CODE = StatusCode.UNAUTHENTICATED


def normalize_failure_code(code: int) -> int:
    """Collapse any code outside the gRPC range to UNKNOWN."""
    if 0 <= code <= MAX_STATUS_CODE:
        return int(code)

    return StatusCode.UNKNOWN.value


def normalize_error_code(code: int) -> int:
    """
    Collapse codes the runtime does not understand to UNKNOWN.

    Error messages accept the gRPC range plus JOURNAL_MISMATCH
    and PROTOCOL_VIOLATION. Anything else (17-31, >33) is read
    as UNKNOWN so newer peers stay forward compatible.
    """
    if 0 <= code <= MAX_STATUS_CODE:
        return int(code)

    if code in (
        ProtocolErrorCode.JOURNAL_MISMATCH,
        ProtocolErrorCode.PROTOCOL_VIOLATION,
    ):
        return int(code)

    return StatusCode.UNKNOWN.value

"""
Invocation Protocol Error Hierarchy

Fatal errors end the current attempt and are reported to the runtime
with an Error message:
- JournalMismatchError (code 32): the code path diverged from the
  recorded journal during replay.
- ProtocolViolationError (code 33): a message arrived that the current
  journal or session state forbids.

TerminalFailure is the user-level, recoverable counterpart: it carries
a Failure result through the journal and can be caught by user code.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import Any

from resumable.protocol.failure import (
    Failure,
    ProtocolErrorCode,
    StatusCode,
)
from resumable.protocol.messages import ErrorMessage, MessageType


@dataclass(eq=False)
class InvocationError(Exception):
    """
    Base exception for fatal invocation errors.

    All invocation errors carry:
    - message: Human-readable description
    - code: Error code reported to the runtime
    - context: Additional debugging info
    - cause: Original exception if wrapping
    """

    message: str
    code: int
    context: dict[str, Any] = field(default_factory=dict)
    cause: BaseException | None = None

    def __post_init__(self):
        self._traceback = traceback.format_stack()[:-1]

    def __str__(self) -> str:
        ctx = f" {self.context}" if self.context else ""
        cause = ""
        if self.cause:
            cause_str = str(self.cause)
            cause_type = type(self.cause).__name__
            if cause_str:
                cause = f" (caused by {cause_type}: {cause_str})"
            else:
                cause = f" (caused by {cause_type})"
        return f"[{self.code}] {self.message}{ctx}{cause}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code}, "
            f"context={self.context})"
        )

    def with_context(self, **kwargs: Any) -> InvocationError:
        """Add additional context to the error."""
        self.context.update(kwargs)
        return self

    def get_traceback(self) -> str:
        """Get the stack trace from when this error was created."""
        return ''.join(self._traceback)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            'error_type': self.__class__.__name__,
            'message': self.message,
            'code': self.code,
            'context': self.context,
            'cause': str(self.cause) if self.cause else None,
        }

    def to_error_message(self) -> ErrorMessage:
        if self.__traceback__ is not None:
            description = "".join(
                traceback.format_exception(type(self), self, self.__traceback__)
            )
        else:
            description = self.get_traceback()

        return ErrorMessage(
            code=self.code,
            message=self.message,
            description=description,
        )


# =============================================================================
# Journal Mismatch - replay diverged from the recorded journal
# =============================================================================

class JournalMismatchError(InvocationError):
    """Replayed entry disagrees with the entry the code now requests."""

    def __init__(
        self,
        entry_index: int,
        expected: MessageType,
        actual: MessageType,
        reason: str | None = None,
    ):
        if reason is None:
            reason = f"expected {expected.name}, code requested {actual.name}"

        super().__init__(
            message=f"Journal mismatch at entry {entry_index}: {reason}",
            code=ProtocolErrorCode.JOURNAL_MISMATCH,
            context={
                'entry_index': entry_index,
                'expected': expected.name,
                'actual': actual.name,
            },
        )


# =============================================================================
# Protocol Violations - message not allowed in the current state
# =============================================================================

class ProtocolViolationError(InvocationError):
    """
    Protocol violations or unexpected messages.

    These indicate:
    - Completions or acks for entries that cannot take them
    - Messages arriving in a session state that forbids them
    - Frames that cannot be decoded
    """

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        **context: Any,
    ):
        super().__init__(
            message=message,
            code=ProtocolErrorCode.PROTOCOL_VIOLATION,
            context=context,
            cause=cause,
        )


class UnknownEntryError(ProtocolViolationError):
    """Message references an entry index the journal does not have."""

    def __init__(self, entry_index: int, journal_length: int):
        super().__init__(
            message=f"Unknown entry index {entry_index}, journal has {journal_length} entries",
            entry_index=entry_index,
            journal_length=journal_length,
        )


class NotCompletableError(ProtocolViolationError):
    """Completion targets an entry kind that never takes a completion."""

    def __init__(self, entry_index: int, message_type: MessageType):
        super().__init__(
            message=f"Entry {entry_index} of kind {message_type.name} is not completable",
            entry_index=entry_index,
            message_type=message_type.name,
        )


class AlreadyCompletedError(ProtocolViolationError):
    """Completion targets an entry that already has a result."""

    def __init__(self, entry_index: int):
        super().__init__(
            message=f"Entry {entry_index} is already completed",
            entry_index=entry_index,
        )


class UnexpectedResultError(ProtocolViolationError):
    """Completion result variant is not allowed for the entry kind."""

    def __init__(
        self,
        entry_index: int,
        message_type: MessageType,
        result_type: str,
    ):
        super().__init__(
            message=f"Entry {entry_index} of kind {message_type.name} cannot complete with {result_type}",
            entry_index=entry_index,
            message_type=message_type.name,
            result_type=result_type,
        )


class UnexpectedMessageError(ProtocolViolationError):
    """Received message type not expected in current state."""

    def __init__(
        self,
        message_type: MessageType | int,
        state: str,
        expected: list[str] | None = None,
    ):
        name = message_type.name if isinstance(message_type, MessageType) else hex(message_type)

        super().__init__(
            message=f"Unexpected message {name} while {state}",
            message_type=name,
            state=state,
            expected=expected,
        )


class JournalClosedError(ProtocolViolationError):
    """An entry was requested after the output entry closed the journal."""

    def __init__(self, entry_index: int, message_type: MessageType):
        super().__init__(
            message=f"Cannot append {message_type.name} at {entry_index}, journal already has output",
            entry_index=entry_index,
            message_type=message_type.name,
        )


class MalformedMessageError(ProtocolViolationError):
    """Received frame could not be parsed."""

    def __init__(
        self,
        raw_data: bytes,
        reason: str,
        cause: BaseException | None = None,
    ):
        preview = raw_data[:100].hex() if len(raw_data) > 100 else raw_data.hex()
        super().__init__(
            message=f"Malformed message: {reason}",
            cause=cause,
            raw_preview=preview,
            raw_length=len(raw_data),
        )


class FrameTooLargeError(ProtocolViolationError):
    """Frame header announces a body larger than the configured maximum."""

    def __init__(self, actual_size: int, max_size: int):
        super().__init__(
            message=f"Frame length exceeds maximum: {actual_size} > {max_size} bytes",
            actual_size=actual_size,
            max_size=max_size,
        )
        self.actual_size = actual_size
        self.max_size = max_size


# =============================================================================
# User failures - recoverable, carried through the journal
# =============================================================================

class TerminalFailure(Exception):
    """
    A Failure result surfaced to user code.

    Raised when awaiting a fallible entry that completed with a failure.
    User code may catch it to compensate, or raise it to end the
    invocation with a failed output.
    """

    def __init__(
        self,
        message: str,
        code: int = StatusCode.UNKNOWN,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = Failure(code=int(code), message=message).code

    def to_failure(self) -> Failure:
        return Failure(code=self.code, message=self.message)

    @classmethod
    def from_failure(cls, failure: Failure) -> TerminalFailure:
        return cls(failure.message, code=failure.code)

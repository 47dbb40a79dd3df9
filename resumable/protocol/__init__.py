from .errors import (
    InvocationError,
    JournalMismatchError,
    ProtocolViolationError,
    TerminalFailure,
)
from .failure import Failure, ProtocolErrorCode, StatusCode
from .journal import Journal, JournalEntry, JournalEntryState
from .session import (
    AwakeableIdentifier,
    EntryHandle,
    InvocationContext,
    InvocationSession,
    SessionConfig,
    SessionState,
)
from .transport import FramedMessageStream, MemoryMessageStream, MessageStream

__all__ = [
    "AwakeableIdentifier",
    "EntryHandle",
    "Failure",
    "FramedMessageStream",
    "InvocationContext",
    "InvocationError",
    "InvocationSession",
    "Journal",
    "JournalEntry",
    "JournalEntryState",
    "JournalMismatchError",
    "MemoryMessageStream",
    "MessageStream",
    "ProtocolErrorCode",
    "ProtocolViolationError",
    "SessionConfig",
    "SessionState",
    "StatusCode",
    "TerminalFailure",
]

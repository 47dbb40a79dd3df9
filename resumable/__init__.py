from .protocol import (
    Failure,
    FramedMessageStream,
    InvocationContext,
    InvocationSession,
    MemoryMessageStream,
    SessionConfig,
    SessionState,
    TerminalFailure,
)

__version__ = "0.1.0"

__all__ = [
    "Failure",
    "FramedMessageStream",
    "InvocationContext",
    "InvocationSession",
    "MemoryMessageStream",
    "SessionConfig",
    "SessionState",
    "TerminalFailure",
]

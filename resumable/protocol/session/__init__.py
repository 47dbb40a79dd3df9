from .awakeable_id import AWAKEABLE_ID_PREFIX, AwakeableIdentifier
from .entry_handle import EntryHandle, unwrap_result
from .invocation_context import InvocationContext
from .invocation_session import Handler, InvocationSession
from .session_config import SessionConfig, configure_logging
from .session_state import SessionState

__all__ = [
    "AWAKEABLE_ID_PREFIX",
    "AwakeableIdentifier",
    "EntryHandle",
    "Handler",
    "InvocationContext",
    "InvocationSession",
    "SessionConfig",
    "SessionState",
    "configure_logging",
    "unwrap_result",
]

"""
Structured logging models for invocation sessions.

Each level variant carries the invocation's debug id, the journal
index the event concerns (-1 when it concerns no single entry) and
the session state at the time of the event.
"""

from resumable.logging.models import Entry, LogLevel


SESSION_TEMPLATE = "{timestamp} - {level} - {invocation_id}#{entry_index} - {state} - {message}"


class SessionTrace(Entry, kw_only=True):
    invocation_id: str
    entry_index: int = -1
    state: str = ""
    level: LogLevel = LogLevel.TRACE


class SessionDebug(Entry, kw_only=True):
    invocation_id: str
    entry_index: int = -1
    state: str = ""
    level: LogLevel = LogLevel.DEBUG


class SessionInfo(Entry, kw_only=True):
    invocation_id: str
    entry_index: int = -1
    state: str = ""
    level: LogLevel = LogLevel.INFO


class SessionWarning(Entry, kw_only=True):
    invocation_id: str
    entry_index: int = -1
    state: str = ""
    level: LogLevel = LogLevel.WARN


class SessionError(Entry, kw_only=True):
    invocation_id: str
    entry_index: int = -1
    state: str = ""
    level: LogLevel = LogLevel.ERROR

import contextvars
from typing import Literal

from resumable.logging.models import LogLevel, LogLevelName

from .stream_type import StreamType


LogOutput = Literal['stdout', 'stderr']

_session_log_level = contextvars.ContextVar("_session_log_level", default=LogLevel.INFO)
_session_log_output = contextvars.ContextVar("_session_log_output", default=StreamType.STDERR)
_session_log_directory = contextvars.ContextVar("_session_log_directory", default=None)
_session_disabled_streams = contextvars.ContextVar("_session_disabled_streams", default=())


class LoggingConfig:
    """
    Process-wide logging settings shared by every LoggerStream.

    Values live in context variables, so a change made before the
    session tasks are created is seen by all of them.
    """

    def update(
        self,
        log_directory: str | None = None,
        log_level: LogLevelName | None = None,
        log_output: LogOutput | None = None,
    ) -> None:
        if log_directory:
            _session_log_directory.set(log_directory)

        if log_level:
            _session_log_level.set(LogLevel.to_level(log_level))

        if log_output:
            _session_log_output.set(StreamType(log_output))

    def disable(self, stream_name: str) -> None:
        disabled = _session_disabled_streams.get()
        if stream_name not in disabled:
            _session_disabled_streams.set((*disabled, stream_name))

    def enabled(self, stream_name: str, log_level: LogLevel) -> bool:
        if stream_name in _session_disabled_streams.get():
            return False

        return log_level.severity >= _session_log_level.get().severity

    @property
    def level(self) -> LogLevel:
        return _session_log_level.get()

    @property
    def output(self) -> StreamType:
        return _session_log_output.get()

    @property
    def directory(self) -> str | None:
        return _session_log_directory.get()

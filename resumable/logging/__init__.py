from .config import LoggingConfig
from .models import Entry, Log, LogLevel, LogLevelName
from .streams import Logger, LoggerStream

__all__ = [
    "Entry",
    "Log",
    "LogLevel",
    "LogLevelName",
    "Logger",
    "LoggerStream",
    "LoggingConfig",
]

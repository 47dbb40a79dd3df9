from .logger import Logger
from .logger_stream import LoggerStream

__all__ = [
    "Logger",
    "LoggerStream",
]

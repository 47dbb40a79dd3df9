from __future__ import annotations

import asyncio
import sys
from typing import Dict, TypeVar

from resumable.logging.models import Entry, Log

from .logger_stream import LoggerStream

T = TypeVar('T', bound=Entry)


class Logger:
    """Hands entries to named LoggerStreams, tagging them with the caller."""

    def __init__(
        self,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        self._template = template
        self._filename = filename
        self._directory = directory
        self._streams: Dict[str, LoggerStream] = {}

    def stream(self, name: str = "resumable") -> LoggerStream:
        if (stream := self._streams.get(name)) is None:
            stream = LoggerStream(
                name=name,
                template=self._template,
                filename=self._filename,
                directory=self._directory,
            )
            self._streams[name] = stream

        return stream

    async def log(self, entry: T, name: str = "resumable") -> None:
        frame = sys._getframe(1)
        code = frame.f_code

        await self.stream(name).log(
            Log(
                entry=entry,
                filename=code.co_filename,
                function_name=code.co_name,
                line_number=frame.f_lineno,
            )
        )

    async def close(self) -> None:
        await asyncio.gather(
            *[stream.close() for stream in self._streams.values()]
        )

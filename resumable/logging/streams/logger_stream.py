import asyncio
import io
import os
import pathlib
import sys
from typing import Dict, TypeVar

import msgspec

from resumable.logging.config import LoggingConfig, StreamType
from resumable.logging.models import Entry, Log

T = TypeVar('T', bound=Entry)


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"
DEFAULT_LOGFILE = "resumable.json"


class LoggerStream:
    """
    Writes log entries either as templated console lines or as JSON
    lines appended to a log file.

    A stream goes to a file once it has a filename or a directory, or
    once LoggingConfig carries a log directory. Otherwise it writes to
    the configured console stream.
    """

    def __init__(
        self,
        name: str = "resumable",
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if filename is not None and pathlib.Path(filename).suffix != ".json":
            raise ValueError(f"Log file must be a JSON file, got: {filename}")

        self._name = name
        self._template = template or DEFAULT_TEMPLATE
        self._filename = filename
        self._directory = directory

        self._config = LoggingConfig()
        self._files: Dict[str, io.BufferedWriter] = {}
        self._file_lock = asyncio.Lock()

    @property
    def name(self) -> str:
        return self._name

    async def log(self, entry: T | Log[T]) -> None:
        if isinstance(entry, Log):
            log = entry

        else:
            frame = sys._getframe(1)
            log = Log(
                entry=entry,
                filename=frame.f_code.co_filename,
                function_name=frame.f_code.co_name,
                line_number=frame.f_lineno,
            )

        if self._config.enabled(self._name, log.entry.level) is False:
            return

        logfile_path = self._logfile_path()
        if logfile_path is None:
            self._write_to_console(log)
            return

        async with self._file_lock:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._write_to_file,
                log,
                logfile_path,
            )

    async def close(self) -> None:
        async with self._file_lock:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._close_files,
            )

    def _logfile_path(self) -> str | None:
        directory = self._config.directory or self._directory
        if directory is None and self._filename is None:
            return None

        if directory is None:
            directory = os.getcwd()

        return os.path.join(directory, self._filename or DEFAULT_LOGFILE)

    def _write_to_console(self, log: Log) -> None:
        stream = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        stream.write(
            log.entry.to_template(
                self._template,
                context={
                    "filename": log.filename,
                    "function_name": log.function_name,
                    "line_number": log.line_number,
                    "thread_id": log.thread_id,
                    "timestamp": log.timestamp,
                },
            )
            + "\n"
        )
        stream.flush()

    def _write_to_file(self, log: Log, logfile_path: str) -> None:
        logfile = self._files.get(logfile_path)

        if logfile is None or logfile.closed:
            resolved_path = pathlib.Path(logfile_path).absolute()
            resolved_path.parent.mkdir(parents=True, exist_ok=True)

            logfile = open(resolved_path, "ab")
            self._files[logfile_path] = logfile

        logfile.write(msgspec.json.encode(log) + b"\n")
        logfile.flush()

    def _close_files(self) -> None:
        for logfile in self._files.values():
            if logfile.closed is False:
                logfile.close()

        self._files.clear()

from __future__ import annotations

import asyncio
from typing import Generator

from resumable.protocol.completion import CompletionCorrelator
from resumable.protocol.errors import TerminalFailure
from resumable.protocol.failure import Failure
from resumable.protocol.journal import JournalEntry
from resumable.protocol.messages import Empty, EntryResult, Value
from resumable.protocol.suspension import SuspensionController


def unwrap_result(result: EntryResult) -> bytes | None:
    if isinstance(result, Value):
        return result.value

    if isinstance(result, Failure):
        raise TerminalFailure.from_failure(result)

    if isinstance(result, Empty):
        return None

    raise TypeError(f"Unknown entry result {type(result).__name__}")


class EntryHandle:
    """
    Awaitable result of a completable entry.

    Awaiting yields the value (None for Empty) or raises TerminalFailure
    for a Failure. While the entry is pending the awaiting code counts
    as blocked on its index for suspension purposes.
    """

    __slots__ = (
        "_entry",
        "_correlator",
        "_suspension",
    )

    def __init__(
        self,
        entry: JournalEntry,
        correlator: CompletionCorrelator,
        suspension: SuspensionController,
    ) -> None:
        self._entry = entry
        self._correlator = correlator
        self._suspension = suspension

    @property
    def index(self) -> int:
        return self._entry.index

    @property
    def entry(self) -> JournalEntry:
        return self._entry

    def done(self) -> bool:
        return self._entry.result is not None

    def __await__(self) -> Generator[None, None, bytes | None]:
        return self._wait().__await__()

    async def _wait(self) -> bytes | None:
        waiter = self._correlator.wait_for(self._entry.index)

        if not waiter.done():
            self._suspension.block(self._entry.index)
            try:
                await asyncio.shield(waiter)

            finally:
                self._suspension.unblock(self._entry.index)

        return unwrap_result(waiter.result())

    def __repr__(self) -> str:
        return f"EntryHandle({self._entry!r})"

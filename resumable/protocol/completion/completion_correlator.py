from __future__ import annotations

import asyncio

from resumable.protocol.errors import NotCompletableError, UnknownEntryError
from resumable.protocol.journal import Journal, JournalEntry, TransitionResult
from resumable.protocol.messages import (
    CompletionMessage,
    EntryAckMessage,
    EntryResult,
)


class CompletionCorrelator:
    """
    Routes Completion and EntryAck messages to the journal entries they
    reference and wakes whoever is waiting on a completed index.

    Validation happens in the journal, so every violation surfaces as a
    ProtocolViolationError subclass (code 33). Completions for distinct
    indices are independent of each other and of arrival order.
    """

    __slots__ = (
        "_journal",
        "_waiters",
    )

    def __init__(self, journal: Journal) -> None:
        self._journal = journal
        self._waiters: dict[int, asyncio.Future[EntryResult]] = {}

    @property
    def journal(self) -> Journal:
        return self._journal

    @property
    def waiting_indices(self) -> list[int]:
        return sorted(
            index for index, waiter in self._waiters.items() if not waiter.done()
        )

    def complete(self, completion: CompletionMessage) -> JournalEntry:
        entry = self._journal.complete(completion.entry_index, completion.result)

        waiter = self._waiters.pop(entry.index, None)
        if waiter is not None and not waiter.done():
            waiter.set_result(entry.result)

        return entry

    def acknowledge(self, ack: EntryAckMessage) -> TransitionResult:
        return self._journal.acknowledge(ack.entry_index)

    def wait_for(self, index: int) -> asyncio.Future[EntryResult]:
        """
        Future resolved with the result of the entry at index. Already
        completed entries give an already resolved future.
        """
        entry = self._journal.get(index)
        if entry is None:
            raise UnknownEntryError(index, len(self._journal))

        if not entry.completable:
            raise NotCompletableError(index, entry.message_type)

        loop = asyncio.get_running_loop()

        if entry.result is not None:
            resolved: asyncio.Future[EntryResult] = loop.create_future()
            resolved.set_result(entry.result)
            return resolved

        waiter = self._waiters.get(index)
        if waiter is None or waiter.done():
            waiter = loop.create_future()
            self._waiters[index] = waiter

        return waiter

    def cancel_all(self) -> None:
        for waiter in self._waiters.values():
            if not waiter.done():
                waiter.cancel()

        self._waiters.clear()

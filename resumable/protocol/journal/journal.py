from __future__ import annotations

from typing import Iterator, Mapping

from resumable.protocol.entries import EntryKind, kind_of
from resumable.protocol.errors import (
    AlreadyCompletedError,
    JournalClosedError,
    JournalMismatchError,
    NotCompletableError,
    ProtocolViolationError,
    UnexpectedResultError,
    UnknownEntryError,
)
from resumable.protocol.messages import (
    ClearStateEntryMessage,
    EntryMessage,
    EntryResult,
    GetStateEntryMessage,
    MessageType,
    SetStateEntryMessage,
    StartMessage,
)

from .entry_state import TransitionResult
from .journal_entry import JournalEntry
from .local_state import LocalState


class Journal:
    """
    Append-only, densely indexed journal of one invocation.

    Entries below known_entries were recorded by the runtime before
    this process attached. They are replayed, never re-executed:
    next_entry() hands back the recorded entry after checking that
    the code asked for the same thing. Entries at or above
    known_entries are appended.

    Thread safety: NOT thread-safe. The owning session is the single
    writer and mutates the journal from one event loop only.
    """

    __slots__ = (
        "_invocation_id",
        "_debug_id",
        "_known_entries",
        "_state",
        "_entries",
        "_cursor",
        "_output_index",
    )

    def __init__(
        self,
        invocation_id: bytes,
        debug_id: str,
        known_entries: int = 0,
        state_snapshot: Mapping[bytes, bytes] | None = None,
        partial_state: bool = False,
    ) -> None:
        self._invocation_id = invocation_id
        self._debug_id = debug_id
        self._known_entries = known_entries
        self._state = LocalState(state_snapshot, partial=partial_state)
        self._entries: list[JournalEntry] = []
        self._cursor = 0
        self._output_index: int | None = None

    @classmethod
    def from_start(cls, start: StartMessage) -> Journal:
        return cls(
            invocation_id=start.id,
            debug_id=start.debug_id,
            known_entries=start.known_entries,
            state_snapshot={
                state_entry.key: state_entry.value
                for state_entry in start.state_map
            },
            partial_state=start.partial_state,
        )

    @property
    def invocation_id(self) -> bytes:
        return self._invocation_id

    @property
    def debug_id(self) -> str:
        return self._debug_id

    @property
    def known_entries(self) -> int:
        return self._known_entries

    @property
    def partial_state(self) -> bool:
        return self._state.partial

    @property
    def state(self) -> LocalState:
        return self._state

    @property
    def is_replaying(self) -> bool:
        return self._cursor < self._known_entries

    @property
    def is_fully_recorded(self) -> bool:
        return len(self._entries) >= self._known_entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[JournalEntry]:
        return iter(self._entries)

    def get(self, index: int) -> JournalEntry | None:
        if 0 <= index < len(self._entries):
            return self._entries[index]

        return None

    def pending_indices(self) -> list[int]:
        return [entry.index for entry in self._entries if entry.is_pending]

    def record(self, message: EntryMessage) -> JournalEntry:
        """Add an entry the runtime already recorded (replay prefix)."""
        if self.is_fully_recorded:
            raise ProtocolViolationError(
                f"Received more than {self._known_entries} recorded entries",
                known_entries=self._known_entries,
                message_type=message.message_type.name,
            )

        return self._append(kind_of(message), message)

    def next_entry(self, message: EntryMessage) -> tuple[JournalEntry, bool]:
        """
        Resolve the operation the code requests next.

        Returns the journal entry and whether it was replayed. A
        replayed entry must match the request in kind and payload,
        otherwise the code diverged from the recorded execution.
        """
        kind = kind_of(message)
        index = self._cursor

        if index < self._known_entries:
            recorded = self.get(index)
            if recorded is None:
                raise ProtocolViolationError(
                    f"Entry {index} requested before it was received",
                    entry_index=index,
                    known_entries=self._known_entries,
                )

            self._verify_replay(recorded, kind, message)
            self._cursor += 1
            self._apply_state_effect(recorded)

            return recorded, True

        if self._output_index is not None:
            raise JournalClosedError(index, kind.message_type)

        entry = self._append(kind, message)
        self._cursor += 1
        self._apply_state_effect(entry)

        return entry, False

    def complete(self, index: int, result: EntryResult) -> JournalEntry:
        entry = self.get(index)
        if entry is None:
            raise UnknownEntryError(index, len(self._entries))

        if not entry.completable:
            raise NotCompletableError(index, entry.message_type)

        if not entry.is_pending:
            raise AlreadyCompletedError(index)

        if not entry.kind.accepts(result):
            raise UnexpectedResultError(
                index,
                entry.message_type,
                type(result).__name__,
            )

        entry.complete(result)

        self._apply_state_effect(entry)

        return entry

    def acknowledge(self, index: int) -> TransitionResult:
        entry = self.get(index)
        if entry is None:
            raise UnknownEntryError(index, len(self._entries))

        return entry.acknowledge()

    def _append(self, kind: EntryKind, message: EntryMessage) -> JournalEntry:
        entry = JournalEntry(
            index=len(self._entries),
            kind=kind,
            message=message,
        )
        self._entries.append(entry)

        if kind.message_type == MessageType.OUTPUT_STREAM and self._output_index is None:
            self._output_index = entry.index

        return entry

    def _verify_replay(
        self,
        recorded: JournalEntry,
        kind: EntryKind,
        message: EntryMessage,
    ) -> None:
        if recorded.message_type != kind.message_type:
            raise JournalMismatchError(
                recorded.index,
                expected=recorded.message_type,
                actual=kind.message_type,
            )

        if kind.replay_payload(recorded.message) != kind.replay_payload(message):
            raise JournalMismatchError(
                recorded.index,
                expected=recorded.message_type,
                actual=kind.message_type,
                reason=f"{kind.name} payload differs from the recorded entry",
            )

    def _apply_state_effect(self, entry: JournalEntry) -> None:
        message = entry.message

        if isinstance(message, SetStateEntryMessage):
            self._state.set(message.key, message.value)

        elif isinstance(message, ClearStateEntryMessage):
            self._state.clear(message.key)

        elif isinstance(message, GetStateEntryMessage) and entry.result is not None:
            self._state.observe(message.key, entry.result)

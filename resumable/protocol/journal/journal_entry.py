from __future__ import annotations

from resumable.protocol.entries import EntryKind
from resumable.protocol.messages import EntryMessage, EntryResult, MessageType

from .entry_state import JournalEntryState, TransitionResult


class JournalEntry:
    """
    One indexed record in an invocation's journal.

    Index, kind and payload never change after creation. Only the
    result and the state move, and the state only moves forward.
    """

    __slots__ = (
        "_index",
        "_kind",
        "_message",
        "_result",
        "_state",
        "_ack_deferred",
    )

    def __init__(
        self,
        index: int,
        kind: EntryKind,
        message: EntryMessage,
    ) -> None:
        self._index = index
        self._kind = kind
        self._message = message
        self._result = kind.result_of(message)
        self._ack_deferred = False

        if kind.completable and self._result is None:
            self._state = JournalEntryState.PENDING
        else:
            self._state = JournalEntryState.COMPLETED

    @property
    def index(self) -> int:
        return self._index

    @property
    def kind(self) -> EntryKind:
        return self._kind

    @property
    def message_type(self) -> MessageType:
        return self._kind.message_type

    @property
    def message(self) -> EntryMessage:
        return self._message

    @property
    def result(self) -> EntryResult | None:
        return self._result

    @property
    def state(self) -> JournalEntryState:
        return self._state

    @property
    def completable(self) -> bool:
        return self._kind.completable

    @property
    def fallible(self) -> bool:
        return self._kind.fallible

    @property
    def is_pending(self) -> bool:
        return self._state == JournalEntryState.PENDING

    def complete(self, result: EntryResult) -> TransitionResult:
        if not self._kind.completable:
            return TransitionResult.INVALID_TRANSITION

        if self._state != JournalEntryState.PENDING:
            return TransitionResult.ALREADY_PAST_STATE

        self._result = result
        self._state = JournalEntryState.COMPLETED

        if self._ack_deferred:
            self._ack_deferred = False
            self._state = JournalEntryState.ACKNOWLEDGED

        return TransitionResult.SUCCESS

    def acknowledge(self) -> TransitionResult:
        if self._state == JournalEntryState.ACKNOWLEDGED:
            return TransitionResult.ALREADY_AT_STATE

        if self._state == JournalEntryState.PENDING:
            self._ack_deferred = True
            return TransitionResult.DEFERRED

        self._state = JournalEntryState.ACKNOWLEDGED
        return TransitionResult.SUCCESS

    def to_message(self) -> EntryMessage:
        """The entry message with its current result filled in."""
        if self._kind.completable and self._result is not None:
            return self._kind.with_result(self._message, self._result)

        return self._message

    def __repr__(self) -> str:
        return (
            f"JournalEntry(index={self._index}, "
            f"type={self._kind.name}, state={self._state.name})"
        )

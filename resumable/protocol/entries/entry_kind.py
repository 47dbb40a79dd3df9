from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import msgspec

from resumable.protocol.failure import Failure
from resumable.protocol.messages import EntryMessage, EntryResult, MessageType


@dataclass(slots=True, frozen=True)
class EntryKind:
    """
    Static properties of one journal entry kind.

    Attributes:
        message_type: Wire type code of the entry message.
        message_class: msgspec struct carrying the entry payload.
        completable: The result is filled in later by a Completion.
        fallible: The result may be a Failure.
        completion_results: Result variants a Completion may carry.
        replay_ignored_fields: Payload fields derived from wall-clock
            time, excluded when comparing a replayed entry.
    """

    message_type: MessageType
    message_class: type
    completable: bool
    fallible: bool
    completion_results: frozenset[type] = frozenset()
    replay_ignored_fields: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.completion_results and not self.completable:
            raise ValueError(
                f"{self.message_type.name} is not completable but accepts completions"
            )

        if Failure in self.completion_results and not self.fallible:
            raise ValueError(
                f"{self.message_type.name} is not fallible but accepts a Failure completion"
            )

    @property
    def name(self) -> str:
        return self.message_type.name

    def accepts(self, result: EntryResult) -> bool:
        return type(result) in self.completion_results

    def result_of(self, message: EntryMessage) -> EntryResult | None:
        """The completion result recorded on a completable entry message."""
        if not self.completable:
            return None

        return message.result

    def with_result(self, message: EntryMessage, result: EntryResult) -> EntryMessage:
        return msgspec.structs.replace(message, result=result)

    def replay_payload(self, message: EntryMessage) -> dict[str, Any]:
        payload = msgspec.structs.asdict(message)

        if self.completable:
            payload.pop("result", None)

        for field_name in self.replay_ignored_fields:
            payload.pop(field_name, None)

        return payload

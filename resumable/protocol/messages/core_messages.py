import traceback
from typing import Annotated, ClassVar, Union

import msgspec

from resumable.protocol.failure import (
    Failure,
    StatusCode,
    normalize_error_code,
)

from .message_type import MessageType
from .results import Empty, Value

EntryIndex = Annotated[int, msgspec.Meta(ge=0)]


class StateEntry(msgspec.Struct, frozen=True, array_like=True):
    key: bytes
    # Empty bytes is a present, empty value, not a missing one.
    value: bytes


class StartMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.START

    id: bytes
    debug_id: str
    known_entries: EntryIndex
    state_map: tuple[StateEntry, ...] = ()
    partial_state: bool = False


class CompletionMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.COMPLETION

    entry_index: EntryIndex
    result: Empty | Value | Failure


class EntryAckMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.ENTRY_ACK

    entry_index: EntryIndex


class SuspensionMessage(msgspec.Struct, frozen=True, array_like=True):
    """
    Indices the invocation is blocked on. The runtime resumes the
    invocation as soon as any one of them completes.
    """

    message_type: ClassVar[MessageType] = MessageType.SUSPENSION

    entry_indexes: tuple[EntryIndex, ...]

    def __post_init__(self) -> None:
        if len(self.entry_indexes) < 1:
            raise ValueError("Suspension requires at least one entry index")


class ErrorMessage(msgspec.Struct, array_like=True):
    """
    Top-level fatal signal. Distinct from a per-entry Failure: it ends
    the attempt rather than the invocation, and carries a verbose
    description (usually a stack trace).
    """

    message_type: ClassVar[MessageType] = MessageType.ERROR

    code: int
    message: str
    description: str = ""

    def __post_init__(self) -> None:
        self.code = normalize_error_code(self.code)

    @classmethod
    def from_exception(
        cls,
        error: BaseException,
        code: int = StatusCode.UNKNOWN,
    ) -> "ErrorMessage":
        return cls(
            code=int(code),
            message=str(error) or type(error).__name__,
            description="".join(
                traceback.format_exception(
                    type(error),
                    error,
                    error.__traceback__,
                )
            ),
        )


CoreMessage = Union[
    StartMessage,
    CompletionMessage,
    EntryAckMessage,
    SuspensionMessage,
    ErrorMessage,
]

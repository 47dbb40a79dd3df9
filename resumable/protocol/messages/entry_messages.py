from typing import ClassVar, Union

import msgspec

from resumable.protocol.failure import Failure

from .message_type import MessageType
from .results import Empty, Value


class PollInputStreamEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.POLL_INPUT_STREAM

    result: Value | None = None


class OutputStreamEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.OUTPUT_STREAM

    result: Value | Failure


class GetStateEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.GET_STATE

    key: bytes
    result: Empty | Value | None = None


class SetStateEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.SET_STATE

    key: bytes
    value: bytes


class ClearStateEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.CLEAR_STATE

    key: bytes


class SleepEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    """Wake up time is milliseconds since the UNIX epoch."""

    message_type: ClassVar[MessageType] = MessageType.SLEEP

    wake_up_time: int
    result: Empty | None = None


class InvokeEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.INVOKE

    service_name: str
    method_name: str
    parameter: bytes
    result: Value | Failure | None = None


class BackgroundInvokeEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    """
    Fire-and-forget invocation. An invoke time of 0 (or in the past)
    asks the runtime to execute it as soon as possible.
    """

    message_type: ClassVar[MessageType] = MessageType.BACKGROUND_INVOKE

    service_name: str
    method_name: str
    parameter: bytes
    invoke_time: int = 0


class AwakeableEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.AWAKEABLE

    result: Value | Failure | None = None


class CompleteAwakeableEntryMessage(msgspec.Struct, frozen=True, array_like=True):
    message_type: ClassVar[MessageType] = MessageType.COMPLETE_AWAKEABLE

    id: str
    result: Value | Failure


EntryMessage = Union[
    PollInputStreamEntryMessage,
    OutputStreamEntryMessage,
    GetStateEntryMessage,
    SetStateEntryMessage,
    ClearStateEntryMessage,
    SleepEntryMessage,
    InvokeEntryMessage,
    BackgroundInvokeEntryMessage,
    AwakeableEntryMessage,
    CompleteAwakeableEntryMessage,
]

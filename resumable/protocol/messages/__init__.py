from typing import Union

from .core_messages import (
    CompletionMessage,
    CoreMessage,
    EntryAckMessage,
    ErrorMessage,
    StartMessage,
    StateEntry,
    SuspensionMessage,
)
from .entry_messages import (
    AwakeableEntryMessage,
    BackgroundInvokeEntryMessage,
    ClearStateEntryMessage,
    CompleteAwakeableEntryMessage,
    EntryMessage,
    GetStateEntryMessage,
    InvokeEntryMessage,
    OutputStreamEntryMessage,
    PollInputStreamEntryMessage,
    SetStateEntryMessage,
    SleepEntryMessage,
)
from .message_type import MessageFlag, MessageType
from .results import EMPTY, EMPTY_TAG, VALUE_TAG, Empty, EntryResult, Value

ProtocolMessage = Union[CoreMessage, EntryMessage]

__all__ = [
    "AwakeableEntryMessage",
    "BackgroundInvokeEntryMessage",
    "ClearStateEntryMessage",
    "CompleteAwakeableEntryMessage",
    "CompletionMessage",
    "CoreMessage",
    "EMPTY",
    "EMPTY_TAG",
    "Empty",
    "EntryAckMessage",
    "EntryMessage",
    "EntryResult",
    "ErrorMessage",
    "GetStateEntryMessage",
    "InvokeEntryMessage",
    "MessageFlag",
    "MessageType",
    "OutputStreamEntryMessage",
    "PollInputStreamEntryMessage",
    "ProtocolMessage",
    "SetStateEntryMessage",
    "SleepEntryMessage",
    "StartMessage",
    "StateEntry",
    "SuspensionMessage",
    "VALUE_TAG",
    "Value",
]

from types import MappingProxyType
from typing import Mapping

from resumable.protocol.failure import Failure
from resumable.protocol.messages import (
    AwakeableEntryMessage,
    BackgroundInvokeEntryMessage,
    ClearStateEntryMessage,
    CompleteAwakeableEntryMessage,
    Empty,
    EntryMessage,
    GetStateEntryMessage,
    InvokeEntryMessage,
    MessageType,
    OutputStreamEntryMessage,
    PollInputStreamEntryMessage,
    SetStateEntryMessage,
    SleepEntryMessage,
    Value,
)

from .entry_kind import EntryKind


ENTRY_CATALOG: Mapping[MessageType, EntryKind] = MappingProxyType(
    {
        kind.message_type: kind
        for kind in (
            EntryKind(
                message_type=MessageType.POLL_INPUT_STREAM,
                message_class=PollInputStreamEntryMessage,
                completable=True,
                fallible=False,
                completion_results=frozenset({Value}),
            ),
            EntryKind(
                message_type=MessageType.OUTPUT_STREAM,
                message_class=OutputStreamEntryMessage,
                completable=False,
                fallible=True,
            ),
            EntryKind(
                message_type=MessageType.GET_STATE,
                message_class=GetStateEntryMessage,
                completable=True,
                fallible=False,
                completion_results=frozenset({Empty, Value}),
            ),
            EntryKind(
                message_type=MessageType.SET_STATE,
                message_class=SetStateEntryMessage,
                completable=False,
                fallible=False,
            ),
            EntryKind(
                message_type=MessageType.CLEAR_STATE,
                message_class=ClearStateEntryMessage,
                completable=False,
                fallible=False,
            ),
            EntryKind(
                message_type=MessageType.SLEEP,
                message_class=SleepEntryMessage,
                completable=True,
                fallible=False,
                completion_results=frozenset({Empty}),
                replay_ignored_fields=("wake_up_time",),
            ),
            EntryKind(
                message_type=MessageType.INVOKE,
                message_class=InvokeEntryMessage,
                completable=True,
                fallible=True,
                completion_results=frozenset({Value, Failure}),
            ),
            EntryKind(
                message_type=MessageType.BACKGROUND_INVOKE,
                message_class=BackgroundInvokeEntryMessage,
                completable=False,
                fallible=True,
                replay_ignored_fields=("invoke_time",),
            ),
            EntryKind(
                message_type=MessageType.AWAKEABLE,
                message_class=AwakeableEntryMessage,
                completable=True,
                fallible=True,
                completion_results=frozenset({Value, Failure}),
            ),
            EntryKind(
                message_type=MessageType.COMPLETE_AWAKEABLE,
                message_class=CompleteAwakeableEntryMessage,
                completable=False,
                fallible=True,
            ),
        )
    }
)


def lookup_kind(message_type: MessageType) -> EntryKind | None:
    return ENTRY_CATALOG.get(message_type)


def kind_of(message: EntryMessage) -> EntryKind:
    return ENTRY_CATALOG[message.message_type]

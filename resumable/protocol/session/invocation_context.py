from __future__ import annotations

import time
from typing import TYPE_CHECKING

from resumable.protocol.failure import Failure
from resumable.protocol.messages import (
    AwakeableEntryMessage,
    BackgroundInvokeEntryMessage,
    ClearStateEntryMessage,
    CompleteAwakeableEntryMessage,
    EntryMessage,
    GetStateEntryMessage,
    InvokeEntryMessage,
    PollInputStreamEntryMessage,
    SetStateEntryMessage,
    SleepEntryMessage,
    Value,
)

from .awakeable_id import AwakeableIdentifier
from .entry_handle import EntryHandle

if TYPE_CHECKING:
    from .invocation_session import InvocationSession


def now_millis() -> int:
    return int(time.time() * 1000)


class InvocationContext:
    """
    Operations available to the executing handler.

    Every call produces exactly one journal entry, replayed when the
    journal already holds it, appended and sent otherwise. Completable
    operations return an EntryHandle to await, the others return None.
    """

    def __init__(self, session: InvocationSession) -> None:
        self._session = session

    @property
    def invocation_id(self) -> bytes:
        return self._session.journal.invocation_id

    @property
    def debug_id(self) -> str:
        return self._session.journal.debug_id

    @property
    def is_replaying(self) -> bool:
        return self._session.journal.is_replaying

    def poll_input(self) -> EntryHandle:
        return self._handle(PollInputStreamEntryMessage())

    def get_state(self, key: bytes) -> EntryHandle:
        journal = self._session.journal

        # Live reads resolve from local state when the key is known.
        result = None
        if not journal.is_replaying:
            result = journal.state.lookup(key)

        return self._handle(GetStateEntryMessage(key=key, result=result))

    def set_state(self, key: bytes, value: bytes) -> None:
        self._session.issue(SetStateEntryMessage(key=key, value=value))

    def clear_state(self, key: bytes) -> None:
        self._session.issue(ClearStateEntryMessage(key=key))

    def sleep(self, seconds: float) -> EntryHandle:
        return self._handle(
            SleepEntryMessage(wake_up_time=now_millis() + int(seconds * 1000)),
        )

    def invoke(
        self,
        service_name: str,
        method_name: str,
        parameter: bytes,
    ) -> EntryHandle:
        return self._handle(
            InvokeEntryMessage(
                service_name=service_name,
                method_name=method_name,
                parameter=parameter,
            )
        )

    def background_invoke(
        self,
        service_name: str,
        method_name: str,
        parameter: bytes,
        delay: float | None = None,
    ) -> None:
        invoke_time = 0
        if delay is not None:
            invoke_time = now_millis() + int(delay * 1000)

        self._session.issue(
            BackgroundInvokeEntryMessage(
                service_name=service_name,
                method_name=method_name,
                parameter=parameter,
                invoke_time=invoke_time,
            )
        )

    def awakeable(self) -> tuple[str, EntryHandle]:
        handle = self._handle(AwakeableEntryMessage())
        awakeable_id = AwakeableIdentifier(self.invocation_id, handle.index)

        return str(awakeable_id), handle

    def complete_awakeable(
        self,
        awakeable_id: str,
        value: bytes | Failure,
    ) -> None:
        AwakeableIdentifier.parse(awakeable_id)

        result = value if isinstance(value, Failure) else Value(value=value)

        self._session.issue(
            CompleteAwakeableEntryMessage(id=awakeable_id, result=result),
        )

    def _handle(self, message: EntryMessage) -> EntryHandle:
        entry = self._session.issue(message)

        return EntryHandle(
            entry,
            self._session.correlator,
            self._session.suspension,
        )

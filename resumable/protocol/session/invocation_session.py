from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from resumable.logging import Logger
from resumable.protocol.completion import CompletionCorrelator
from resumable.protocol.errors import (
    InvocationError,
    ProtocolViolationError,
    TerminalFailure,
    UnexpectedMessageError,
)
from resumable.protocol.journal import Journal, JournalEntry
from resumable.protocol.logging_models import (
    SESSION_TEMPLATE,
    SessionDebug,
    SessionError,
    SessionInfo,
    SessionWarning,
)
from resumable.protocol.messages import (
    CompletionMessage,
    EntryAckMessage,
    EntryMessage,
    ErrorMessage,
    OutputStreamEntryMessage,
    ProtocolMessage,
    StartMessage,
    SuspensionMessage,
    Value,
)
from resumable.protocol.suspension import SuspensionController
from resumable.protocol.transport import FramedMessageStream, MessageStream

from .invocation_context import InvocationContext
from .session_config import SessionConfig
from .session_state import SessionState

Handler = Callable[[InvocationContext], Awaitable[bytes | None]]


class InvocationSession:
    """
    Drives one invocation attempt over a message stream.

    Reads Start and the recorded entries, runs the handler against the
    journal, feeds completions and acks into it, and ends the attempt
    with an Output entry, a Suspension or an Error.

    All journal mutation happens on the session's event loop: handler
    operations mutate synchronously and only queue their outbound
    messages, the inbound task applies completions between handler
    steps.
    """

    def __init__(
        self,
        stream: MessageStream,
        config: SessionConfig | None = None,
        logger: Logger | None = None,
    ) -> None:
        if config is None:
            config = SessionConfig()

        if logger is None:
            logger = Logger(template=SESSION_TEMPLATE)

        self._stream = stream
        self._config = config
        self._logger = logger

        self._state = SessionState.STARTING
        self._journal: Journal | None = None
        self._correlator: CompletionCorrelator | None = None
        self._suspension = SuspensionController(timeout=config.suspension_timeout)

        self._run_lock = asyncio.Lock()
        self._outbox: asyncio.Queue[tuple[ProtocolMessage, bool]] = asyncio.Queue()

        self._handler_task: asyncio.Task | None = None
        self._inbound_task: asyncio.Task | None = None
        self._writer_task: asyncio.Task | None = None
        self._suspension_task: asyncio.Task | None = None

    @classmethod
    def connect(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        config: SessionConfig | None = None,
        logger: Logger | None = None,
    ) -> InvocationSession:
        """Create a session over a framed byte stream."""
        if config is None:
            config = SessionConfig()

        return cls(
            FramedMessageStream(
                reader,
                writer,
                max_frame_length=config.max_frame_length,
            ),
            config=config,
            logger=logger,
        )

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def journal(self) -> Journal:
        if self._journal is None:
            raise ProtocolViolationError(
                "Journal is not available before Start",
                state=self._state.value,
            )

        return self._journal

    @property
    def correlator(self) -> CompletionCorrelator:
        if self._correlator is None:
            raise ProtocolViolationError(
                "Correlator is not available before Start",
                state=self._state.value,
            )

        return self._correlator

    @property
    def suspension(self) -> SuspensionController:
        return self._suspension

    def issue(self, message: EntryMessage) -> JournalEntry:
        """
        Resolve the next operation of the handler against the journal.

        Replayed entries are returned as recorded. New entries are
        appended and queued for sending.
        """
        if self._state != SessionState.RUNNING:
            raise UnexpectedMessageError(
                message.message_type,
                self._state.value,
            )

        entry, replayed = self.journal.next_entry(message)

        if not replayed:
            self._outbox.put_nowait(
                (entry.to_message(), self._config.request_entry_acks)
            )

        return entry

    async def run(self, handler: Handler) -> SessionState:
        async with self._run_lock:
            if self._state != SessionState.STARTING:
                raise ProtocolViolationError(
                    "Session has already run",
                    state=self._state.value,
                )

            terminal_message: SuspensionMessage | ErrorMessage | None = None

            try:
                await self._start()
                outcome, terminal_message = await self._execute(handler)

            except InvocationError as err:
                outcome = SessionState.FAILED
                terminal_message = err.to_error_message()

                await self._log(
                    SessionError(
                        message=str(err),
                        invocation_id=self._debug_id,
                        entry_index=err.context.get("entry_index", -1),
                        state=self._state.value,
                    )
                )

            except Exception as err:
                outcome = SessionState.FAILED
                terminal_message = ErrorMessage.from_exception(err)

                await self._log(
                    SessionError(
                        message=f"Handler failed: {terminal_message.message}",
                        invocation_id=self._debug_id,
                        state=self._state.value,
                    )
                )

            await self._finish(outcome, terminal_message)

            return self._state

    @property
    def _debug_id(self) -> str:
        if self._journal is None:
            return ""

        return self._journal.debug_id

    async def _start(self) -> None:
        message = await self._stream.receive()

        if message is None:
            raise ProtocolViolationError(
                "Inbound stream ended before Start",
                state=self._state.value,
            )

        if not isinstance(message, StartMessage):
            raise UnexpectedMessageError(
                message.message_type,
                self._state.value,
                expected=["START"],
            )

        self._journal = Journal.from_start(message)
        self._correlator = CompletionCorrelator(self._journal)

        while not self._journal.is_fully_recorded:
            message = await self._stream.receive()

            if message is None:
                raise ProtocolViolationError(
                    f"Inbound stream ended after {len(self._journal)} of {self._journal.known_entries} entries",
                    state=self._state.value,
                )

            if not message.message_type.is_entry:
                raise UnexpectedMessageError(
                    message.message_type,
                    self._state.value,
                    expected=["entry message"],
                )

            self._journal.record(message)

        await self._log(
            SessionInfo(
                message=f"Started with {self._journal.known_entries} known entries",
                invocation_id=self._debug_id,
                state=self._state.value,
            )
        )

    async def _execute(
        self,
        handler: Handler,
    ) -> tuple[SessionState, SuspensionMessage | None]:
        self._state = SessionState.RUNNING
        context = InvocationContext(self)

        self._handler_task = asyncio.create_task(handler(context))
        self._inbound_task = asyncio.create_task(self._consume_inbound())
        self._writer_task = asyncio.create_task(self._write_outbound())
        self._suspension_task = asyncio.create_task(self._suspension.wait())

        pending: set[asyncio.Task] = {
            self._handler_task,
            self._inbound_task,
            self._writer_task,
            self._suspension_task,
        }

        while True:
            done, pending = await asyncio.wait(
                pending,
                return_when=asyncio.FIRST_COMPLETED,
            )

            if self._handler_task in done:
                self._write_output(self._handler_task)
                return SessionState.COMPLETED, None

            if self._suspension_task in done:
                return SessionState.SUSPENDED, self._suspension_task.result()

            # Raises if the inbound or writer task failed.
            for task in done:
                task.result()

    def _write_output(self, handler_task: asyncio.Task) -> None:
        try:
            output = handler_task.result()

        except TerminalFailure as failure:
            result = failure.to_failure()

        else:
            if output is None:
                output = b""

            result = Value(value=output)

        self.issue(OutputStreamEntryMessage(result=result))

    async def _consume_inbound(self) -> None:
        while True:
            message = await self._stream.receive()

            if message is None:
                self._suspension.close_input()
                await self._log(
                    SessionDebug(
                        message="Inbound stream ended",
                        invocation_id=self._debug_id,
                        state=self._state.value,
                    )
                )
                return

            if isinstance(message, CompletionMessage):
                entry = self.correlator.complete(message)
                self._suspension.resolved(entry.index)

            elif isinstance(message, EntryAckMessage):
                self.correlator.acknowledge(message)

            else:
                raise UnexpectedMessageError(
                    message.message_type,
                    self._state.value,
                    expected=["COMPLETION", "ENTRY_ACK"],
                )

    async def _write_outbound(self) -> None:
        while True:
            message, requires_ack = await self._outbox.get()
            try:
                await self._stream.send(message, requires_ack=requires_ack)

            finally:
                self._outbox.task_done()

    async def _flush_outbox(self) -> None:
        writer = self._writer_task
        if writer is None or writer.done():
            return

        drained = asyncio.ensure_future(self._outbox.join())
        await asyncio.wait(
            {drained, writer},
            return_when=asyncio.FIRST_COMPLETED,
        )

        if not drained.done():
            drained.cancel()

    async def _finish(
        self,
        outcome: SessionState,
        terminal_message: SuspensionMessage | ErrorMessage | None,
    ) -> None:
        self._suspension.cancel()

        await self._cancel_tasks(
            self._handler_task,
            self._inbound_task,
            self._suspension_task,
        )

        try:
            await self._flush_outbox()
            send_error = self._writer_error()
            await self._cancel_tasks(self._writer_task)

            if send_error is not None and outcome != SessionState.FAILED:
                # Whatever was queued, Output included, never reached the runtime.
                outcome = SessionState.FAILED
                terminal_message = ErrorMessage.from_exception(send_error)

                await self._log(
                    SessionError(
                        message=f"Sending journal entries failed: {terminal_message.message}",
                        invocation_id=self._debug_id,
                        state=self._state.value,
                    )
                )

            if terminal_message is not None:
                await self._stream.send(terminal_message)

        finally:
            self._state = outcome

            if self._correlator is not None:
                self._correlator.cancel_all()

            await self._stream.close()

        if outcome == SessionState.SUSPENDED:
            await self._log(
                SessionWarning(
                    message=f"Suspended on entries {list(terminal_message.entry_indexes)}",
                    invocation_id=self._debug_id,
                    state=self._state.value,
                )
            )

        else:
            await self._log(
                SessionInfo(
                    message=f"Invocation attempt ended {outcome.value}",
                    invocation_id=self._debug_id,
                    state=self._state.value,
                )
            )

    def _writer_error(self) -> BaseException | None:
        writer = self._writer_task
        if writer is None or not writer.done() or writer.cancelled():
            return None

        return writer.exception()

    async def _cancel_tasks(self, *tasks: asyncio.Task | None) -> None:
        running = [task for task in tasks if task is not None]
        for task in running:
            if not task.done():
                task.cancel()

        # Collects results so failed tasks are not reported as unretrieved.
        await asyncio.gather(*running, return_exceptions=True)

    async def _log(self, entry: SessionDebug | SessionInfo | SessionWarning | SessionError) -> None:
        await self._logger.log(entry)

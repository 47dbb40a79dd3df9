from __future__ import annotations

import asyncio

from resumable.protocol.errors import ProtocolViolationError
from resumable.protocol.messages import ProtocolMessage

from .message_stream import MessageStream


class MemoryMessageStream(MessageStream):
    """
    In-process stream. The runtime side feeds inbound messages and
    reads what the invocation sent from `sent`.
    """

    def __init__(self) -> None:
        self._inbound: asyncio.Queue[ProtocolMessage | None] = asyncio.Queue()
        self._input_ended = False
        self.sent: list[ProtocolMessage] = []
        self.acks_requested: list[int] = []
        self.closed = False

    def feed(self, *messages: ProtocolMessage) -> None:
        if self._input_ended:
            raise ProtocolViolationError(
                "Cannot feed messages after input ended",
            )

        for message in messages:
            self._inbound.put_nowait(message)

    def end_input(self) -> None:
        if not self._input_ended:
            self._input_ended = True
            self._inbound.put_nowait(None)

    async def receive(self) -> ProtocolMessage | None:
        message = await self._inbound.get()
        if message is None:
            # Keep reporting the end to later readers.
            self._inbound.put_nowait(None)

        return message

    async def send(
        self,
        message: ProtocolMessage,
        requires_ack: bool = False,
    ) -> None:
        if self.closed:
            raise ProtocolViolationError(
                f"Cannot send {message.message_type.name} on a closed stream",
            )

        if requires_ack:
            self.acks_requested.append(len(self.sent))

        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True

from __future__ import annotations

import asyncio

from resumable.protocol.codec import MAX_FRAME_LENGTH, FrameBuffer, MessageCodec
from resumable.protocol.errors import MalformedMessageError
from resumable.protocol.messages import ProtocolMessage

from .message_stream import MessageStream

READ_SIZE = 65536


class FramedMessageStream(MessageStream):
    """Message stream over asyncio streams using the binary frame codec."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        codec: MessageCodec | None = None,
        max_frame_length: int = MAX_FRAME_LENGTH,
    ) -> None:
        if codec is None:
            codec = MessageCodec()

        self._reader = reader
        self._writer = writer
        self._codec = codec
        self._buffer = FrameBuffer(max_frame_length=max_frame_length)
        self._write_lock = asyncio.Lock()
        self._eof = False

    async def receive(self) -> ProtocolMessage | None:
        while True:
            frame = self._buffer.maybe_extract_frame()
            if frame is not None:
                header, body = frame
                return self._codec.decode(header, body)

            if self._eof:
                if self._buffer:
                    raise MalformedMessageError(
                        bytes(self._buffer),
                        "stream ended inside a frame",
                    )

                return None

            data = await self._reader.read(READ_SIZE)
            if not data:
                self._eof = True
                continue

            self._buffer += data

    async def send(
        self,
        message: ProtocolMessage,
        requires_ack: bool = False,
    ) -> None:
        frame = self._codec.encode(message, requires_ack=requires_ack)

        async with self._write_lock:
            self._writer.write(frame)
            await self._writer.drain()

    async def close(self) -> None:
        if self._writer.is_closing():
            return

        self._writer.close()
        await self._writer.wait_closed()

from __future__ import annotations

from resumable.protocol.errors import FrameTooLargeError, ProtocolViolationError

from .message_header import HEADER_SIZE, MessageHeader

# Max body length: 32MB
MAX_FRAME_LENGTH = 32 * 1024 * 1024


class FrameBuffer:
    """
    Accumulates inbound bytes and yields complete frames.

    The buffer never holds more than one maximum-length frame plus its
    header beyond what has already been extracted.
    """

    def __init__(
        self,
        max_frame_length: int = MAX_FRAME_LENGTH,
    ) -> None:
        self.buffer = bytearray()
        self._max_frame_length = max_frame_length
        self._max_buffer_size = (max_frame_length + HEADER_SIZE) * 2

    def __iadd__(self, byteslike: bytes | bytearray) -> FrameBuffer:
        new_size = len(self.buffer) + len(byteslike)
        if new_size > self._max_buffer_size:
            raise ProtocolViolationError(
                f"Buffer would exceed max size: {new_size} > {self._max_buffer_size} bytes",
                buffer_size=new_size,
            )
        self.buffer += byteslike
        return self

    def __bool__(self) -> bool:
        return bool(len(self))

    def __len__(self) -> int:
        return len(self.buffer)

    def __bytes__(self) -> bytes:
        return bytes(self.buffer)

    def _extract(self, count: int) -> bytearray:
        out = self.buffer[:count]
        del self.buffer[:count]
        return out

    def maybe_extract_frame(self) -> tuple[MessageHeader, bytes] | None:
        """
        Extract the next frame if it is complete in the buffer.

        Returns the decoded header and the raw body, or None when more
        bytes are needed.

        Raises:
            FrameTooLargeError: If the header announces a body larger
                than max_frame_length.
        """
        if len(self.buffer) < HEADER_SIZE:
            return None

        header = MessageHeader.from_bytes(bytes(self.buffer[:HEADER_SIZE]))

        if header.length > self._max_frame_length:
            raise FrameTooLargeError(
                actual_size=header.length,
                max_size=self._max_frame_length,
            )

        if len(self.buffer) < HEADER_SIZE + header.length:
            return None

        self._extract(HEADER_SIZE)
        body = bytes(self._extract(header.length))

        return header, body

    def clear(self):
        self.buffer.clear()

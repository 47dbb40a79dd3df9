from __future__ import annotations

import struct

from resumable.protocol.messages import MessageFlag

HEADER_SIZE = 8
HEADER_FORMAT = ">H H I"


class MessageHeader:
    """
    Fixed size frame header.

    Wire format (8 bytes header + variable body):
    +-------------+-------------+----------------------+
    | Type        | Flags       | Body length          |
    | (2 bytes)   | (2 bytes)   | (4 bytes)            |
    +-------------+-------------+----------------------+
    |                  Body (variable)                 |
    +--------------------------------------------------+
    """

    __slots__ = (
        "_type_code",
        "_flags",
        "_length",
    )

    def __init__(
        self,
        type_code: int,
        flags: MessageFlag,
        length: int,
    ) -> None:
        self._type_code = type_code
        self._flags = flags
        self._length = length

    @property
    def type_code(self) -> int:
        return self._type_code

    @property
    def flags(self) -> MessageFlag:
        return self._flags

    @property
    def length(self) -> int:
        return self._length

    @property
    def completed(self) -> bool:
        return MessageFlag.COMPLETED in self._flags

    @property
    def requires_ack(self) -> bool:
        return MessageFlag.REQUIRES_ACK in self._flags

    def to_bytes(self) -> bytes:
        return struct.pack(
            HEADER_FORMAT,
            self._type_code,
            self._flags.value,
            self._length,
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> MessageHeader:
        if len(data) < HEADER_SIZE:
            raise ValueError(f"Header too short: {len(data)} < {HEADER_SIZE}")

        type_code, flags, length = struct.unpack(HEADER_FORMAT, data[:HEADER_SIZE])

        return cls(
            type_code=type_code,
            flags=MessageFlag(flags),
            length=length,
        )

    def __repr__(self) -> str:
        return (
            f"MessageHeader(type=0x{self._type_code:04X}, "
            f"flags=0x{self._flags.value:04X}, length={self._length})"
        )

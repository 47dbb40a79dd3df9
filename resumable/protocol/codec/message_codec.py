from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

import msgspec

from resumable.protocol.entries import ENTRY_CATALOG, lookup_kind
from resumable.protocol.errors import (
    MalformedMessageError,
    ProtocolViolationError,
)
from resumable.protocol.messages import (
    CompletionMessage,
    EntryAckMessage,
    ErrorMessage,
    MessageFlag,
    MessageType,
    ProtocolMessage,
    StartMessage,
    SuspensionMessage,
)

from .message_header import MessageHeader

CORE_MESSAGE_CLASSES: Mapping[MessageType, type] = MappingProxyType(
    {
        MessageType.START: StartMessage,
        MessageType.COMPLETION: CompletionMessage,
        MessageType.SUSPENSION: SuspensionMessage,
        MessageType.ERROR: ErrorMessage,
        MessageType.ENTRY_ACK: EntryAckMessage,
    }
)


def message_class_for(message_type: MessageType) -> type:
    if (message_class := CORE_MESSAGE_CLASSES.get(message_type)) is not None:
        return message_class

    return ENTRY_CATALOG[message_type].message_class


class MessageCodec:
    """Encodes protocol messages into frames and decodes them back."""

    __slots__ = (
        "_encoder",
        "_decoders",
    )

    def __init__(self) -> None:
        self._encoder = msgspec.msgpack.Encoder()
        self._decoders: dict[MessageType, msgspec.msgpack.Decoder] = {
            message_type: msgspec.msgpack.Decoder(type=message_class_for(message_type))
            for message_type in MessageType
        }

    def flags_for(
        self,
        message: ProtocolMessage,
        requires_ack: bool = False,
    ) -> MessageFlag:
        flags = MessageFlag.NONE
        kind = lookup_kind(message.message_type)

        if kind is None:
            return flags

        if kind.completable and kind.result_of(message) is not None:
            flags |= MessageFlag.COMPLETED

        if requires_ack:
            flags |= MessageFlag.REQUIRES_ACK

        return flags

    def encode(
        self,
        message: ProtocolMessage,
        requires_ack: bool = False,
    ) -> bytes:
        body = self._encoder.encode(message)
        header = MessageHeader(
            type_code=message.message_type.value,
            flags=self.flags_for(message, requires_ack=requires_ack),
            length=len(body),
        )

        return header.to_bytes() + body

    def decode(self, header: MessageHeader, body: bytes) -> ProtocolMessage:
        try:
            message_type = MessageType(header.type_code)

        except ValueError:
            raise ProtocolViolationError(
                f"Unknown message type 0x{header.type_code:04X}",
                type_code=header.type_code,
            )

        if len(body) != header.length:
            raise MalformedMessageError(
                body,
                f"body length {len(body)} does not match header length {header.length}",
            )

        try:
            return self._decoders[message_type].decode(body)

        except msgspec.DecodeError as err:
            raise MalformedMessageError(
                body,
                f"cannot decode {message_type.name}: {err}",
                cause=err,
            )

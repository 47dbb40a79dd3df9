import msgspec
import pytest

from resumable.protocol.codec import (
    HEADER_SIZE,
    FrameBuffer,
    MessageCodec,
    MessageHeader,
)
from resumable.protocol.errors import (
    FrameTooLargeError,
    MalformedMessageError,
    ProtocolViolationError,
)
from resumable.protocol.failure import Failure
from resumable.protocol.messages import (
    EMPTY,
    CompletionMessage,
    ErrorMessage,
    GetStateEntryMessage,
    InvokeEntryMessage,
    MessageFlag,
    MessageType,
    SetStateEntryMessage,
    StartMessage,
    StateEntry,
    SuspensionMessage,
    Value,
)


@pytest.fixture
def codec() -> MessageCodec:
    return MessageCodec()


def split_frame(frame: bytes) -> tuple[MessageHeader, bytes]:
    return MessageHeader.from_bytes(frame[:HEADER_SIZE]), frame[HEADER_SIZE:]


# =============================================================================
# Header
# =============================================================================


class TestMessageHeader:
    def test_header_layout_is_big_endian(self):
        header = MessageHeader(
            type_code=MessageType.INVOKE,
            flags=MessageFlag.COMPLETED | MessageFlag.REQUIRES_ACK,
            length=258,
        )

        assert header.to_bytes() == b"\x0c\x01\x80\x01\x00\x00\x01\x02"

    def test_from_bytes_reads_flags(self):
        header = MessageHeader.from_bytes(b"\x08\x00\x00\x01\x00\x00\x00\x05")

        assert header.type_code == MessageType.GET_STATE
        assert header.completed
        assert not header.requires_ack
        assert header.length == 5

    def test_short_header_rejected(self):
        with pytest.raises(ValueError):
            MessageHeader.from_bytes(b"\x00\x01")


# =============================================================================
# Codec
# =============================================================================


class TestMessageCodec:
    def test_start_message_round_trip(self, codec: MessageCodec):
        start = StartMessage(
            id=b"inv",
            debug_id="inv-1",
            known_entries=2,
            state_map=(StateEntry(key=b"k", value=b""),),
            partial_state=True,
        )

        header, body = split_frame(codec.encode(start))

        assert header.type_code == MessageType.START
        assert header.flags == MessageFlag.NONE
        assert codec.decode(header, body) == start

    def test_completion_carries_tagged_failure(self, codec: MessageCodec):
        completion = CompletionMessage(
            entry_index=4,
            result=Failure(code=14, message="unavailable"),
        )

        decoded = codec.decode(*split_frame(codec.encode(completion)))

        assert isinstance(decoded.result, Failure)
        assert decoded.result.code == 14

    def test_empty_result_is_distinct_from_empty_value(self, codec: MessageCodec):
        empty = codec.decode(
            *split_frame(codec.encode(CompletionMessage(entry_index=0, result=EMPTY)))
        )
        empty_value = codec.decode(
            *split_frame(
                codec.encode(CompletionMessage(entry_index=0, result=Value(value=b"")))
            )
        )

        assert empty.result == EMPTY
        assert empty_value.result == Value(value=b"")

    def test_completed_flag_on_resolved_completable_entry(self, codec: MessageCodec):
        pending = GetStateEntryMessage(key=b"k")
        resolved = GetStateEntryMessage(key=b"k", result=Value(value=b"v"))

        assert codec.flags_for(pending) == MessageFlag.NONE
        assert codec.flags_for(resolved) == MessageFlag.COMPLETED

    def test_non_completable_entry_never_flagged_completed(self, codec: MessageCodec):
        message = SetStateEntryMessage(key=b"k", value=b"v")

        assert codec.flags_for(message) == MessageFlag.NONE

    def test_requires_ack_flag(self, codec: MessageCodec):
        message = InvokeEntryMessage(
            service_name="svc",
            method_name="run",
            parameter=b"",
        )

        header, _ = split_frame(codec.encode(message, requires_ack=True))

        assert header.requires_ack
        assert not header.completed

    def test_unknown_type_code_is_violation(self, codec: MessageCodec):
        header = MessageHeader(type_code=0x0999, flags=MessageFlag.NONE, length=0)

        with pytest.raises(ProtocolViolationError):
            codec.decode(header, b"")

    def test_undecodable_body_is_malformed(self, codec: MessageCodec):
        body = b"\xc1\xc1"
        header = MessageHeader(
            type_code=MessageType.COMPLETION,
            flags=MessageFlag.NONE,
            length=len(body),
        )

        with pytest.raises(MalformedMessageError) as err:
            codec.decode(header, body)

        assert err.value.code == 33

    def test_length_mismatch_is_malformed(self, codec: MessageCodec):
        header = MessageHeader(
            type_code=MessageType.ENTRY_ACK,
            flags=MessageFlag.NONE,
            length=10,
        )

        with pytest.raises(MalformedMessageError):
            codec.decode(header, msgspec.msgpack.encode([1]))

    def test_empty_suspension_is_malformed(self, codec: MessageCodec):
        body = msgspec.msgpack.encode([[]])
        header = MessageHeader(
            type_code=MessageType.SUSPENSION,
            flags=MessageFlag.NONE,
            length=len(body),
        )

        with pytest.raises(MalformedMessageError):
            codec.decode(header, body)

    def test_decoded_error_code_normalized(self, codec: MessageCodec):
        body = msgspec.msgpack.encode([250, "boom", ""])
        header = MessageHeader(
            type_code=MessageType.ERROR,
            flags=MessageFlag.NONE,
            length=len(body),
        )

        decoded = codec.decode(header, body)

        assert decoded == ErrorMessage(code=2, message="boom")

    def test_suspension_round_trip(self, codec: MessageCodec):
        suspension = SuspensionMessage(entry_indexes=(3, 7))

        assert codec.decode(*split_frame(codec.encode(suspension))) == suspension


# =============================================================================
# Frame buffer
# =============================================================================


class TestFrameBuffer:
    def test_waits_for_complete_frame(self, codec: MessageCodec):
        frame = codec.encode(SetStateEntryMessage(key=b"k", value=b"v"))
        buffer = FrameBuffer()

        buffer += frame[:HEADER_SIZE + 1]
        assert buffer.maybe_extract_frame() is None

        buffer += frame[HEADER_SIZE + 1:]
        header, body = buffer.maybe_extract_frame()

        assert header.type_code == MessageType.SET_STATE
        assert len(body) == header.length
        assert len(buffer) == 0

    def test_extracts_back_to_back_frames(self, codec: MessageCodec):
        buffer = FrameBuffer()
        buffer += codec.encode(SuspensionMessage(entry_indexes=(1,)))
        buffer += codec.encode(SuspensionMessage(entry_indexes=(2,)))

        first = codec.decode(*buffer.maybe_extract_frame())
        second = codec.decode(*buffer.maybe_extract_frame())

        assert first.entry_indexes == (1,)
        assert second.entry_indexes == (2,)
        assert buffer.maybe_extract_frame() is None

    def test_oversized_frame_rejected(self):
        buffer = FrameBuffer(max_frame_length=16)
        buffer += MessageHeader(
            type_code=MessageType.START,
            flags=MessageFlag.NONE,
            length=17,
        ).to_bytes()

        with pytest.raises(FrameTooLargeError) as err:
            buffer.maybe_extract_frame()

        assert err.value.actual_size == 17
        assert err.value.max_size == 16

    def test_buffer_overflow_rejected(self):
        buffer = FrameBuffer(max_frame_length=4)

        with pytest.raises(ProtocolViolationError):
            buffer += b"\x00" * 100

from .frame_buffer import MAX_FRAME_LENGTH, FrameBuffer
from .message_codec import CORE_MESSAGE_CLASSES, MessageCodec, message_class_for
from .message_header import HEADER_SIZE, MessageHeader

__all__ = [
    "CORE_MESSAGE_CLASSES",
    "FrameBuffer",
    "HEADER_SIZE",
    "MAX_FRAME_LENGTH",
    "MessageCodec",
    "MessageHeader",
    "message_class_for",
]

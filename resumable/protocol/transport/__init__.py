from .framed_message_stream import FramedMessageStream
from .memory_message_stream import MemoryMessageStream
from .message_stream import MessageStream

__all__ = [
    "FramedMessageStream",
    "MemoryMessageStream",
    "MessageStream",
]

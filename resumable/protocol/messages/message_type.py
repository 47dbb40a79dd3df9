from enum import IntEnum, IntFlag


CORE_BASE = 0x0000
IO_BASE = 0x0400
STATE_BASE = 0x0800
SYSCALL_BASE = 0x0C00


class MessageType(IntEnum):
    """Wire type codes, formed as category base + offset."""

    START = CORE_BASE + 0
    COMPLETION = CORE_BASE + 1
    SUSPENSION = CORE_BASE + 2
    ERROR = CORE_BASE + 3
    ENTRY_ACK = CORE_BASE + 4

    POLL_INPUT_STREAM = IO_BASE + 0
    OUTPUT_STREAM = IO_BASE + 1

    GET_STATE = STATE_BASE + 0
    SET_STATE = STATE_BASE + 1
    CLEAR_STATE = STATE_BASE + 2

    SLEEP = SYSCALL_BASE + 0
    INVOKE = SYSCALL_BASE + 1
    BACKGROUND_INVOKE = SYSCALL_BASE + 2
    AWAKEABLE = SYSCALL_BASE + 3
    COMPLETE_AWAKEABLE = SYSCALL_BASE + 4

    @property
    def is_entry(self) -> bool:
        return self >= IO_BASE


class MessageFlag(IntFlag):
    NONE = 0x0000
    COMPLETED = 0x0001
    REQUIRES_ACK = 0x8000

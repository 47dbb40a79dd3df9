from enum import Enum, IntEnum


class JournalEntryState(IntEnum):
    """
    State machine for journal entries tracking completion progress.

    Transitions: PENDING -> COMPLETED -> ACKNOWLEDGED
    """

    PENDING = 0
    COMPLETED = 1
    ACKNOWLEDGED = 2


class TransitionResult(Enum):
    SUCCESS = "success"
    ALREADY_AT_STATE = "already_at_state"
    ALREADY_PAST_STATE = "already_past_state"
    DEFERRED = "deferred"
    INVALID_TRANSITION = "invalid_transition"

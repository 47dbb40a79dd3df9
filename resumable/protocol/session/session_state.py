from enum import Enum


class SessionState(Enum):
    """
    Lifecycle of one invocation attempt.

    Transitions: STARTING -> RUNNING -> SUSPENDED | COMPLETED | FAILED
    """

    STARTING = "starting"
    RUNNING = "running"
    SUSPENDED = "suspended"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (
            SessionState.SUSPENDED,
            SessionState.COMPLETED,
            SessionState.FAILED,
        )

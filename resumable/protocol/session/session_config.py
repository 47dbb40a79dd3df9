from dataclasses import dataclass

from resumable.env import Env, TimeParser
from resumable.logging import LoggingConfig
from resumable.protocol.codec import MAX_FRAME_LENGTH


@dataclass(slots=True)
class SessionConfig:
    """Configuration settings for an invocation session."""

    # None waits for the inbound stream to end before suspending.
    suspension_timeout: float | None = 30.0
    max_frame_length: int = MAX_FRAME_LENGTH
    request_entry_acks: bool = False

    @classmethod
    def from_env(cls, env: Env) -> "SessionConfig":
        """Create a config instance from environment settings."""
        suspension_timeout: float | None = TimeParser().parse(
            env.RESUMABLE_SUSPENSION_TIMEOUT,
        )
        if suspension_timeout <= 0:
            suspension_timeout = None

        return cls(
            suspension_timeout=suspension_timeout,
            max_frame_length=env.RESUMABLE_MAX_FRAME_LENGTH,
            request_entry_acks=env.RESUMABLE_REQUEST_ENTRY_ACKS,
        )


def configure_logging(env: Env) -> None:
    """Apply the Env logging settings to the global logging config."""
    LoggingConfig().update(
        log_directory=env.RESUMABLE_LOGS_DIRECTORY,
        log_level=env.RESUMABLE_LOG_LEVEL,
        log_output=env.RESUMABLE_LOG_OUTPUT,
    )

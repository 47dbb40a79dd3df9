from __future__ import annotations

from typing import Callable, Dict, Literal, Union

from pydantic import BaseModel, StrictBool, StrictInt, StrictStr

PrimaryType = Union[str, int, float, bytes, bool]


class Env(BaseModel):
    RESUMABLE_LOG_LEVEL: StrictStr = "info"
    RESUMABLE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    RESUMABLE_LOGS_DIRECTORY: StrictStr | None = None

    # Session settings
    RESUMABLE_SUSPENSION_TIMEOUT: StrictStr = "30s"
    RESUMABLE_MAX_FRAME_LENGTH: StrictInt = 32 * 1024 * 1024
    RESUMABLE_REQUEST_ENTRY_ACKS: StrictBool = False

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "RESUMABLE_LOG_LEVEL": str,
            "RESUMABLE_LOG_OUTPUT": str,
            "RESUMABLE_LOGS_DIRECTORY": str,
            "RESUMABLE_SUSPENSION_TIMEOUT": str,
            "RESUMABLE_MAX_FRAME_LENGTH": int,
            "RESUMABLE_REQUEST_ENTRY_ACKS": parse_bool,
        }


def parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")

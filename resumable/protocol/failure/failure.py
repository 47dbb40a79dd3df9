from __future__ import annotations

import msgspec

from .status_code import StatusCode, normalize_failure_code


FAILURE_TAG = 15


class Failure(msgspec.Struct, array_like=True, tag=FAILURE_TAG):
    """
    User visible failure, e.g. the failed result of an Invoke entry
    or the failure value of an invocation's output.

    The code is normalized on construction and on decode.
    """

    code: int
    message: str = ""

    def __post_init__(self) -> None:
        self.code = normalize_failure_code(self.code)

    @property
    def status(self) -> StatusCode:
        return StatusCode(self.code)

    @classmethod
    def from_exception(
        cls,
        error: BaseException,
        code: int = StatusCode.UNKNOWN,
    ) -> Failure:
        message = str(error) or type(error).__name__
        return cls(code=int(code), message=message)

from __future__ import annotations

import asyncio

from resumable.protocol.errors import ProtocolViolationError
from resumable.protocol.messages import SuspensionMessage


class SuspensionController:
    """
    Decides when an invocation should stop waiting and suspend.

    Tracks the entry indices the executing logic currently awaits. The
    invocation suspends when at least one index is awaited and either
    the inbound stream has ended or the suspension timeout elapses
    without any awaited entry resolving.
    """

    __slots__ = (
        "_timeout",
        "_blocked",
        "_input_closed",
        "_timer",
        "_settling",
        "_suspended",
    )

    def __init__(self, timeout: float | None = None) -> None:
        self._timeout = timeout
        self._blocked: dict[int, int] = {}
        self._input_closed = False
        self._timer: asyncio.TimerHandle | None = None
        self._settling: asyncio.Handle | None = None
        self._suspended: asyncio.Future[SuspensionMessage] | None = None

    @property
    def timeout(self) -> float | None:
        return self._timeout

    @property
    def blocked_indices(self) -> list[int]:
        return sorted(self._blocked)

    @property
    def input_closed(self) -> bool:
        return self._input_closed

    @property
    def suspended(self) -> bool:
        return (
            self._suspended is not None
            and self._suspended.done()
            and not self._suspended.cancelled()
        )

    def block(self, index: int) -> None:
        self._blocked[index] = self._blocked.get(index, 0) + 1
        self._evaluate()

    def unblock(self, index: int) -> None:
        count = self._blocked.get(index)
        if count is None:
            return

        if count > 1:
            self._blocked[index] = count - 1
            return

        del self._blocked[index]
        self._evaluate(progressed=True)

    def resolved(self, index: int) -> None:
        """The entry at index completed, nobody is blocked on it anymore."""
        if self._blocked.pop(index, None) is not None:
            self._evaluate(progressed=True)

    def close_input(self) -> None:
        self._input_closed = True
        self._evaluate()

    def suspension_message(self) -> SuspensionMessage:
        if not self._blocked:
            raise ProtocolViolationError(
                "Cannot suspend without any awaited entry",
            )

        return SuspensionMessage(
            entry_indexes=tuple(sorted(self._blocked)),
        )

    async def wait(self) -> SuspensionMessage:
        return await self._future()

    def cancel(self) -> None:
        self._cancel_timer()

        if self._settling is not None:
            self._settling.cancel()
            self._settling = None

        if self._suspended is not None and not self._suspended.done():
            self._suspended.cancel()

    def _future(self) -> asyncio.Future[SuspensionMessage]:
        if self._suspended is None:
            self._suspended = asyncio.get_running_loop().create_future()

        return self._suspended

    def _evaluate(self, progressed: bool = False) -> None:
        if self._future().done():
            return

        if not self._blocked:
            self._cancel_timer()
            return

        if self._input_closed:
            self._schedule_settle()
            return

        # The timer measures time since the last resolved entry.
        if progressed:
            self._cancel_timer()

        if self._timeout is not None and self._timer is None:
            self._timer = asyncio.get_running_loop().call_later(
                self._timeout,
                self._suspend,
            )

    def _schedule_settle(self) -> None:
        if self._settling is None:
            self._settling = asyncio.get_running_loop().call_soon(
                self._settle,
                frozenset(self._blocked),
            )

    def _settle(self, observed: frozenset[int]) -> None:
        """
        Suspend once the blocked set held still for a full loop pass.

        Awaits started together (gather, wait) each block from their
        own task step, so the set is only final after those steps ran.
        """
        self._settling = None

        if frozenset(self._blocked) != observed:
            self._evaluate()
            return

        self._suspend()

    def _suspend(self) -> None:
        self._cancel_timer()

        suspended = self._future()
        if suspended.done() or not self._blocked:
            return

        suspended.set_result(self.suspension_message())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

from __future__ import annotations

from typing import Mapping

from resumable.protocol.messages import EMPTY, Empty, Value


class LocalState:
    """
    Eager view of the invocation's key/value state.

    Seeded from the start snapshot and kept current by the state
    entries this execution records. A key is in one of three
    conditions: present (a value), known absent, or unknown. Unknown
    is only possible when the snapshot was partial.
    """

    __slots__ = (
        "_values",
        "_partial",
    )

    def __init__(
        self,
        snapshot: Mapping[bytes, bytes] | None = None,
        partial: bool = False,
    ) -> None:
        self._values: dict[bytes, bytes | None] = dict(snapshot or {})
        self._partial = partial

    @property
    def partial(self) -> bool:
        return self._partial

    def lookup(self, key: bytes) -> Empty | Value | None:
        """Resolve a key locally. None means it must be fetched."""
        if key in self._values:
            value = self._values[key]
            return EMPTY if value is None else Value(value=value)

        if self._partial:
            return None

        return EMPTY

    def set(self, key: bytes, value: bytes) -> None:
        self._values[key] = value

    def clear(self, key: bytes) -> None:
        self._values[key] = None

    def observe(self, key: bytes, result: Empty | Value) -> None:
        if isinstance(result, Value):
            self._values[key] = result.value
        else:
            self._values[key] = None

    def __contains__(self, key: bytes) -> bool:
        return self._values.get(key) is not None

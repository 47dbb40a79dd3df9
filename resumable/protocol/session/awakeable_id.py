from __future__ import annotations

import base64
import binascii
import struct

AWAKEABLE_ID_PREFIX = "prom_1"


class AwakeableIdentifier:
    """
    Public id of an awakeable entry, handed to third parties so they
    can complete it through the runtime.

    Format: "prom_1" followed by the unpadded urlsafe base64 of the
    invocation id and the big-endian u32 entry index.
    """

    __slots__ = (
        "invocation_id",
        "entry_index",
    )

    def __init__(self, invocation_id: bytes, entry_index: int) -> None:
        self.invocation_id = invocation_id
        self.entry_index = entry_index

    def __str__(self) -> str:
        raw = self.invocation_id + struct.pack(">I", self.entry_index)
        encoded = base64.urlsafe_b64encode(raw).decode().rstrip("=")

        return f"{AWAKEABLE_ID_PREFIX}{encoded}"

    def __repr__(self) -> str:
        return f"AwakeableIdentifier({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AwakeableIdentifier):
            return NotImplemented

        return (
            self.invocation_id == other.invocation_id
            and self.entry_index == other.entry_index
        )

    def __hash__(self) -> int:
        return hash((self.invocation_id, self.entry_index))

    @classmethod
    def parse(cls, awakeable_id: str) -> AwakeableIdentifier:
        if not awakeable_id.startswith(AWAKEABLE_ID_PREFIX):
            raise ValueError(f"Awakeable id must start with {AWAKEABLE_ID_PREFIX!r}")

        encoded = awakeable_id[len(AWAKEABLE_ID_PREFIX):]
        padding = "=" * (-len(encoded) % 4)

        try:
            raw = base64.urlsafe_b64decode(encoded + padding)

        except (binascii.Error, ValueError) as err:
            raise ValueError(f"Awakeable id is not valid base64: {awakeable_id!r}") from err

        if len(raw) <= 4:
            raise ValueError(f"Awakeable id is too short: {awakeable_id!r}")

        (entry_index,) = struct.unpack(">I", raw[-4:])

        return cls(raw[:-4], entry_index)

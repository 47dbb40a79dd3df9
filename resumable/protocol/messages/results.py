from typing import Union

import msgspec

from resumable.protocol.failure import Failure


EMPTY_TAG = 13
VALUE_TAG = 14


class Empty(msgspec.Struct, frozen=True, array_like=True, tag=EMPTY_TAG):
    """Completed with no value, distinct from a default (e.g. empty bytes) value."""


class Value(msgspec.Struct, frozen=True, array_like=True, tag=VALUE_TAG):
    value: bytes


EntryResult = Union[Empty, Value, Failure]

EMPTY = Empty()

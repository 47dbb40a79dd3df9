from .entry_catalog import ENTRY_CATALOG, kind_of, lookup_kind
from .entry_kind import EntryKind

__all__ = [
    "ENTRY_CATALOG",
    "EntryKind",
    "kind_of",
    "lookup_kind",
]

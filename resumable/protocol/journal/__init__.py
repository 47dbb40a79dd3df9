from .entry_state import JournalEntryState, TransitionResult
from .journal import Journal
from .journal_entry import JournalEntry
from .local_state import LocalState

__all__ = [
    "Journal",
    "JournalEntry",
    "JournalEntryState",
    "LocalState",
    "TransitionResult",
]

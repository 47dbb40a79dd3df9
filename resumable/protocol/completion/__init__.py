from .completion_correlator import CompletionCorrelator

__all__ = [
    "CompletionCorrelator",
]

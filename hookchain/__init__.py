"""Ordered, keyed listener chains with hook wrapping and result aggregation."""

from .chain import ListenerChain
from .consensus import join_results, summarize_results
from .errors import ChainError, ContinuationError, ManifestError
from .hooks import HookManager, HookName
from .models import ConsensusSummary, InsertPosition, ListenerEntry

__all__ = [
    "ChainError",
    "ConsensusSummary",
    "ContinuationError",
    "HookManager",
    "HookName",
    "InsertPosition",
    "ListenerChain",
    "ListenerEntry",
    "ManifestError",
    "join_results",
    "summarize_results",
]

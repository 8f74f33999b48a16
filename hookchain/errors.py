"""Exception types raised by hookchain."""

from __future__ import annotations


class ChainError(RuntimeError):
    """Base class for errors raised by the chain machinery itself."""


class ContinuationError(ChainError):
    pass


class ManifestError(ChainError):
    pass

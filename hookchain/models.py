"""Core Pydantic records for listener chains."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict


class ListenerEntry(BaseModel):
    """One registered listener.

    ``callback`` is invoked as ``callback(receiver, *args)``; hooks see the entry
    itself as their first argument.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    callback: Callable[..., Any]
    receiver: Any = None

    def invoke(self, *args: Any) -> Any:
        return self.callback(self.receiver, *args)


class InsertPosition(BaseModel):
    model_config = ConfigDict(extra="forbid")

    after: str | None = None
    before: str | None = None


class ConsensusSummary(BaseModel):
    model_config = ConfigDict(extra="forbid")

    successes: int = 0
    failures: int = 0
    dont_cares: int = 0
    total: int = 0
    outcome: bool | None = None

    @property
    def others(self) -> int:
        return self.total - self.successes - self.failures - self.dont_cares

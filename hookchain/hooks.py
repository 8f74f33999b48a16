"""Hook registry for the pre/post/post-fail stages around each listener."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from enum import Enum
from typing import Any

from hookchain.models import ListenerEntry


class HookName(str, Enum):
    PRE = "pre"
    POST = "post"
    POST_FAIL = "post_fail"


HookCallback = Callable[..., Any]


class HookManager:
    """In-process hook manager with deterministic callback ordering.

    Hooks are append-only. Each one is called with the listener entry first,
    followed by that listener's own argument list; return values are ignored.
    """

    def __init__(self) -> None:
        self._callbacks: dict[HookName, list[HookCallback]] = defaultdict(list)

    def register(self, name: HookName, callback: HookCallback) -> None:
        if not callable(callback):
            raise TypeError(f"{name.value} hook must be callable, got {type(callback).__name__}")
        self._callbacks[name].append(callback)

    def callbacks(self, name: HookName) -> tuple[HookCallback, ...]:
        return tuple(self._callbacks[name])

    def snapshot(self) -> dict[HookName, tuple[HookCallback, ...]]:
        return {name: self.callbacks(name) for name in HookName}


def emit_hooks(callbacks: tuple[HookCallback, ...], entry: ListenerEntry, args: list[Any]) -> None:
    # exceptions propagate; the chain decides how a failing hook is reported
    for callback in callbacks:
        callback(entry, *args)

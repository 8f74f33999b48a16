"""Ordered, keyed listener chain with hook wrapping and result aggregation."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any

from hookchain.consensus import join_results
from hookchain.errors import ContinuationError
from hookchain.hooks import HookCallback, HookManager, HookName, emit_hooks
from hookchain.models import InsertPosition, ListenerEntry

logger = logging.getLogger(__name__)

Done = Callable[[BaseException | None], Any]


class ListenerChain:
    """Holds an ordered list of keyed listeners and fires them in sequence.

    Listeners are called as ``callback(receiver, *args)``; the receiver defaults
    to the chain itself. Every fire call works on a snapshot of the listeners
    and hooks taken when it starts, so registrations made while a fire is in
    flight only affect later calls.
    """

    def __init__(self, hooks: HookManager | None = None) -> None:
        self._listeners: list[ListenerEntry] = []
        self.hooks = hooks or HookManager()

    def __len__(self) -> int:
        return len(self._listeners)

    def __iter__(self) -> Iterator[ListenerEntry]:
        return iter(self.entries())

    def __contains__(self, key: object) -> bool:
        return any(entry.key == key for entry in self._listeners)

    def __repr__(self) -> str:
        return f"ListenerChain(keys={self.keys()!r})"

    def entries(self) -> tuple[ListenerEntry, ...]:
        return tuple(self._listeners)

    def keys(self) -> list[str]:
        return [entry.key for entry in self._listeners]

    def _entry(self, key: str, receiver: Any, callback: Callable[..., Any] | None) -> ListenerEntry:
        if callback is None:
            callback, receiver = receiver, None
        if not callable(callback):
            raise TypeError(f"listener {key!r} must be callable, got {type(callback).__name__}")
        return ListenerEntry(key=key, callback=callback, receiver=self if receiver is None else receiver)

    def add(self, key: str, receiver: Any, callback: Callable[..., Any] | None = None) -> None:
        """Append a listener. ``add(key, fn)`` binds the chain as the receiver."""
        self._listeners.append(self._entry(key, receiver, callback))
        logger.debug("Added listener %s at position %s", key, len(self._listeners) - 1)

    def insert(
        self,
        position: int | Mapping[str, Any] | InsertPosition,
        key: str,
        receiver: Any,
        callback: Callable[..., Any] | None = None,
    ) -> None:
        """Insert a listener at an index or relative to existing keys.

        ``position`` is either an ``int`` index or a ``{"after": key, "before": key}``
        condition. The new entry goes right after the last ``after`` match, else
        right before the first ``before`` match, else at the end.
        """
        entry = self._entry(key, receiver, callback)

        if isinstance(position, int) and not isinstance(position, bool):
            self._listeners.insert(position, entry)
            logger.debug("Inserted listener %s at index %s", key, position)
            return

        if isinstance(position, Mapping):
            position = InsertPosition.model_validate(dict(position))
        elif not isinstance(position, InsertPosition):
            raise TypeError(f"insert position must be an int or a mapping, got {type(position).__name__}")

        after_index: int | None = None
        before_index: int | None = None
        for idx, existing in enumerate(self._listeners):
            if position.after is not None and existing.key == position.after:
                after_index = idx + 1
            if position.before is not None and before_index is None and existing.key == position.before:
                before_index = idx

        if after_index is not None:
            index = after_index
        elif before_index is not None:
            index = before_index
        else:
            index = len(self._listeners)

        self._listeners.insert(index, entry)
        logger.debug("Inserted listener %s at index %s (after=%s before=%s)", key, index, position.after, position.before)

    def remove(self, key: str) -> None:
        """Drop every listener registered under ``key``."""
        before = len(self._listeners)
        self._listeners = [entry for entry in self._listeners if entry.key != key]
        logger.debug("Removed %s listener(s) with key %s", before - len(self._listeners), key)

    def pre(self, fn: HookCallback) -> None:
        self.hooks.register(HookName.PRE, fn)

    def post(self, fn: HookCallback) -> None:
        self.hooks.register(HookName.POST, fn)

    def post_fail(self, fn: HookCallback) -> None:
        self.hooks.register(HookName.POST_FAIL, fn)

    async def fire(self, *args: Any) -> list[Any]:
        """Run every listener in order and return their results.

        Each listener gets its own copy of ``args``; awaitable return values are
        awaited before the next listener starts. The first failure (from a
        listener or from one of its pre/post hooks) runs the post-fail hooks with
        ``(error, *args)`` and is re-raised unchanged; later listeners are skipped.
        """
        listeners = self.entries()
        hooks = self.hooks.snapshot()
        results: list[Any] = []
        logger.debug("Firing %s listeners", len(listeners))

        for entry in listeners:
            current_args = list(args)
            try:
                emit_hooks(hooks[HookName.PRE], entry, current_args)
                value = entry.invoke(*current_args)
                if inspect.isawaitable(value):
                    value = await value
                emit_hooks(hooks[HookName.POST], entry, current_args)
            except Exception as exc:
                logger.warning("Listener %s failed: %s", entry.key, exc)
                emit_hooks(hooks[HookName.POST_FAIL], entry, [exc, *current_args])
                raise
            results.append(value)

        return results

    async def fire_and_join_results(self, *args: Any) -> bool | None:
        """Fire the chain and fold the boolean results into ``True``/``False``/``None``."""
        results = await self.fire(*args)
        return join_results(results)

    def fire_with_callback(self, *args: Any, done: Done) -> None:
        """Run listeners continuation-style, without hooks.

        Each listener is called as ``callback(receiver, *args, next_)`` and must
        call ``next_()`` to let the next one run, or ``next_(error)`` to stop the
        chain. ``done`` receives ``None`` after the last listener or the first
        error otherwise.
        """
        if not callable(done):
            raise TypeError("done must be callable")
        _CallbackRun(self.entries(), list(args), done).drive()


class _CallbackRun:
    """State of a single continuation-style pass over a listener snapshot."""

    def __init__(self, listeners: tuple[ListenerEntry, ...], args: list[Any], done: Done) -> None:
        self._listeners = listeners
        self._args = args
        self._done = done
        self._index = 0
        self._driving = False
        self._resumed = False
        self._finished = False

    def drive(self) -> None:
        # continuations invoked synchronously resume this loop instead of recursing
        if self._finished:
            raise ContinuationError("callback run has already finished")
        self._driving = True
        try:
            while True:
                if self._index >= len(self._listeners):
                    self._finish(None)
                    return
                entry = self._listeners[self._index]
                self._index += 1
                self._resumed = False
                logger.debug("Calling listener %s (callback mode)", entry.key)
                try:
                    entry.invoke(*self._args, self._continuation(entry))
                except Exception as exc:
                    if self._finished:
                        raise
                    logger.warning("Listener %s failed: %s", entry.key, exc)
                    self._finish(exc)
                    return
                if not self._resumed:
                    return
        finally:
            self._driving = False

    def _continuation(self, entry: ListenerEntry) -> Callable[..., None]:
        called = False

        def next_(error: BaseException | None = None) -> None:
            nonlocal called
            if called:
                raise ContinuationError(f"continuation for listener {entry.key!r} was already called")
            called = True
            if self._finished:
                raise ContinuationError(f"continuation for listener {entry.key!r} called after the chain finished")
            if error is not None:
                logger.warning("Listener %s reported failure: %s", entry.key, error)
                self._finish(error)
            elif self._driving:
                self._resumed = True
            else:
                self.drive()

        return next_

    def _finish(self, error: BaseException | None) -> None:
        self._finished = True
        self._done(error)

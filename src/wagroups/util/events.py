from __future__ import annotations

import asyncio
import contextlib
from collections import defaultdict
from collections.abc import Awaitable, Callable
from typing import Any

Listener = Callable[..., Awaitable[None]] | Callable[..., None]


class AsyncEventEmitter:
    """
    Small async event bus.

    Listeners may be sync or async; `emit()` awaits async listeners in
    registration order so that emissions observed by one listener keep the
    order they were published in.

    One-shot waiters (`wait_for_future`) are resolved with the first payload
    of a matching emission and are used to correlate query responses.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = defaultdict(list)
        self._waiters: dict[str, list[asyncio.Future[Any]]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return
        with contextlib.suppress(ValueError):
            listeners.remove(listener)

    def wait_for_future(self, event: str) -> asyncio.Future[Any]:
        """
        Register a waiter *synchronously* and return its Future.

        Registering before the triggering action avoids missing an emission
        that happens between building the awaitable and awaiting it.
        """

        fut: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._waiters[event].append(fut)
        return fut

    def discard_waiter(self, event: str, fut: asyncio.Future[Any]) -> None:
        waiters = self._waiters.get(event)
        if not waiters:
            return
        remaining = [f for f in waiters if f is not fut and not f.done()]
        if remaining:
            self._waiters[event] = remaining
        else:
            self._waiters.pop(event, None)

    async def emit(self, event: str, *args: Any) -> bool:
        any_triggered = False

        waiters = self._waiters.pop(event, None)
        if waiters:
            payload = args[0] if len(args) == 1 else args
            for fut in waiters:
                if not fut.done():
                    fut.set_result(payload)
                    any_triggered = True

        for listener in list(self._listeners.get(event, [])):
            any_triggered = True
            res = listener(*args)
            if asyncio.iscoroutine(res):
                await res

        return any_triggered

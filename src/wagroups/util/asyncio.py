from __future__ import annotations

import asyncio
import contextlib
import functools
from collections.abc import Awaitable, Callable, Coroutine
from typing import Any, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")

_Job = tuple[Callable[[], Awaitable[Any]], "asyncio.Future[Any]"]


async def cancel_suppress(task: asyncio.Task[object] | None) -> None:
    if not task:
        return
    # Never cancel/await the current task: that raises "Task cannot await on itself".
    if task is asyncio.current_task():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


def ensure_task(coro: Coroutine[Any, Any, T], *, name: str | None = None) -> asyncio.Task[T]:
    t: asyncio.Task[T] = asyncio.create_task(coro)
    if name:
        t.set_name(name)
    return t


class SerialQueue:
    """
    Single-consumer FIFO work queue.

    Jobs submitted with `run()` execute strictly one at a time in submission
    order; each caller receives its own job's result or exception. The worker
    task is started on demand and exits once the queue drains, so an idle
    queue holds no task.
    """

    def __init__(self, *, name: str = "wagroups.serial") -> None:
        self._name = name
        self._jobs: asyncio.Queue[_Job] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._closing = False

    @property
    def busy(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def run(self, fn: Callable[[], Awaitable[T]]) -> T:
        loop = asyncio.get_running_loop()
        fut: asyncio.Future[T] = loop.create_future()
        if self._jobs is None:
            self._jobs = asyncio.Queue()
        self._jobs.put_nowait((fn, fut))
        if not self.busy:
            self._worker = ensure_task(self._drain(self._jobs), name=self._name)
        return await fut

    async def _drain(self, jobs: asyncio.Queue[_Job]) -> None:
        while not jobs.empty():
            fn, fut = jobs.get_nowait()
            if fut.cancelled():
                continue
            try:
                result = await fn()
            except asyncio.CancelledError:
                fut.cancel()
                # Only close() cancels the worker itself; a cancelled job just ends that job.
                if self._closing:
                    raise
            except Exception as e:
                if not fut.done():
                    fut.set_exception(e)
            else:
                if not fut.done():
                    fut.set_result(result)

    async def close(self) -> None:
        self._closing = True
        try:
            await cancel_suppress(self._worker)
        finally:
            self._closing = False
        self._worker = None
        jobs, self._jobs = self._jobs, None
        while jobs is not None and not jobs.empty():
            _, fut = jobs.get_nowait()
            fut.cancel()


def run_serialized(
    fn: Callable[P, Awaitable[T]], *, queue: SerialQueue | None = None
) -> Callable[P, Coroutine[Any, Any, T]]:
    """
    Wrap `fn` so that concurrent invocations are queued and run one at a time.

    Each wrapped function gets its own `SerialQueue` unless one is passed in.
    """

    q = queue or SerialQueue(name=f"wagroups.serial.{getattr(fn, '__name__', 'fn')}")

    @functools.wraps(fn)
    async def _wrapped(*args: P.args, **kwargs: P.kwargs) -> T:
        return await q.run(lambda: fn(*args, **kwargs))

    return _wrapped

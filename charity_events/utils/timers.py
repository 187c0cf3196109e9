"""Timer-owning helpers for debouncing, throttling and polling.

Each helper owns its pending timer or task so the page that created it can
cancel it deterministically on teardown. Callbacks may be plain functions or
coroutine functions; coroutine results are scheduled as tasks on the running
event loop.
"""

import asyncio
import inspect
import logging
import time
from typing import Any, Callable, Optional, Set

logger = logging.getLogger(__name__)


class _TaskOwner:
    """Tracks tasks spawned from coroutine callbacks."""

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def _invoke(self, callback: Callable[..., Any], *args: Any) -> None:
        result = callback(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Timer callback failed: {task.exception()}")

    def _cancel_tasks(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()


class Debouncer(_TaskOwner):
    """
    Delay a callback until calls pause for a fixed interval.

    Every call to schedule() restarts the countdown; only the arguments of
    the last call are delivered.

    Example:
        debouncer = Debouncer(0.3, page.set_search_query)
        debouncer.schedule("park")
        debouncer.schedule("parks")   # only this one fires, 300ms later
    """

    def __init__(self, delay: float, callback: Callable[..., Any]):
        super().__init__()
        self.delay = delay
        self.callback = callback
        self._handle: Optional[asyncio.TimerHandle] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, *args: Any) -> None:
        """(Re)start the countdown; must be called with a running event loop."""
        if self._handle is not None:
            self._handle.cancel()
        self._args = args
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._handle = None
        args, self._args = self._args, ()
        self._invoke(self.callback, *args)

    def flush(self) -> None:
        """Fire a pending call immediately."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._args = ()
        self._cancel_tasks()


class Throttle(_TaskOwner):
    """Invoke a callback at most once per interval; extra calls are dropped."""

    def __init__(self, interval: float, callback: Callable[..., Any],
                 clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.interval = interval
        self.callback = callback
        self.clock = clock
        self._last_call: Optional[float] = None

    def __call__(self, *args: Any) -> bool:
        now = self.clock()
        if self._last_call is not None and now - self._last_call < self.interval:
            return False
        self._last_call = now
        self._invoke(self.callback, *args)
        return True

    def cancel(self) -> None:
        self._last_call = None
        self._cancel_tasks()


class PeriodicTimer:
    """Run a callback every interval seconds until cancelled."""

    def __init__(self, interval: float, callback: Callable[[], Any]):
        self.interval = interval
        self.callback = callback
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; restarting cancels the previous loop."""
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # Keep ticking; a failed tick is not fatal to the page
                logger.warning(f"Periodic callback failed: {e}")

    def cancel(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

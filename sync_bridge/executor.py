"""
This module provides :class:`WorkerPool`, the thread pool that factory-built computations are offloaded to.

Each job submitted with :meth:`WorkerPool.run_factory` runs on a pool thread with its own fresh
event loop. The factory is invoked there, its handle is driven to a terminal state there, and
only the captured :class:`~sync_bridge.outcome.Outcome` travels back to the caller. Nothing the
computation needs to make progress lives on the caller's thread.
"""

import asyncio
import concurrent.futures

from sync_bridge import ENVIRONMENT_VARIABLES as ENVS
from sync_bridge._helpers import settle, wait_settled
from sync_bridge._typing import *
from sync_bridge.outcome import Cancelled, Faulted, Outcome, capture
from sync_bridge.primitives._loggable import _LoggerMixin

Initializer = Callable[..., object]


class WorkerPool(concurrent.futures.ThreadPoolExecutor, _LoggerMixin):
    """
    A :class:`concurrent.futures.ThreadPoolExecutor` subclass that runs computation factories
    on event loops of their own.

    When debug logging is enabled for the pool's logger, every job also logs when it starts,
    how it settled, and, every :data:`~sync_bridge.ENVIRONMENT_VARIABLES.DEBUG_INTERVAL`
    seconds, that it is still running.

    Examples:
        >>> pool = WorkerPool(max_workers=4, thread_name_prefix="bridge")
        >>> async def fetch():
        ...     return 42
        >>> pool.run_factory(fetch).result()
        Value(42)
    """

    _name: str
    """The thread name prefix, also used to name the pool's logger."""

    def __init__(
        self,
        max_workers: Optional[int] = None,
        thread_name_prefix: str = "",
        initializer: Optional[Initializer] = None,
        initargs: Tuple[Any, ...] = (),
    ) -> None:
        """
        Initializes the WorkerPool.

        Args:
            max_workers: The maximum number of workers. Defaults to None.
            thread_name_prefix: Prefix for thread names. Defaults to ''.
            initializer: An initializer callable. Defaults to None.
            initargs: Arguments for the initializer. Defaults to ().

        Raises:
            ValueError: If `max_workers` is 0. A pool without workers of its own
                cannot run anything off the caller's thread.
        """
        if max_workers == 0:
            raise ValueError("A WorkerPool needs at least one worker")
        super().__init__(max_workers, thread_name_prefix, initializer, initargs)
        self._name = thread_name_prefix

    def run_factory(self, factory: Factory[T]) -> "concurrent.futures.Future[Outcome[T]]":
        """
        Submit `factory` to the pool and return a future for the outcome of the computation it builds.

        The returned future completes with an :class:`~sync_bridge.outcome.Outcome`, whatever
        the computation did. Errors raised by the factory call itself are captured as
        :class:`~sync_bridge.outcome.Faulted` too.

        Args:
            factory: A zero-argument callable that starts a computation and returns its handle.
        """
        return self.submit(drive_factory, factory, self)

    def __repr__(self) -> str:
        identifier = self._name or hex(id(self))
        return f"<{self.__class__.__name__} {identifier} [{len(self._threads)}/{self._max_workers} threads]>"

    async def _debug_daemon(self, fut: "asyncio.Future[Any]", factory: Factory[Any]) -> None:
        """
        Waits for `fut` to settle, logging every :data:`DEBUG_INTERVAL` seconds until it does.

        This code will only run if `self.logger.isEnabledFor(logging.DEBUG)` is True.
        """
        fnid = getattr(factory, "__qualname__", factory)
        if getattr(factory, "__module__", None):
            fnid = f"{factory.__module__}.{fnid}"

        done = fut.done
        log_debug = self.logger.debug
        interval = float(ENVS.DEBUG_INTERVAL)

        while not done():
            await asyncio.wait((fut,), timeout=interval)
            if not done():
                log_debug("%s processing %s", self, fnid)


def drive_factory(factory: Factory[T], pool: Optional[WorkerPool] = None) -> Outcome[T]:
    """
    Invoke `factory` on a fresh event loop in the current thread and settle the handle it returns.

    This is the body of every worker job. It is a plain function so any
    :class:`concurrent.futures.Executor` can run it, not only a :class:`WorkerPool`.

    Args:
        factory: A zero-argument callable that starts a computation and returns its handle.
        pool: The pool running this job, used for debug logging. Optional.
    """
    debug = pool is not None and pool.debug_logs_enabled
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        if debug:
            pool.logger.debug("%s invoking %s", pool, factory)  # type: ignore [union-attr]
        try:
            handle = factory()
        except (asyncio.CancelledError, concurrent.futures.CancelledError):
            outcome: Outcome[T] = Cancelled()
        except Exception as e:
            outcome = Faulted((e,))
        else:
            if _runs_on(handle, loop):
                fut = asyncio.ensure_future(handle, loop=loop)
                watch = pool._debug_daemon(fut, factory) if debug else wait_settled(fut)  # type: ignore [union-attr]
                loop.run_until_complete(watch)
                outcome = capture(fut)
            else:
                outcome = settle(handle)
        if debug:
            pool.logger.debug("%s settled %s: %r", pool, factory, outcome)  # type: ignore [union-attr]
        return outcome
    finally:
        try:
            _cancel_leftover_tasks(loop)
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.run_until_complete(loop.shutdown_default_executor())
        finally:
            asyncio.set_event_loop(None)
            loop.close()


def _runs_on(handle: Handle[Any], loop: asyncio.AbstractEventLoop) -> bool:
    """Whether `handle` is driven by `loop`, rather than by a thread or loop of its own."""
    if isinstance(handle, concurrent.futures.Future):
        return False
    if isinstance(handle, asyncio.Future):
        return handle.get_loop() is loop
    return True


def _cancel_leftover_tasks(loop: asyncio.AbstractEventLoop) -> None:
    leftovers = asyncio.all_tasks(loop)
    if not leftovers:
        return
    for task in leftovers:
        task.cancel()
    loop.run_until_complete(asyncio.wait(leftovers))


__all__ = ["WorkerPool", "drive_factory"]

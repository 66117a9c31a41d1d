"""
This module provides the blocking core shared by the direct waiter and the worker pool:
drive any handle to a terminal state from synchronous code and capture its :class:`Outcome`.
"""

import asyncio
import concurrent.futures
import inspect

from sync_bridge import exceptions
from sync_bridge._typing import *
from sync_bridge.outcome import Outcome, capture

_LOOP_BUSY_ERRORS = (
    "This event loop is already running",
    "Cannot run the event loop while another loop is running",
)

_LOOP_CHECK_INTERVAL = 0.1
"""Seconds between liveness checks on a loop in another thread while waiting on one of its handles."""


def settle(handle: Handle[T]) -> Outcome[T]:
    """
    Block the calling thread until `handle` reaches a terminal state, then return its outcome.

    There is no timeout. A handle that never settles blocks forever.

    Args:
        handle: An asyncio future or task, a :class:`concurrent.futures.Future`, a coroutine
            or any other awaitable. It may be pending or already settled.

    Raises:
        exceptions.SyncModeInAsyncContextError: If settling the handle requires the event loop
            that is already running in the calling thread.
        exceptions.BridgeRuntimeError: If the handle's event loop cannot be run, or stops
            running in another thread before the handle settles.
        TypeError: If `handle` is not a handle.

    Examples:
        >>> from sync_bridge.future import completed
        >>> settle(completed(1))
        Value(1)
    """
    if isinstance(handle, concurrent.futures.Future):
        block_until_done(handle)
        return capture(handle)

    if isinstance(handle, asyncio.Future):
        if handle.done():
            return capture(handle)
        loop = handle.get_loop()
        if loop.is_running():
            if loop is running_loop():
                raise exceptions.SyncModeInAsyncContextError
            return _settle_threadsafe(handle, loop)
        return _drive(loop, handle)

    if not inspect.isawaitable(handle):
        raise TypeError(f"{handle} is not an awaitable or a future")
    if running_loop() is not None:
        if asyncio.iscoroutine(handle):
            handle.close()
        raise exceptions.SyncModeInAsyncContextError
    loop = _thread_loop()
    return _drive(loop, asyncio.ensure_future(handle, loop=loop))


def block_until_done(fut: "concurrent.futures.Future[Any]", timeout: Optional[float] = None) -> bool:
    """
    Block until `fut` is done, cancelled included, and return True. Returns False on timeout.

    :func:`concurrent.futures.wait` only wakes for cancellations that went through
    :meth:`~concurrent.futures.Future.set_running_or_notify_cancel`, but a bare
    :meth:`~concurrent.futures.Future.cancel` on a pending future notifies the future's
    own condition, which is what :meth:`~concurrent.futures.Future.exception` waits on.
    """
    try:
        fut.exception(timeout)
    except concurrent.futures.CancelledError:
        pass
    except concurrent.futures.TimeoutError:
        return False
    return True


async def wait_settled(fut: "asyncio.Future[Any]") -> None:
    """Wait for `fut` to settle without raising its exception or cancellation."""
    await asyncio.wait((fut,))


def running_loop() -> Optional[asyncio.AbstractEventLoop]:
    """Return the event loop running in the current thread, or None if there isn't one."""
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _drive(loop: asyncio.AbstractEventLoop, fut: "asyncio.Future[T]") -> Outcome[T]:
    if loop.is_closed():
        raise exceptions.BridgeRuntimeError(f"{fut} can never settle, its event loop is closed")
    if running_loop() is not None:
        raise exceptions.SyncModeInAsyncContextError
    try:
        loop.run_until_complete(wait_settled(fut))
    except RuntimeError as e:
        if str(e) in _LOOP_BUSY_ERRORS:
            raise exceptions.SyncModeInAsyncContextError from None
        raise exceptions.BridgeRuntimeError(e) from e
    return capture(fut)


def _settle_threadsafe(fut: "asyncio.Future[T]", loop: asyncio.AbstractEventLoop) -> Outcome[T]:
    # The handle belongs to a loop running in another thread; watch it from there.
    watcher = asyncio.run_coroutine_threadsafe(wait_settled(fut), loop)
    while not block_until_done(watcher, _LOOP_CHECK_INTERVAL):
        if fut.done():
            break
        if not loop.is_running():
            # The loop stopped before the watcher could finish and nothing will resume it.
            watcher.cancel()
            break
    if not fut.done():
        raise exceptions.BridgeRuntimeError(f"{loop} stopped before {fut} settled")
    return capture(fut)


def _thread_loop() -> asyncio.AbstractEventLoop:
    """The current thread's event loop, replaced by a new one if there is none or it was closed."""
    try:
        loop = asyncio.get_event_loop()
    except RuntimeError:
        # Threads other than the main thread have no loop until one is set.
        loop = None
    if loop is None or loop.is_closed():
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
    return loop

"""
This module provides the blocking bridge from synchronous code to asynchronous computations.

Two entry points compose:

- :func:`wait_handle` blocks on a handle that already exists and unwraps its outcome.
- :func:`wait_factory` hands a factory to a worker pool, so the computation is created and driven
  on a thread of its own, then blocks on the result through :func:`wait_handle`.

:func:`wait_and_unwrap` picks between them: callables are factories, everything else is a handle.

Blocking is a last resort. If you can ``await`` the handle instead, do that. These functions are
meant for synchronous entry points such as command line mains and test harnesses.
"""

import concurrent.futures

from sync_bridge import exceptions
from sync_bridge._helpers import settle
from sync_bridge._typing import *
from sync_bridge.config import get_default_executor
from sync_bridge.executor import WorkerPool, drive_factory


def wait_handle(handle: Handle[T]) -> T:
    """
    Block until `handle` settles and extract its value.

    If the handle never settles, this function never returns. Otherwise:

    - If it completed, the value is returned.
    - If it was cancelled, :class:`~sync_bridge.exceptions.CancellationError` is raised.
    - If it faulted, the error raised by the computation is raised unchanged, same type and same
      instance. If the computation faulted with more than one error, as a
      :func:`~sync_bridge.asyncio.when_all` fan-in can, only the first in registration order is
      raised and the rest are discarded.

    Args:
        handle: An asyncio future or task, a :class:`concurrent.futures.Future`, a coroutine or
            any other awaitable, pending or already settled.

    Raises:
        exceptions.SyncModeInAsyncContextError: If the handle could only make progress on the event
            loop that is running in the calling thread, which blocking would freeze. Pass a factory
            to :func:`wait_factory` instead.

    Examples:
        >>> wait_handle(completed(42))
        42

        >>> async def fetch():
        ...     return "data"
        >>> wait_handle(fetch())
        'data'

    See Also:
        - :func:`wait_factory` for computations that must not run on the caller's thread.
    """
    return settle(handle).unwrap()


def wait_factory(factory: Factory[T], executor: Optional[concurrent.futures.Executor] = None) -> T:
    """
    Run the computation built by `factory` on a worker thread and block until it settles.

    The factory is invoked exactly once, on a worker pool thread with an event loop of its own.
    Its handle is driven there, so the computation always has a free thread to resume on even when
    the calling thread is the only thread its own context can run, for example a thread whose
    event loop is running. The calling thread only blocks on the result.

    Outcome semantics are those of :func:`wait_handle`. An error raised by the factory call itself
    is raised here unchanged.

    Args:
        factory: A zero-argument callable that starts a computation and returns its handle, usually
            an ``async def`` function that takes no arguments.
        executor: The pool to offload to. Defaults to
            :func:`~sync_bridge.config.get_default_executor`. The calling thread must not be one of
            its workers if it only has one.

    Raises:
        exceptions.FactoryNotCallable: If `factory` is not callable.

    Examples:
        >>> async def fetch():
        ...     await asyncio.sleep(0.01)
        ...     return 42
        >>> wait_factory(fetch)
        42

    See Also:
        - :class:`~sync_bridge.executor.WorkerPool`
    """
    if not callable(factory):
        raise exceptions.FactoryNotCallable(factory)
    pool = get_default_executor() if executor is None else executor
    if isinstance(pool, WorkerPool):
        job = pool.run_factory(factory)
    else:
        job = pool.submit(drive_factory, factory)
    # The job yields the computation's outcome; unwrap the job first, then the computation.
    return settle(job).unwrap().unwrap()


@overload
def wait_and_unwrap(obj: Factory[T], executor: Optional[concurrent.futures.Executor] = None) -> T: ...


@overload
def wait_and_unwrap(obj: Handle[T]) -> T: ...


def wait_and_unwrap(obj, executor=None):
    """
    Block until an asynchronous computation settles and extract its value.

    Callables are treated as factories and offloaded with :func:`wait_factory`. Anything else is
    treated as a handle and waited on directly with :func:`wait_handle`.

    Args:
        obj: A factory or a handle.
        executor: Optional; the pool to offload a factory to. Only valid with a factory.

    Raises:
        TypeError: If `executor` is given together with a handle.

    Examples:
        >>> wait_and_unwrap(completed("value"))
        'value'
        >>> async def compute():
        ...     return 1
        >>> wait_and_unwrap(compute)
        1
    """
    if callable(obj):
        return wait_factory(obj, executor)
    if executor is not None:
        raise TypeError(f"`executor` can only be used with a factory. You passed {obj}.")
    return wait_handle(obj)


__all__ = ["wait_and_unwrap", "wait_handle", "wait_factory"]

"""
This module initializes the sync_bridge library and exposes its public interface.

The `sync_bridge` library blocks synchronous code on asynchronous computations without
deadlocking single-threaded contexts. It provides:

    - :func:`~wait_and_unwrap`, :func:`~wait_handle`, :func:`~wait_factory`: The blocking bridge.
    - :func:`~when_all`: A fan-in that reports member errors in registration order.
    - :func:`~completed`, :func:`~faulted`, :func:`~cancelled`: Handles that are already settled.
    - :class:`~Outcome`, :class:`~Value`, :class:`~Faulted`, :class:`~Cancelled`: Settled results.
    - :class:`~WorkerPool`: The thread pool factories are offloaded to.

Examples:
    Blocking on a handle:
    >>> from sync_bridge import wait_and_unwrap
    >>> async def fetch():
    ...     return "Hello, World!"
    >>> wait_and_unwrap(fetch())
    'Hello, World!'

    Offloading a factory from inside a running event loop:
    >>> async def main():
    ...     return wait_and_unwrap(fetch)
    >>> asyncio.run(main())
    'Hello, World!'

See Also:
    - :mod:`sync_bridge.bridge`: The blocking entry points.
    - :mod:`sync_bridge.asyncio`: asyncio helpers.
"""

from sync_bridge import exceptions
from sync_bridge.asyncio import when_all
from sync_bridge.bridge import wait_and_unwrap, wait_factory, wait_handle
from sync_bridge.exceptions import AggregateError, CancellationError
from sync_bridge.executor import WorkerPool
from sync_bridge.future import cancelled, completed, faulted
from sync_bridge.outcome import Cancelled, Faulted, Outcome, Value

__all__ = [
    # modules
    "exceptions",
    # functions
    "wait_and_unwrap",
    "wait_handle",
    "wait_factory",
    "when_all",
    # settled handles
    "completed",
    "faulted",
    "cancelled",
    # outcomes
    "Outcome",
    "Value",
    "Faulted",
    "Cancelled",
    # executors
    "WorkerPool",
    # exceptions
    "CancellationError",
    "AggregateError",
]

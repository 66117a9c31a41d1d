"""
Helpers for building handles that are already in a terminal state.

The handles returned here are :class:`concurrent.futures.Future` objects, so they can be created
anywhere, with or without an event loop, and still be used as members of
:func:`~sync_bridge.asyncio.when_all`.

Examples:
    >>> from sync_bridge import wait_and_unwrap
    >>> wait_and_unwrap(completed(42))
    42
    >>> wait_and_unwrap(faulted(ValueError("boom")))
    Traceback (most recent call last):
    ...
    ValueError: boom
"""

import concurrent.futures

from sync_bridge._typing import *


def completed(value: T) -> "concurrent.futures.Future[T]":
    """Return a future that has already completed with `value`."""
    fut: "concurrent.futures.Future[T]" = concurrent.futures.Future()
    fut.set_result(value)
    return fut


def faulted(exc: BaseException) -> "concurrent.futures.Future[Any]":
    """
    Return a future that has already failed with `exc`.

    Args:
        exc: The exception instance the future holds. It is not copied, so a blocking wait
            on the returned future raises this exact object.
    """
    if isinstance(exc, type):
        raise TypeError(f"`exc` must be an exception instance, not a class. You passed {exc}.")
    fut: "concurrent.futures.Future[Any]" = concurrent.futures.Future()
    fut.set_exception(exc)
    return fut


def cancelled() -> "concurrent.futures.Future[Any]":
    """Return a future that has already been cancelled."""
    fut: "concurrent.futures.Future[Any]" = concurrent.futures.Future()
    fut.cancel()
    fut.set_running_or_notify_cancel()
    return fut


__all__ = ["completed", "faulted", "cancelled"]

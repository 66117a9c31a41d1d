"""
This module defines custom exceptions for the sync_bridge library.
"""

import concurrent.futures

from sync_bridge._typing import *


class CancellationError(concurrent.futures.CancelledError):
    """
    Raised when the awaited computation was cancelled before producing a value.

    This is a subclass of :class:`concurrent.futures.CancelledError`, so existing
    ``except CancelledError`` blocks around blocking waits keep working.

    Note:
        This is not an :class:`asyncio.CancelledError`. Raising that from synchronous
        code running inside a task is indistinguishable from cancelling the task.
    """

    def __init__(self, handle: Any = None):
        """
        Initializes the CancellationError exception.

        Args:
            handle: Optional; the handle that was found cancelled.
        """
        super().__init__(f"{handle} was cancelled" if handle is not None else "")
        self.handle = handle


class AggregateError(Exception):
    """
    Raised by a fan-in when one or more of its members faulted.

    The member errors are kept in the order the members were supplied to the
    fan-in, which is not necessarily the order in which they were raised.

    Examples:
        >>> err = AggregateError([ValueError(1), KeyError(2)])
        >>> err.exceptions[0]
        ValueError(1)

    See Also:
        :func:`sync_bridge.asyncio.when_all`
    """

    exceptions: Tuple[BaseException, ...]

    def __init__(self, exceptions: Iterable[BaseException]):
        """
        Initializes the AggregateError exception.

        Args:
            exceptions: The member errors, in member order. Must not be empty.

        Raises:
            EmptySequenceError: If no errors are provided.
        """
        exceptions = tuple(exceptions)
        if not exceptions:
            raise EmptySequenceError("AggregateError requires at least one exception")
        super().__init__(
            f"{len(exceptions)} exception(s) occurred: "
            + ", ".join(f"{type(e).__name__}({e})" for e in exceptions)
        )
        self.exceptions = exceptions


class BridgeRuntimeError(RuntimeError):
    """
    Raised when a handle cannot be driven to completion from the calling thread.
    """

    def __init__(self, e: Union[RuntimeError, str]):
        """
        Initializes the BridgeRuntimeError exception.

        Args:
            e: The original runtime error, or a message.
        """
        super().__init__(str(e))


class SyncModeInAsyncContextError(BridgeRuntimeError):
    """
    Raised when a blocking wait is requested from a thread whose event loop is already running.

    Blocking that thread would stop the very loop that has to resume the computation,
    so the wait could never return.
    """

    def __init__(self, err: str = ""):
        """
        Initializes the SyncModeInAsyncContextError exception.
        """
        if not err:
            err = "The event loop is already running, which means you're trying to block on a pending handle from within an async context.\n"
            err += "Check your traceback to determine which, then either `await` the handle "
            err += "or pass a factory to `wait_and_unwrap` so the computation runs on a worker thread."
        super().__init__(err)


class FactoryNotCallable(TypeError):
    """
    Raised when :func:`~sync_bridge.wait_factory` is given something that is not callable.
    """

    def __init__(self, factory):
        """
        Initializes the FactoryNotCallable exception.

        Args:
            factory: The object that is not callable.
        """
        super().__init__(
            f"`factory` must be a zero-argument callable that returns an awaitable. You passed {factory}."
        )


class EmptySequenceError(ValueError):
    """
    Raised when an operation is attempted on an empty sequence but items are required.
    """

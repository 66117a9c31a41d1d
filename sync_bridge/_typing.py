"""
This module provides type definitions and type-related utilities for the `sync_bridge` library.

It includes the type aliases used throughout the library to describe the things a
blocking wait can be handed: already-constructed handles and factories that build them.

Examples:
    Example of a factory that a pool-offload wait accepts:

    ```python
    from sync_bridge._typing import Factory

    async def fetch() -> int:
        return 42

    factory: Factory[int] = fetch
    ```

See Also:
    - :mod:`typing`
    - :mod:`asyncio`
    - :mod:`concurrent.futures`
"""

import asyncio
import concurrent.futures
from typing import (
    TYPE_CHECKING,
    Any,
    Awaitable,
    Callable,
    Coroutine,
    Dict,
    Generic,
    Iterable,
    List,
    Mapping,
    NoReturn,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
    Union,
    final,
    overload,
)

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")

E = TypeVar("E", bound=BaseException)

AnyFuture = Union[asyncio.Future[T], concurrent.futures.Future[T]]
"""Type alias for either flavor of future. Both can be inspected once settled without running a loop."""

Handle = Union[AnyFuture[T], Awaitable[T]]
"""
Type alias for an asynchronous computation handle.

A handle is anything that will eventually settle into a value, one or more errors, or cancellation:
asyncio futures and tasks, :class:`concurrent.futures.Future` objects, coroutines and other awaitables.
"""

Factory = Callable[[], Handle[T]]
"""Type alias for a zero-argument callable that starts a computation and returns its handle."""

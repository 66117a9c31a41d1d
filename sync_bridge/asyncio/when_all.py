"""
This module provides :func:`when_all`, a fan-in that reports member errors in registration order.

:func:`asyncio.gather` raises whichever member error happens first in time. That makes the error
seen by a caller depend on scheduling. :func:`when_all` instead waits for every member to settle,
then combines the member outcomes in the order the members were supplied.
"""

import asyncio
import concurrent.futures

from sync_bridge._typing import *
from sync_bridge.exceptions import AggregateError
from sync_bridge.outcome import Cancelled, Faulted, Outcome, capture, combine


@overload
async def when_all(awaitables: Mapping[K, Handle[V]]) -> Dict[K, V]:
    """
    Wait for every handle in a k:v mapping to settle and return a dict of results.

    Args:
        awaitables (Mapping[K, Handle[V]]): A mapping of keys to handles.

    Examples:
        >>> mapping = {'key1': thing1(), 'key2': thing2()}
        >>> results = await when_all(mapping)
        >>> results
        {'key1': 'result', 'key2': 123}
    """


@overload
async def when_all(*awaitables: Handle[T]) -> List[T]:
    """
    Wait for every handle to settle and return a list of results.

    Args:
        *awaitables (Handle[T]): The handles to wait for.

    Examples:
        >>> results = await when_all(thing1(), thing2())
        >>> results
        ['result', 123]
    """


async def when_all(
    *awaitables: Union[Handle[T], Mapping[K, Handle[V]]],
) -> Union[List[T], Dict[K, V]]:
    """
    Wait for every member to settle, then combine their outcomes in registration order.

    Members may be coroutines, asyncio futures and tasks, or :class:`concurrent.futures.Future`
    objects. The fan-in never settles before its slowest member does, and it never cancels members.

    Once every member has settled:

    - If any member faulted, raises :class:`~sync_bridge.exceptions.AggregateError` holding every
      member error in the order the members were supplied. A member supplied first that failed
      last still comes first.
    - Otherwise, if any member was cancelled, the fan-in itself is cancelled.
    - Otherwise returns the member values, as a list in input order or as a dict keyed like the
      input mapping.

    Args:
        *awaitables: The members to wait for. It can be a list of individual handles or a
            single mapping of handles.

    Examples:
        Blocking on a fan-in surfaces the first member's error:

        >>> async def slow_fail():
        ...     await asyncio.sleep(0.1)
        ...     raise KeyError("first")
        >>> wait_and_unwrap(when_all(slow_fail(), faulted(ValueError("second"))))
        Traceback (most recent call last):
        ...
        KeyError: 'first'

    See Also:
        - :func:`asyncio.gather`
        - :func:`sync_bridge.outcome.combine`
    """
    if _is_mapping(awaitables):
        mapping: Mapping[K, Handle[V]] = awaitables[0]  # type: ignore [assignment]
        values = _raise_for_outcome(await _settle_members(mapping.values()))
        return dict(zip(mapping, values))
    return _raise_for_outcome(await _settle_members(awaitables))  # type: ignore [arg-type]


async def _settle_members(awaitables: Iterable[Handle[Any]]) -> Outcome[List[Any]]:
    loop = asyncio.get_running_loop()
    members = [_as_future(a, loop) for a in awaitables]
    if members:
        await asyncio.wait(members)
    return combine([capture(m) for m in members])


def _as_future(handle: Handle[T], loop: asyncio.AbstractEventLoop) -> "asyncio.Future[T]":
    if isinstance(handle, concurrent.futures.Future):
        return asyncio.wrap_future(handle, loop=loop)
    return asyncio.ensure_future(handle, loop=loop)


def _raise_for_outcome(outcome: Outcome[List[Any]]) -> List[Any]:
    if isinstance(outcome, Faulted):
        raise AggregateError(outcome.errors)
    if isinstance(outcome, Cancelled):
        raise asyncio.CancelledError
    return outcome.unwrap()


_is_mapping = lambda awaitables: len(awaitables) == 1 and isinstance(awaitables[0], Mapping)

__all__ = ["when_all"]

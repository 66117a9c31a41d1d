"""
This module models the settled result of an asynchronous computation.

A handle settles exactly once into one of three terminal states, each represented here by an
:class:`Outcome` subclass:

    - :class:`Value`: completed with a value.
    - :class:`Faulted`: failed with one or more errors, kept in registration order.
    - :class:`Cancelled`: cancelled before producing a value.

Outcomes are what crosses thread boundaries in :mod:`sync_bridge.bridge`. The worker thread
captures the outcome of the computation it drove, and the blocked caller unwraps it, so member
errors of a fan-in survive intact until the single error to raise is chosen.
"""

import abc
import asyncio
import concurrent.futures

from sync_bridge._typing import *
from sync_bridge.exceptions import AggregateError, CancellationError, EmptySequenceError


class Outcome(Generic[T], metaclass=abc.ABCMeta):
    """
    The terminal state of an asynchronous computation.

    Exactly one of :class:`Value`, :class:`Faulted` or :class:`Cancelled` applies to any outcome,
    and an outcome never changes once built.
    """

    __slots__ = ()

    @abc.abstractmethod
    def unwrap(self) -> T:
        """
        Extract the value, or raise whatever this outcome stands for.

        Raises:
            CancellationError: If the computation was cancelled.
            BaseException: The first error of a faulted computation, unchanged.
        """
        raise NotImplementedError


@final
class Value(Outcome[T]):
    """A computation that completed with :attr:`value`."""

    __slots__ = ("value",)

    def __init__(self, value: T) -> None:
        self.value = value

    def unwrap(self) -> T:
        return self.value

    def __repr__(self) -> str:
        return f"Value({self.value!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Value) and self.value == other.value


@final
class Faulted(Outcome[Any]):
    """
    A computation that failed.

    :attr:`errors` is a non-empty tuple in registration order: for a fan-in, the order in which
    members were supplied, not the order in which they failed.
    """

    __slots__ = ("errors",)

    def __init__(self, errors: Iterable[BaseException]) -> None:
        errors = tuple(errors)
        if not errors:
            raise EmptySequenceError("a faulted outcome needs at least one error")
        self.errors: Tuple[BaseException, ...] = errors

    @property
    def first(self) -> BaseException:
        """The error that :meth:`unwrap` raises."""
        return self.errors[0]

    def unwrap(self) -> NoReturn:
        raise self.errors[0]

    def __repr__(self) -> str:
        return f"Faulted({list(self.errors)!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Faulted) and self.errors == other.errors


@final
class Cancelled(Outcome[Any]):
    """A computation that was cancelled before producing a value."""

    __slots__ = ()

    def unwrap(self) -> NoReturn:
        raise CancellationError

    def __repr__(self) -> str:
        return "Cancelled()"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Cancelled)


def capture(fut: AnyFuture[T]) -> Outcome[T]:
    """
    Build the :class:`Outcome` of an already-settled future.

    Works for both :class:`asyncio.Future` and :class:`concurrent.futures.Future` and never touches
    an event loop. An :class:`~sync_bridge.exceptions.AggregateError` is flattened into its ordered
    member errors.

    Args:
        fut: A future in a terminal state.

    Raises:
        asyncio.InvalidStateError: If `fut` is still pending.

    Examples:
        >>> from sync_bridge.future import completed
        >>> capture(completed(1))
        Value(1)
    """
    if not fut.done():
        raise asyncio.InvalidStateError(f"{fut} has not settled yet")
    if fut.cancelled():
        return Cancelled()
    if isinstance(fut, concurrent.futures.Future):
        exc = fut.exception(timeout=0)
    else:
        exc = fut.exception()
    if exc is None:
        return Value(fut.result())
    if isinstance(exc, AggregateError):
        return Faulted(exc.exceptions)
    return Faulted((exc,))


def combine(outcomes: Sequence[Outcome[Any]]) -> Outcome[List[Any]]:
    """
    Combine the ordered outcomes of a fan-in's members into the fan-in's own outcome.

    - If any member faulted, the result is :class:`Faulted` with every member error, in member order.
    - Otherwise, if any member was cancelled, the result is :class:`Cancelled`.
    - Otherwise the result is a :class:`Value` holding the member values, in member order.

    Args:
        outcomes: The member outcomes, in the order the members were supplied.

    Examples:
        >>> combine([Value(1), Value(2)])
        Value([1, 2])
        >>> first, second = ValueError(), KeyError()
        >>> combine([Faulted([first]), Cancelled(), Faulted([second])]).errors == (first, second)
        True
    """
    errors = [e for o in outcomes if isinstance(o, Faulted) for e in o.errors]
    if errors:
        return Faulted(errors)
    if any(isinstance(o, Cancelled) for o in outcomes):
        return Cancelled()
    return Value([o.value for o in outcomes])  # type: ignore [attr-defined]


__all__ = ["Outcome", "Value", "Faulted", "Cancelled", "capture", "combine"]

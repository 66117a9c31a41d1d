import asyncio
import threading

import pytest

increment = pytest.mark.parametrize("i", range(10))

values = pytest.mark.parametrize(
    "value",
    [0, 1, -1, 2**31 - 1, -(2**31), 3.5, "", "text", None, (1, 2), [1, [2]], {"k": "v"}],
)


class FirstException(Exception): ...


class SecondException(Exception): ...


class BridgeTestException(Exception):
    """A single shared instance, so tests can check identity and not just type."""


BRIDGE_TEST_EXCEPTION = BridgeTestException("the one and only")


async def sample_task(n):
    await asyncio.sleep(0.01)
    return n


async def sample_exc(n):
    raise ValueError("Sample error")


async def raise_after_delay(exc: BaseException, delay: float = 0.1):
    await asyncio.sleep(delay)
    raise exc


def returns(value):
    """Build a factory whose computation suspends once before returning `value`."""

    async def factory():
        await asyncio.sleep(0.001)
        return value

    return factory


def within(seconds: float, fn, *args):
    """
    Call `fn(*args)` on a daemon thread and return its result or raise its exception.

    Fails the test if the call is still blocked after `seconds`, so a wait that never wakes up
    shows up as a failure rather than a hung run.
    """
    results = []

    def target():
        try:
            results.append((True, fn(*args)))
        except BaseException as e:
            results.append((False, e))

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    thread.join(seconds)
    if thread.is_alive():
        pytest.fail(f"{fn.__name__} still blocked after {seconds}s")
    ok, result = results[0]
    if ok:
        return result
    raise result

import asyncio
import concurrent.futures
import threading
import time
from threading import current_thread, main_thread

import pytest

from sync_bridge import (
    CancellationError,
    WorkerPool,
    cancelled,
    completed,
    faulted,
    wait_and_unwrap,
    wait_factory,
    wait_handle,
    when_all,
)
from sync_bridge.exceptions import BridgeRuntimeError, FactoryNotCallable, SyncModeInAsyncContextError
from tests.fixtures import (
    BRIDGE_TEST_EXCEPTION,
    BridgeTestException,
    FirstException,
    SecondException,
    increment,
    raise_after_delay,
    returns,
    sample_exc,
    sample_task,
    values,
    within,
)


class WrongThreadError(Exception): ...


def _settle_now(fut: concurrent.futures.Future, how: str, payload=None) -> None:
    if how == "result":
        fut.set_result(payload)
    elif how == "exception":
        fut.set_exception(payload)
    else:
        fut.cancel()


def _settle_later(fut: concurrent.futures.Future, delay: float, how: str, payload=None) -> None:
    threading.Timer(delay, _settle_now, (fut, how, payload)).start()


# value round trip


@values
def test_settled_value_is_returned(value):
    assert wait_and_unwrap(completed(value)) == value


@increment
def test_coroutine_value_is_returned(i):
    assert wait_and_unwrap(sample_task(i)) == i


@increment
def test_factory_value_is_returned(i):
    assert wait_and_unwrap(returns(i)) == i


def test_settled_asyncio_future_needs_no_loop():
    loop = asyncio.new_event_loop()
    try:
        fut = loop.create_future()
        fut.set_result("done")
        loop.close()
        # the loop is closed, but the future already holds its value
        assert wait_handle(fut) == "done"
    finally:
        loop.close()


def test_pending_asyncio_future_on_idle_loop():
    loop = asyncio.new_event_loop()
    try:
        fut = loop.create_future()
        loop.call_later(0.01, fut.set_result, 5)
        assert wait_handle(fut) == 5
    finally:
        loop.close()


# exception fidelity


def test_faulted_handle_raises_the_exact_exception():
    with pytest.raises(BridgeTestException) as e:
        wait_and_unwrap(faulted(BRIDGE_TEST_EXCEPTION))
    assert type(e.value) is BridgeTestException
    assert e.value is BRIDGE_TEST_EXCEPTION


def test_faulted_coroutine_raises_unwrapped_exception():
    with pytest.raises(ValueError, match="Sample error"):
        wait_and_unwrap(sample_exc(None))


def test_faulted_factory_raises_unwrapped_exception():
    async def factory():
        await asyncio.sleep(0)
        raise BRIDGE_TEST_EXCEPTION

    with pytest.raises(BridgeTestException) as e:
        wait_and_unwrap(factory)
    assert e.value is BRIDGE_TEST_EXCEPTION


def test_factory_call_that_raises_is_reraised():
    def factory():
        raise BRIDGE_TEST_EXCEPTION

    with pytest.raises(BridgeTestException) as e:
        wait_factory(factory)
    assert e.value is BRIDGE_TEST_EXCEPTION


# first error by registration order


def test_multiple_exceptions_all_instant_raises_first():
    handle = when_all(faulted(FirstException()), faulted(SecondException()))
    with pytest.raises(FirstException):
        wait_and_unwrap(handle)


def test_multiple_exceptions_first_delayed_raises_first():
    handle = when_all(raise_after_delay(FirstException(), 0.1), faulted(SecondException()))
    start = time.monotonic()
    with pytest.raises(FirstException):
        wait_and_unwrap(handle)
    # the wait only ends once the delayed member has settled too
    assert time.monotonic() - start >= 0.09


def test_multiple_exceptions_first_delayed_through_factory():
    async def factory():
        return await when_all(raise_after_delay(FirstException(), 0.1), sample_exc(None))

    with pytest.raises(FirstException):
        wait_and_unwrap(factory)


def test_fault_beats_cancellation_in_fan_in():
    handle = when_all(cancelled(), faulted(SecondException()))
    with pytest.raises(SecondException):
        wait_and_unwrap(handle)


# cancellation


def test_cancelled_handle_raises_cancellation_error():
    with pytest.raises(CancellationError) as e:
        within(5, wait_and_unwrap, cancelled())
    assert type(e.value) is CancellationError


def test_plainly_cancelled_future_raises_cancellation_error():
    fut = concurrent.futures.Future()
    fut.cancel()
    with pytest.raises(CancellationError):
        within(5, wait_handle, fut)


def test_future_cancelled_while_waiting_raises_cancellation_error():
    fut = concurrent.futures.Future()
    threading.Timer(0.05, fut.cancel).start()
    with pytest.raises(CancellationError):
        within(5, wait_handle, fut)


def test_cancelled_asyncio_future_raises_cancellation_error():
    loop = asyncio.new_event_loop()
    try:
        fut = loop.create_future()
        fut.cancel()
        with pytest.raises(CancellationError):
            within(5, wait_handle, fut)
    finally:
        loop.close()


def test_cancelled_fan_in_member_raises_cancellation_error():
    with pytest.raises(CancellationError):
        within(5, wait_and_unwrap, when_all(sample_task(1), cancelled()))


def test_factory_raising_cancellation_raises_cancellation_error():
    def factory():
        raise asyncio.CancelledError

    with pytest.raises(CancellationError):
        within(5, wait_factory, factory)


def test_cancelled_inside_factory_raises_cancellation_error():
    async def factory():
        task = asyncio.ensure_future(asyncio.sleep(10))
        task.cancel()
        return await task

    with pytest.raises(CancellationError):
        wait_and_unwrap(factory)


# single-threaded contexts


@increment
def test_factory_does_not_block_running_event_loop(i):
    async def caller():
        # this thread's loop is running and blocked for the whole call
        return wait_and_unwrap(returns(i))

    assert within(10, asyncio.run, caller()) == i


@pytest.mark.asyncio_cooperative
async def test_factory_from_cooperative_test():
    assert wait_and_unwrap(returns(7)) == 7


def test_factory_does_not_block_single_worker_context():
    single = concurrent.futures.ThreadPoolExecutor(1)
    try:

        def caller():
            return wait_and_unwrap(returns("single"))

        assert single.submit(caller).result(timeout=10) == "single"
    finally:
        single.shutdown()


def test_factory_runs_off_the_calling_thread():
    calls = []

    async def computation():
        calls.append(current_thread())
        await asyncio.sleep(0.001)
        return len(calls)

    def factory():
        if current_thread() is main_thread():
            raise WrongThreadError("The factory should be invoked on a worker thread.")
        return computation()

    assert wait_factory(factory) == 1
    assert calls[0] is not main_thread()


def test_blocking_computation_in_factory():
    async def factory():
        time.sleep(0.01)
        await asyncio.sleep(0.001)
        return "blocked"

    assert wait_factory(factory) == "blocked"


def test_handle_on_running_loop_in_this_thread_raises():
    async def caller():
        fut = asyncio.get_running_loop().create_future()
        with pytest.raises(SyncModeInAsyncContextError):
            wait_handle(fut)
        fut.cancel()

    asyncio.run(caller())


def test_coroutine_in_running_loop_raises_and_is_closed():
    async def caller():
        coro = sample_task(1)
        with pytest.raises(SyncModeInAsyncContextError):
            wait_handle(coro)
        assert coro.cr_frame is None

    asyncio.run(caller())


def test_settled_handle_in_running_loop_is_returned():
    async def caller():
        fut = asyncio.get_running_loop().create_future()
        fut.set_result(3)
        return wait_handle(fut)

    assert asyncio.run(caller()) == 3


def test_handle_on_loop_running_in_other_thread():
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    try:
        fut = asyncio.run_coroutine_threadsafe(_make_pending(loop), loop).result(timeout=5)
        loop.call_soon_threadsafe(loop.call_later, 0.05, fut.set_result, "other thread")
        assert within(5, wait_handle, fut) == "other thread"
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join(timeout=5)
        loop.close()


def test_handle_on_loop_that_stops_in_other_thread_raises():
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    started, release = threading.Event(), threading.Event()

    def stall_then_stop():
        started.set()
        release.wait(5)
        loop.stop()

    try:
        fut = asyncio.run_coroutine_threadsafe(_make_pending(loop), loop).result(timeout=5)
        # the loop is busy in this callback, then stops without running anything queued after it
        loop.call_soon_threadsafe(stall_then_stop)
        assert started.wait(5)
        threading.Timer(0.2, release.set).start()
        with pytest.raises(BridgeRuntimeError):
            within(5, wait_handle, fut)
        assert not fut.done()
    finally:
        release.set()
        thread.join(timeout=5)
        loop.close()


async def _make_pending(loop):
    return loop.create_future()


# observation of settled vs settling handles


@pytest.mark.parametrize(
    "how, payload, expected",
    [
        ("result", 42, None),
        ("exception", BRIDGE_TEST_EXCEPTION, BridgeTestException),
        ("cancel", None, CancellationError),
    ],
)
def test_already_settled_and_settling_behave_identically(how, payload, expected):
    def observe(fut):
        try:
            return ("value", wait_handle(fut))
        except BaseException as e:
            return ("error", type(e), e if how == "exception" else None)

    settled = concurrent.futures.Future()
    _settle_now(settled, how, payload)

    settling = concurrent.futures.Future()
    _settle_later(settling, 0.05, how, payload)

    first, second = within(5, observe, settled), within(5, observe, settling)
    assert first == second
    if expected is None:
        assert first == ("value", payload)
    else:
        assert first[1] is expected


# argument handling


def test_executor_with_handle_is_rejected():
    with pytest.raises(TypeError):
        wait_and_unwrap(completed(1), WorkerPool(1))


def test_not_a_handle_is_rejected():
    with pytest.raises(TypeError):
        wait_and_unwrap(42)


def test_not_a_factory_is_rejected():
    with pytest.raises(FactoryNotCallable):
        wait_factory(completed(1))


def test_custom_executor():
    pool = WorkerPool(1, thread_name_prefix="custom")
    try:

        async def factory():
            return current_thread().name

        assert wait_factory(factory, pool).startswith("custom")
    finally:
        pool.shutdown()


def test_plain_thread_pool_executor():
    pool = concurrent.futures.ThreadPoolExecutor(1)
    try:
        assert wait_and_unwrap(returns("plain"), pool) == "plain"
    finally:
        pool.shutdown()


def test_factory_returning_settled_future():
    assert wait_factory(lambda: completed("ready")) == "ready"

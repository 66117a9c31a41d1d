"""
Configuration for the sync_bridge library.

The only thing configured here is the worker pool that :func:`~sync_bridge.wait_factory` offloads
to when no executor is passed. It is built lazily from :mod:`sync_bridge.ENVIRONMENT_VARIABLES`.
Debug logging for pools is switched on by the pools themselves, see
:mod:`sync_bridge.primitives._loggable`.
"""

import functools

from sync_bridge import ENVIRONMENT_VARIABLES as ENVS
from sync_bridge.executor import WorkerPool


@functools.lru_cache(maxsize=1)
def get_default_executor() -> WorkerPool:
    if ENVS.WORKER_POOL_SIZE < 1:
        raise ValueError(
            f"Invalid value for SYNC_BRIDGE_WORKER_POOL_SIZE: {ENVS.WORKER_POOL_SIZE}. It must be at least 1."
        )
    return WorkerPool(int(ENVS.WORKER_POOL_SIZE), str(ENVS.WORKER_THREAD_PREFIX))

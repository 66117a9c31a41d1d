from typed_envs import EnvVarFactory

envs = EnvVarFactory("SYNC_BRIDGE")

# The default worker pool is only built when a factory is first offloaded, so these can
# be set any time before that.

WORKER_POOL_SIZE = envs.create_env("WORKER_POOL_SIZE", int, default=8, verbose=False)
"""int: The maximum number of threads in the default worker pool.

Each in-flight call to :func:`~sync_bridge.wait_factory` holds one worker until its computation
settles, so this bounds how many offloaded computations can make progress at once.

Examples:
    .. code-block:: bash

        export SYNC_BRIDGE_WORKER_POOL_SIZE=32
"""

WORKER_THREAD_PREFIX = envs.create_env(
    "WORKER_THREAD_PREFIX", str, default="sync_bridge", verbose=False
)
"""str: The thread name prefix used by the default worker pool."""

DEBUG_MODE = envs.create_env("DEBUG_MODE", bool, default=False, verbose=False)
"""bool: Enables debug logging for the worker pools.

Examples:
    .. code-block:: bash

        export SYNC_BRIDGE_DEBUG_MODE=True

See Also:
    :data:`DEBUG_INTERVAL` for how often a still-running computation is reported.
"""

DEBUG_INTERVAL = envs.create_env("DEBUG_INTERVAL", float, default=15, verbose=False)
"""float: Seconds between debug log lines for an offloaded computation that has not settled yet."""

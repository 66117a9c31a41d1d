"""
This package provides asyncio helpers used by the blocking bridge.

Modules:
- :func:`when_all`: A fan-in like :func:`asyncio.gather` that waits for every member and reports member errors in registration order.

See Also:
    - `asyncio <https://docs.python.org/3/library/asyncio.html>`_: The standard asyncio library documentation for more details on the original functions.
"""

from sync_bridge.asyncio.when_all import when_all

__all__ = ["when_all"]

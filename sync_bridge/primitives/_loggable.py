"""
This module provides the logger mixin used by :class:`~sync_bridge.executor.WorkerPool`.

Pool loggers are named ``<ClassName>.<thread name prefix>`` and hang off the class logger, so
``logging.getLogger("WorkerPool").setLevel(logging.DEBUG)`` turns on job logging for every pool.
Setting :data:`~sync_bridge.ENVIRONMENT_VARIABLES.DEBUG_MODE` does the same for every pool class
and also attaches a stream handler, the first time a pool of that class logs.
"""

import logging
from functools import cached_property

from sync_bridge import ENVIRONMENT_VARIABLES as ENVS

_debug_handler = logging.StreamHandler()


class _LoggerMixin:
    """
    Adds a per-pool logger and a check for whether job logging is on.
    """

    _name: str = ""

    @cached_property
    def logger(self) -> logging.Logger:
        """
        The logger for this pool, a child of the logger for its class.

        In debug mode, the class logger is switched to DEBUG the first time any of its pools asks for a logger.
        """
        class_logger = logging.getLogger(type(self).__qualname__)
        if ENVS.DEBUG_MODE:
            _activate_debug_mode(class_logger)
        return class_logger.getChild(self._name) if self._name else class_logger

    @property
    def debug_logs_enabled(self) -> bool:
        """True if jobs should log their progress."""
        return self.logger.isEnabledFor(logging.DEBUG)


def _activate_debug_mode(logger: logging.Logger) -> None:
    if _debug_handler in logger.handlers:
        return
    logger.addHandler(_debug_handler)
    logger.setLevel(logging.DEBUG)
    logger.info("debug mode activated")

"""
Mixins shared by the sync_bridge classes.

- :class:`~sync_bridge.primitives._loggable._LoggerMixin`: per-pool loggers and the debug mode switch.
"""

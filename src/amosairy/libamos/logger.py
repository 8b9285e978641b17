"""
Logging for the amosairy dispatchers.

Every module logs through ``get_logger(__name__)`` so one ``setup`` or
``set_level`` call on the ``amosairy`` root controls the whole package.
Below DEBUG sits one extra level, DEBUG2, for per-call kernel detail
(orders requested, underflow counts); the numba kernels themselves never
log.

Usage
-----
>>> from amosairy.libamos.logger import get_logger
>>> log = get_logger(__name__)
>>> log.debug2("zbknu z=%r nz=%d", 3 + 1j, 0)
"""

import logging
import sys

ROOT = "amosairy"

# kernel-detail level, just below DEBUG=10
DEBUG2 = 9

logging.addLevelName(DEBUG2, "DEBUG2")


class _AmosLogger(logging.Logger):
    """Logger with a ``debug2`` method for kernel-detail records."""

    def debug2(self, msg, *args, **kwargs):
        if self.isEnabledFor(DEBUG2):
            self._log(DEBUG2, msg, args, **kwargs)


def get_logger(name: str | None = None) -> _AmosLogger:
    """Return a logger under the ``amosairy`` hierarchy.

    The logger class is swapped only for the duration of the lookup, so a
    host application's own ``setLoggerClass`` choice is left alone.
    """
    name = name or ROOT
    previous = logging.getLoggerClass()
    logging.setLoggerClass(_AmosLogger)
    try:
        return logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous)


def set_level(level: int | str = logging.INFO) -> None:
    """Set the level of the ``amosairy`` root, e.g. ``set_level("DEBUG2")``."""
    get_logger().setLevel(level)


def setup(level: int | str = logging.INFO, stream=None) -> None:
    """Attach a handler with the amosairy format to the package root.

    Safe to call multiple times; only the first call has an effect.
    """
    root = get_logger()
    if root.handlers:
        return
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(levelname)-7s %(name)s: %(message)s"))
    root.addHandler(handler)
    set_level(level)

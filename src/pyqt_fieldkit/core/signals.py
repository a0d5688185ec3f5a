"""Signal blocking helpers."""

from contextlib import contextmanager
import logging

from PyQt6.QtCore import QObject

logger = logging.getLogger(__name__)


@contextmanager
def block_signals(*objects: QObject):
    """
    Context manager for blocking Qt signals on one or more objects.

    Restores each object's previous blocking state on exit, so nested use
    does not unblock an outer scope early.

    Example:
        with block_signals(line_edit):
            line_edit.setText(formatted)
    """
    previous = []
    for obj in objects:
        if obj is not None:
            previous.append((obj, obj.blockSignals(True)))
            logger.debug(f"Blocked signals on {type(obj).__name__}")

    try:
        yield
    finally:
        for obj, was_blocked in reversed(previous):
            obj.blockSignals(was_blocked)
            logger.debug(f"Restored signals on {type(obj).__name__}")

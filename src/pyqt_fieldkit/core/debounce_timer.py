"""Trailing debounce timer and debounced validation trigger."""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, QTimer

from pyqt_fieldkit.config import get_fieldkit_config
from pyqt_fieldkit.exceptions import SchedulerDisposedError

logger = logging.getLogger(__name__)


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.

    Usage:
        self._debounce = DebounceTimer(delay_ms=200, handler=self._do_update)

        def on_text_changed(self):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(self, delay_ms: int, handler: Callable[[], None]):
        self._delay_ms = delay_ms
        self._handler = handler
        self._timer: Optional[QTimer] = None

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_pending(self) -> bool:
        """True while a handler call is scheduled."""
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Trigger debounce (restarts the timer)."""
        if self._timer is not None:
            self._timer.stop()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._handler)
        self._timer.start(self._delay_ms)

    def cancel(self):
        """Cancel pending trigger."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._handler()


class DebouncedTrigger:
    """
    Coalesces validation requests into one delayed trigger call.

    Each instance owns exactly one timer. Calling it again before the delay
    elapses discards the earlier request entirely, so only the last field name
    requested in a quiet period is validated. The trigger runs at fire time,
    which means the form-state manager validates the value current at that
    moment rather than the value seen when the request was made.

    Pass a QObject as ``parent`` to dispose the scheduler together with it.

    Usage:
        debounced = DebouncedTrigger(form.trigger, delay_ms=300, parent=line_edit)
        line_edit.textEdited.connect(lambda _: debounced("username"))
    """

    def __init__(self, trigger: Callable[[str], Any], delay_ms: Optional[int] = None,
                 parent: Optional[QObject] = None):
        if delay_ms is None:
            delay_ms = get_fieldkit_config().default_debounce_ms
        self._trigger = trigger
        self._pending_name: Optional[str] = None
        self._disposed = False
        self._timer = DebounceTimer(delay_ms=delay_ms, handler=self._fire)

        if parent is not None:
            parent.destroyed.connect(lambda *_: self.dispose())

    @property
    def delay_ms(self) -> int:
        return self._timer.delay_ms

    @property
    def is_pending(self) -> bool:
        return self._timer.is_pending

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def __call__(self, name: str) -> None:
        if self._disposed:
            raise SchedulerDisposedError(f"Cannot schedule validation for '{name}': scheduler was disposed")
        if self._pending_name is not None and self.is_pending:
            logger.debug(f"Debounce: replacing pending trigger for '{self._pending_name}' with '{name}'")
        self._pending_name = name
        self._timer.trigger()

    def _fire(self) -> None:
        name, self._pending_name = self._pending_name, None
        if name is None or self._disposed:
            return
        logger.debug(f"Debounce: firing trigger for '{name}'")
        self._trigger(name)

    def cancel(self) -> None:
        """Drop the pending request, if any."""
        if self.is_pending:
            logger.debug(f"Debounce: cancelled pending trigger for '{self._pending_name}'")
        self._timer.cancel()
        self._pending_name = None

    def flush(self) -> None:
        """Run the pending request now instead of waiting for the delay."""
        if self.is_pending:
            self._timer.force()

    def dispose(self) -> None:
        """Cancel the pending request and refuse further scheduling."""
        self.cancel()
        self._disposed = True


def create_debounced_trigger(trigger: Callable[[str], Any], delay_ms: Optional[int] = None) -> DebouncedTrigger:
    """Build a trailing-debounced ``name -> None`` wrapper around a trigger function."""
    return DebouncedTrigger(trigger, delay_ms=delay_ms)

"""
Qt widget glue for field handlers.

Normalizes Qt's inconsistent change signals (textEdited vs toggled vs
currentIndexChanged) into handler calls with a ChangeEvent, and mirrors stored
values back into widgets with signals blocked so a formatted value (a grouped
phone number, a lower-cased email) is what the user sees.
"""

import logging
from typing import Any, Callable, Optional

from PyQt6.QtCore import QEvent, QObject
from PyQt6.QtWidgets import (
    QCheckBox, QComboBox, QDoubleSpinBox, QLabel, QLineEdit, QPlainTextEdit, QRadioButton,
    QSpinBox, QTextEdit, QWidget,
)

from pyqt_fieldkit.core.signals import block_signals
from pyqt_fieldkit.forms.events import ChangeEvent
from pyqt_fieldkit.forms.handlers import FieldHandler, FocusHandlers

logger = logging.getLogger(__name__)

# Dynamic property holding a radio button's option value (falls back to its text)
RADIO_VALUE_PROPERTY = "fieldValue"


def _radio_value(widget: QRadioButton) -> str:
    value = widget.property(RADIO_VALUE_PROPERTY)
    return widget.text() if value is None else str(value)


def _combo_value(widget: QComboBox) -> Any:
    data = widget.currentData()
    return widget.currentText() if data is None else data


def event_from_widget(widget: QWidget) -> ChangeEvent:
    """Snapshot a widget's current state as a ChangeEvent."""
    if isinstance(widget, QLineEdit):
        return ChangeEvent(value=widget.text(), source=widget)
    if isinstance(widget, (QTextEdit, QPlainTextEdit)):
        return ChangeEvent(value=widget.toPlainText(), source=widget)
    if isinstance(widget, QCheckBox):
        return ChangeEvent(value=widget.text(), checked=widget.isChecked(), source=widget)
    if isinstance(widget, QRadioButton):
        return ChangeEvent(value=_radio_value(widget), checked=widget.isChecked(), source=widget)
    if isinstance(widget, QComboBox):
        return ChangeEvent(value=str(_combo_value(widget)), source=widget)
    if isinstance(widget, (QSpinBox, QDoubleSpinBox)):
        return ChangeEvent(value=str(widget.value()), source=widget)
    raise TypeError(f"Cannot build a change event from {type(widget).__name__}")


def connect_handler(widget: QWidget, handler: FieldHandler) -> Callable[..., None]:
    """
    Connect a widget's user-edit signal to a field handler.

    QComboBox calls the handler with the selected value (select handlers);
    every other widget calls it with a ChangeEvent. Radio buttons only fire
    when they become checked.

    Returns:
        The connected slot, for disconnecting later
    """
    if isinstance(widget, QLineEdit):
        slot = lambda *_: handler(event_from_widget(widget))
        widget.textEdited.connect(slot)
    elif isinstance(widget, (QTextEdit, QPlainTextEdit)):
        slot = lambda *_: handler(event_from_widget(widget))
        widget.textChanged.connect(slot)
    elif isinstance(widget, QRadioButton):
        def slot(checked: bool) -> None:
            if checked:
                handler(event_from_widget(widget))
        widget.toggled.connect(slot)
    elif isinstance(widget, QCheckBox):
        slot = lambda *_: handler(event_from_widget(widget))
        widget.toggled.connect(slot)
    elif isinstance(widget, QComboBox):
        slot = lambda *_: handler(_combo_value(widget))
        widget.currentIndexChanged.connect(slot)
    elif isinstance(widget, (QSpinBox, QDoubleSpinBox)):
        slot = lambda *_: handler(event_from_widget(widget))
        widget.valueChanged.connect(slot)
    else:
        raise TypeError(f"No change signal known for {type(widget).__name__}")

    logger.debug(f"Connected handler to {type(widget).__name__}")
    return slot


class FocusEventFilter(QObject):
    """Event filter mapping FocusIn/FocusOut to a field's focus handlers."""

    def __init__(self, focus_handlers: FocusHandlers, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._focus_handlers = focus_handlers

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:
        if event.type() == QEvent.Type.FocusIn:
            self._focus_handlers.on_focus()
        elif event.type() == QEvent.Type.FocusOut:
            self._focus_handlers.on_blur()
        return False


def connect_focus_handlers(widget: QWidget, focus_handlers: FocusHandlers) -> FocusEventFilter:
    """Install a focus event filter on widget. The filter is parented to the widget."""
    event_filter = FocusEventFilter(focus_handlers, parent=widget)
    widget.installEventFilter(event_filter)
    return event_filter


def _display_text(value: Any, formatter: Optional[Callable[[Any], str]]) -> str:
    if formatter is not None:
        return formatter(value)
    return "" if value is None else str(value)


def set_widget_value(widget: QWidget, value: Any, formatter: Optional[Callable[[Any], str]] = None) -> None:
    """Show a stored value in a widget without emitting its change signals."""
    with block_signals(widget):
        if isinstance(widget, QLineEdit):
            text = _display_text(value, formatter)
            if widget.text() != text:
                widget.setText(text)
        elif isinstance(widget, (QTextEdit, QPlainTextEdit)):
            text = _display_text(value, formatter)
            if widget.toPlainText() != text:
                widget.setPlainText(text)
        elif isinstance(widget, QRadioButton):
            widget.setChecked(value is not None and str(value) == _radio_value(widget))
        elif isinstance(widget, QCheckBox):
            widget.setChecked(bool(value))
        elif isinstance(widget, QComboBox):
            index = widget.findData(value)
            if index < 0:
                index = widget.findText(_display_text(value, formatter))
            widget.setCurrentIndex(index)
        elif isinstance(widget, QSpinBox):
            if value not in (None, ""):
                widget.setValue(int(value))
        elif isinstance(widget, QDoubleSpinBox):
            if value not in (None, ""):
                widget.setValue(float(value))
        elif isinstance(widget, QLabel):
            widget.setText(_display_text(value, formatter))
        else:
            raise TypeError(f"Cannot display a value in {type(widget).__name__}")


def _editor_text(widget: QWidget) -> Optional[str]:
    if isinstance(widget, QLineEdit):
        return widget.text()
    if isinstance(widget, (QTextEdit, QPlainTextEdit)):
        return widget.toPlainText()
    return None


def reflect_value(manager: Any, name: str, widget: QWidget,
                  formatter: Optional[Callable[[Any], str]] = None,
                  keep_text: Optional[Callable[[str, Any], bool]] = None) -> Callable[[], None]:
    """
    Keep widget showing the stored value of ``name``.

    ``manager`` must provide ``watch(name, callback)`` (FormState does). The
    current value is applied immediately, and reflection stops on its own
    when the widget is destroyed.

    Args:
        formatter: Optional display formatter, ``str`` by default
        keep_text: Optional ``keep_text(text, value)``; when it returns True
            for a text editor's current text, that text is left as typed

    Returns:
        Function that stops reflecting (safe to call more than once)
    """
    def show(value: Any) -> None:
        text = _editor_text(widget)
        if keep_text is not None and text is not None and keep_text(text, value):
            return
        set_widget_value(widget, value, formatter)

    show(manager.get_value(name))
    unwatch = manager.watch(name, show)
    active = True

    def stop() -> None:
        nonlocal active
        if active:
            active = False
            unwatch()

    widget.destroyed.connect(lambda *_: stop())
    return stop

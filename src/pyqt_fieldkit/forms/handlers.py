"""
Field change handler factories.

A factory takes the form-state manager's write and trigger functions plus an
optional callback, and returns a binder ``(name) -> handler``. Every handler
invocation runs the same pipeline:

1. Extract the raw value from the event
2. Normalize it for the field category (reject-and-hold for bad numbers)
3. Write it with ``set_value(name, value, mark_dirty=True)``
4. Request validation with ``trigger(name)`` (result ignored)
5. Call ``on_change(name, value, event)``

Handlers never raise on malformed input. Exceptions raised by ``on_change``
propagate to the caller.

Usage:
    text = create_text_handler(form.set_value, form.trigger)
    line_edit.textEdited.connect(lambda _: text("username")(event_from_widget(line_edit)))

    # Direct form, one call
    on_phone = handle_phone_change(form.set_value, form.trigger, "phone")
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from pyqt_fieldkit.config import get_fieldkit_config
from pyqt_fieldkit.core.formatters import format_phone_number
from pyqt_fieldkit.core.numbers import is_nan, is_numeric_input, parse_float_prefix, to_number
from pyqt_fieldkit.forms.events import ChangeEvent
from pyqt_fieldkit.forms.field_kinds import FieldKind, HandlerCategory, check_handler_compatible

logger = logging.getLogger(__name__)

SetValue = Callable[..., None]
Trigger = Callable[[str], Any]
ChangeCallback = Callable[[str, Any, Any], None]
SelectCallback = Callable[[str, Any], None]
KindLookup = Callable[[str], Optional[FieldKind]]
FieldHandler = Callable[[Any], None]
HandlerBinder = Callable[[str], FieldHandler]

_NON_DIGIT = re.compile(r"[^0-9]")
_NON_CURRENCY = re.compile(r"[^0-9.]")

# Returned by extractors to skip the write entirely
_REJECTED = object()


# ==================== Event extraction ====================

def _event_text(event: Any) -> str:
    if isinstance(event, ChangeEvent):
        return event.value
    return "" if event is None else str(event)


def _event_checked(event: Any) -> bool:
    if isinstance(event, ChangeEvent):
        return event.checked
    return bool(event)


def _event_files(event: Any) -> Optional[List[str]]:
    if isinstance(event, ChangeEvent):
        return event.files
    return None if event is None else list(event)


def _extract_number(event: Any) -> Any:
    text = _event_text(event)
    if not is_numeric_input(text):
        return _REJECTED
    return "" if text == "" else to_number(text)


def _extract_phone(event: Any) -> str:
    return format_phone_number(_NON_DIGIT.sub("", _event_text(event)))


def _extract_email(event: Any) -> str:
    return _event_text(event).lower().strip()


def _extract_currency(event: Any) -> Any:
    cleaned = _NON_CURRENCY.sub("", _event_text(event))
    if cleaned == "":
        return ""
    amount = parse_float_prefix(cleaned)
    if is_nan(amount):
        return _REJECTED
    return int(amount) if amount.is_integer() else amount


def _extract_select(value: Any) -> Any:
    return value


_NUMERIC_TEXT_EXTRACTORS = {
    HandlerCategory.NUMBER: _extract_number,
    HandlerCategory.CURRENCY: _extract_currency,
}


def text_matches_value(category: HandlerCategory, text: str, value: Any) -> bool:
    """
    True when typing ``text`` into a number or currency input stores ``value``.

    Partial input such as ``"0."`` or ``"1.0"`` already stands for the stored
    number, so it must not be rewritten while the user is still typing.
    Always False for other categories.
    """
    extract = _NUMERIC_TEXT_EXTRACTORS.get(category)
    if extract is None:
        return False
    extracted = extract(text)
    return extracted is not _REJECTED and extracted == value


# ==================== Factory core ====================

def _make_binder(category: HandlerCategory, extract: Callable[[Any], Any],
                 set_value: SetValue, trigger: Optional[Trigger],
                 on_change: Optional[Callable], kind_of: Optional[KindLookup],
                 pass_event: bool = True) -> HandlerBinder:
    """Build the ``(name) -> handler`` binder shared by every factory."""

    def bind(name: str) -> FieldHandler:
        if kind_of is not None:
            check_handler_compatible(category, name, kind_of(name))

        dispatching = False

        def handler(event: Any) -> None:
            nonlocal dispatching
            debug = get_fieldkit_config().debug_handlers

            # Reentrancy guard: a callback re-firing this handler is ignored
            if dispatching:
                logger.debug(f"{category.value} handler for '{name}' re-entered from its callback, ignoring")
                return

            value = extract(event)
            if value is _REJECTED:
                logger.debug(f"{category.value} handler for '{name}' rejected input {_event_text(event)!r}")
                return

            if debug:
                logger.debug(f"{category.value} handler: {name} = {value!r}")

            set_value(name, value, mark_dirty=True)

            if trigger is not None:
                trigger(name)

            if on_change is not None:
                dispatching = True
                try:
                    if pass_event:
                        on_change(name, value, event)
                    else:
                        on_change(name, value)
                finally:
                    dispatching = False

        return handler

    return bind


# ==================== Handler factories ====================

def create_text_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                        on_change: Optional[ChangeCallback] = None,
                        kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """
    Text input handler. Writes the text unchanged.

    Args:
        set_value: Manager write function ``set_value(name, value, mark_dirty=True)``
        trigger: Optional manager validation function ``trigger(name)``
        on_change: Optional callback ``on_change(name, value, event)`` run last
        kind_of: Optional field kind lookup used to reject mismatched fields at bind time

    Returns:
        Binder taking a field name and returning the event handler
    """
    return _make_binder(HandlerCategory.TEXT, _event_text, set_value, trigger, on_change, kind_of)


def create_number_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                          on_change: Optional[ChangeCallback] = None,
                          kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """
    Number input handler.

    Empty input is stored as ``""``. Numeric text is stored as int or float.
    Anything else (``"12a"``, ``"-"``) is dropped: no write, no trigger, no
    callback, and the stored value is left as it was.
    """
    return _make_binder(HandlerCategory.NUMBER, _extract_number, set_value, trigger, on_change, kind_of)


def create_phone_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                         on_change: Optional[ChangeCallback] = None,
                         kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """Phone input handler. Strips non-digits and stores the grouped form (``"091 234 567 8"``)."""
    return _make_binder(HandlerCategory.PHONE, _extract_phone, set_value, trigger, on_change, kind_of)


def create_email_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                         on_change: Optional[ChangeCallback] = None,
                         kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """Email input handler. Stores the lower-cased, trimmed text."""
    return _make_binder(HandlerCategory.EMAIL, _extract_email, set_value, trigger, on_change, kind_of)


def create_currency_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                            on_change: Optional[ChangeCallback] = None,
                            kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """
    Currency input handler.

    Drops everything except digits and ``.``, then stores the leading number
    (``"1.000.000 ₫"`` cleans to ``"1.000.000"`` and stores 1, so show the
    formatted amount in a separate label rather than writing it back into
    the editor).
    Input with no leading number is dropped.
    """
    return _make_binder(HandlerCategory.CURRENCY, _extract_currency, set_value, trigger, on_change, kind_of)


def create_checkbox_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                            on_change: Optional[ChangeCallback] = None,
                            kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """Checkbox handler. Stores the checked flag."""
    return _make_binder(HandlerCategory.CHECKBOX, _event_checked, set_value, trigger, on_change, kind_of)


def create_select_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                          on_change: Optional[SelectCallback] = None,
                          kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """
    Select handler. Receives the chosen value directly, not an event.

    The callback is called as ``on_change(name, value)``.
    """
    return _make_binder(HandlerCategory.SELECT, _extract_select, set_value, trigger, on_change, kind_of,
                        pass_event=False)


def create_file_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                        on_change: Optional[ChangeCallback] = None,
                        kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """File handler. Stores the selected file list as-is (None when cleared)."""
    return _make_binder(HandlerCategory.FILE, _event_files, set_value, trigger, on_change, kind_of)


def create_radio_handler(set_value: SetValue, trigger: Optional[Trigger] = None,
                         on_change: Optional[ChangeCallback] = None,
                         kind_of: Optional[KindLookup] = None) -> HandlerBinder:
    """Radio handler. Stores the value of the chosen option."""
    return _make_binder(HandlerCategory.RADIO, _event_text, set_value, trigger, on_change, kind_of)


# ==================== Direct forms ====================

def handle_text_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                       on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_text_handler(set_value, trigger, on_change)(name)


def handle_number_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                         on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_number_handler(set_value, trigger, on_change)(name)


def handle_phone_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                        on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_phone_handler(set_value, trigger, on_change)(name)


def handle_email_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                        on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_email_handler(set_value, trigger, on_change)(name)


def handle_currency_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                           on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_currency_handler(set_value, trigger, on_change)(name)


def handle_checkbox_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                           on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_checkbox_handler(set_value, trigger, on_change)(name)


def handle_select_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                         on_change: Optional[SelectCallback] = None) -> FieldHandler:
    return create_select_handler(set_value, trigger, on_change)(name)


def handle_file_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                       on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_file_handler(set_value, trigger, on_change)(name)


def handle_radio_change(set_value: SetValue, trigger: Optional[Trigger], name: str,
                        on_change: Optional[ChangeCallback] = None) -> FieldHandler:
    return create_radio_handler(set_value, trigger, on_change)(name)


# ==================== Focus handlers ====================

@dataclass(frozen=True)
class FocusHandlers:
    """Blur/focus callbacks for one field."""
    on_blur: Callable[[], None]
    on_focus: Callable[[], None]


def create_focus_handlers(trigger: Optional[Trigger] = None) -> Callable[[str], FocusHandlers]:
    """Build ``(name) -> FocusHandlers``. Blur requests validation when a trigger is given."""

    def bind(name: str) -> FocusHandlers:
        def on_blur() -> None:
            if trigger is not None:
                trigger(name)

        def on_focus() -> None:
            pass

        return FocusHandlers(on_blur=on_blur, on_focus=on_focus)

    return bind

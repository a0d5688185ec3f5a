"""
Composite binding of handlers and helpers to one form-state manager.

bind_form(manager) returns a ready-made handler map so callers never thread
set_value/trigger through each factory by hand. The binding is memoized on the
manager's identity: binding the same manager twice returns the same object,
so widgets wired against it never need rewiring.

Usage:
    form = FormState(ProfileForm, rules=PROFILE_RULES)
    bound = bind_form(form)

    phone_edit.textEdited.connect(
        lambda _: bound.handlers.phone("phone")(event_from_widget(phone_edit)))

    # Or let a FormField do the wiring, debounced validation included
    bound.field("email", category=HandlerCategory.EMAIL).attach(email_edit)
"""

import logging
import weakref
from dataclasses import dataclass
from typing import Any, Callable, Optional

from PyQt6.QtWidgets import QWidget

from pyqt_fieldkit.core.debounce_timer import DebouncedTrigger
from pyqt_fieldkit.forms.field_kinds import HandlerCategory
from pyqt_fieldkit.forms.handlers import (
    FieldHandler, FocusHandlers, HandlerBinder,
    create_checkbox_handler, create_currency_handler, create_email_handler, create_file_handler,
    create_focus_handlers, create_number_handler, create_phone_handler, create_radio_handler,
    create_select_handler, create_text_handler, text_matches_value,
)
from pyqt_fieldkit.forms.widget_binding import connect_focus_handlers, connect_handler, reflect_value
from pyqt_fieldkit.protocols.form_state import FormStateManager

logger = logging.getLogger(__name__)

_HANDLER_FACTORIES = {
    HandlerCategory.TEXT: create_text_handler,
    HandlerCategory.NUMBER: create_number_handler,
    HandlerCategory.PHONE: create_phone_handler,
    HandlerCategory.EMAIL: create_email_handler,
    HandlerCategory.CURRENCY: create_currency_handler,
    HandlerCategory.CHECKBOX: create_checkbox_handler,
    HandlerCategory.SELECT: create_select_handler,
    HandlerCategory.FILE: create_file_handler,
    HandlerCategory.RADIO: create_radio_handler,
}


def _weak_method(manager: FormStateManager, method_name: str) -> Callable[..., Any]:
    """Call ``manager.<method_name>`` through a weak reference."""
    ref = weakref.ref(manager)

    def call(*args, **kwargs):
        target = ref()
        if target is None:
            raise ReferenceError(f"Form-state manager was garbage collected before {method_name}() was called")
        return getattr(target, method_name)(*args, **kwargs)

    return call


@dataclass(frozen=True)
class FormHandlers:
    """One ``(name) -> handler`` binder per field category."""
    text: HandlerBinder
    number: HandlerBinder
    phone: HandlerBinder
    email: HandlerBinder
    currency: HandlerBinder
    checkbox: HandlerBinder
    select: HandlerBinder
    file: HandlerBinder
    radio: HandlerBinder

    def for_category(self, category: HandlerCategory) -> HandlerBinder:
        return getattr(self, category.value)


class FormUtils:
    """Debounce and focus helpers bound to a manager's trigger."""

    def __init__(self, trigger: Callable[[str], Any]):
        self._trigger = trigger
        # Weak so that schedulers dropped by their owner are not kept alive
        self._schedulers: "weakref.WeakSet[DebouncedTrigger]" = weakref.WeakSet()
        self.focus_handlers: Callable[[str], FocusHandlers] = create_focus_handlers(trigger)

    def debounced_trigger(self, delay_ms: Optional[int] = None, parent=None) -> DebouncedTrigger:
        """Create a new scheduler. Use one per field; each owns a single timer."""
        scheduler = DebouncedTrigger(self._trigger, delay_ms=delay_ms, parent=parent)
        self._schedulers.add(scheduler)
        return scheduler

    def dispose(self) -> None:
        """Dispose every scheduler created through this object."""
        for scheduler in list(self._schedulers):
            scheduler.dispose()
        self._schedulers.clear()


class EnhancedForm:
    """Handler map and helpers for one form-state manager."""

    def __init__(self, manager: FormStateManager):
        self._manager_ref = weakref.ref(manager)
        set_value = _weak_method(manager, "set_value")
        trigger = _weak_method(manager, "trigger")
        kind_of = _weak_method(manager, "field_kind")

        self.handlers = FormHandlers(**{
            category.value: factory(set_value, trigger, kind_of=kind_of)
            for category, factory in _HANDLER_FACTORIES.items()
        })
        self.utils = FormUtils(trigger)

    @property
    def manager(self) -> Optional[FormStateManager]:
        return self._manager_ref()

    def field(self, name: str, category: HandlerCategory = HandlerCategory.TEXT,
              validate_on_change: bool = True, validate_on_blur: bool = True,
              debounce_ms: Optional[int] = None) -> "FormField":
        """Create a FormField for ``name`` on this binding's manager."""
        manager = self.manager
        if manager is None:
            raise ReferenceError("Form-state manager was garbage collected")
        return FormField(manager, name, category=category, validate_on_change=validate_on_change,
                         validate_on_blur=validate_on_blur, debounce_ms=debounce_ms)

    def dispose(self) -> None:
        self.utils.dispose()


_bindings: "weakref.WeakKeyDictionary[FormStateManager, EnhancedForm]" = weakref.WeakKeyDictionary()


def bind_form(manager: FormStateManager) -> EnhancedForm:
    """
    Return the EnhancedForm for ``manager``, creating it on first use.

    The same manager always yields the same object until the manager is
    garbage collected.
    """
    binding = _bindings.get(manager)
    if binding is None:
        logger.debug(f"Creating handler binding for {type(manager).__name__}")
        binding = EnhancedForm(manager)
        _bindings[manager] = binding
    return binding


class FormField:
    """
    Per-field binding: a category handler that validates through a debounce.

    Each FormField owns one DebouncedTrigger. With validate_on_blur, blur
    cancels any pending debounced validation and validates immediately;
    without it, a pending validation still fires after the delay. Call
    dispose() (or attach to a widget, whose destruction disposes the field) so
    no validation fires after the field is gone. A disposed field ignores
    further changes and focus events.
    """

    def __init__(self, manager: FormStateManager, name: str,
                 category: HandlerCategory = HandlerCategory.TEXT,
                 validate_on_change: bool = True, validate_on_blur: bool = True,
                 debounce_ms: Optional[int] = None):
        self._manager = manager
        self._name = name
        self._category = category
        self._validate_on_blur = validate_on_blur
        self._disposed = False
        self._scheduler = DebouncedTrigger(manager.trigger, delay_ms=debounce_ms)
        self._focus = create_focus_handlers(manager.trigger if validate_on_blur else None)(name)
        self._unwatch: Optional[Callable[[], None]] = None

        factory = _HANDLER_FACTORIES[category]
        change_trigger = self._scheduler if validate_on_change else None
        self._handler: FieldHandler = factory(manager.set_value, change_trigger,
                                              kind_of=manager.field_kind)(name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def value(self) -> Any:
        return self._manager.get_value(self._name)

    @property
    def error(self) -> Optional[str]:
        return self._manager.get_error(self._name)

    @property
    def is_validation_pending(self) -> bool:
        return self._scheduler.is_pending

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def on_change(self, event: Any) -> None:
        """Handle a ChangeEvent (or a plain value for select fields)."""
        if self._disposed:
            logger.debug(f"FormField '{self._name}' is disposed, ignoring change")
            return
        self._handler(event)

    def on_blur(self) -> None:
        if self._disposed:
            return
        if self._validate_on_blur:
            self._scheduler.cancel()
        self._focus.on_blur()

    def on_focus(self) -> None:
        if self._disposed:
            return
        self._focus.on_focus()

    def _keeps_typed_text(self, text: str, value: Any) -> bool:
        return text_matches_value(self._category, text, value)

    def attach(self, widget: QWidget) -> "FormField":
        """
        Wire widget edits, focus changes and value display to this field.

        Number and currency editors keep the text as typed while it still
        stands for the stored value, so ``"0."`` is not rewritten to ``"0.0"``.
        The widget's destruction disposes the field.
        """
        connect_handler(widget, self.on_change)
        connect_focus_handlers(widget, FocusHandlers(on_blur=self.on_blur, on_focus=self.on_focus))
        if hasattr(self._manager, "watch"):
            self._unwatch = reflect_value(self._manager, self._name, widget,
                                          keep_text=self._keeps_typed_text)
        widget.destroyed.connect(lambda *_: self.dispose())
        return self

    def dispose(self) -> None:
        self._disposed = True
        self._scheduler.dispose()
        if self._unwatch is not None:
            self._unwatch()
            self._unwatch = None

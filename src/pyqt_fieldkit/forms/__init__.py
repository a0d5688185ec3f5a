"""
Field handling and validation.

Handler factories, validation rules, the reference FormState manager and the
composite binding that ties them together.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .enhanced_form import EnhancedForm, FormField, FormHandlers, FormUtils, bind_form
    from .events import ChangeEvent
    from .field_kinds import FieldKind, HandlerCategory
    from .form_state import FormState

_EXPORTS = {
    "ChangeEvent": ("pyqt_fieldkit.forms.events", "ChangeEvent"),
    "FieldKind": ("pyqt_fieldkit.forms.field_kinds", "FieldKind"),
    "HandlerCategory": ("pyqt_fieldkit.forms.field_kinds", "HandlerCategory"),
    "infer_field_kind": ("pyqt_fieldkit.forms.field_kinds", "infer_field_kind"),
    "FormState": ("pyqt_fieldkit.forms.form_state", "FormState"),
    "EnhancedForm": ("pyqt_fieldkit.forms.enhanced_form", "EnhancedForm"),
    "FormField": ("pyqt_fieldkit.forms.enhanced_form", "FormField"),
    "FormHandlers": ("pyqt_fieldkit.forms.enhanced_form", "FormHandlers"),
    "FormUtils": ("pyqt_fieldkit.forms.enhanced_form", "FormUtils"),
    "bind_form": ("pyqt_fieldkit.forms.enhanced_form", "bind_form"),
    "FocusHandlers": ("pyqt_fieldkit.forms.handlers", "FocusHandlers"),
    "connect_handler": ("pyqt_fieldkit.forms.widget_binding", "connect_handler"),
    "connect_focus_handlers": ("pyqt_fieldkit.forms.widget_binding", "connect_focus_handlers"),
    "event_from_widget": ("pyqt_fieldkit.forms.widget_binding", "event_from_widget"),
    "reflect_value": ("pyqt_fieldkit.forms.widget_binding", "reflect_value"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())

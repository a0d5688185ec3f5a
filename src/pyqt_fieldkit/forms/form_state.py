"""
In-memory form-state manager.

FormState owns the values, dirty flags, rules and errors of one form described
by a dataclass. It is the reference implementation of FormStateManager and
the reactive surface widgets read from: every write emits ``value_changed``
and every validation that changes a message emits ``error_changed``.

Usage:
    @dataclass
    class ContactForm:
        name: str = ""
        phone: str = ""
        subscribe: bool = False

    form = FormState(ContactForm, rules={"name": [required()], "phone": [required(), phone()]})
    form.error_changed.connect(show_error)
"""

import dataclasses
import logging
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_fieldkit.config import get_fieldkit_config
from pyqt_fieldkit.exceptions import UnknownFieldError
from pyqt_fieldkit.forms.field_kinds import FieldKind, field_kinds_for_schema
from pyqt_fieldkit.forms.validators import ValidationRule
from pyqt_fieldkit.protocols.form_state import FormStateManager, QObjectABCMeta

logger = logging.getLogger(__name__)


def _initial_values(schema: Any) -> Dict[str, Any]:
    if not isinstance(schema, type):
        return {f.name: getattr(schema, f.name) for f in dataclasses.fields(schema)}

    values = {}
    for f in dataclasses.fields(schema):
        if f.default is not dataclasses.MISSING:
            values[f.name] = f.default
        elif f.default_factory is not dataclasses.MISSING:
            values[f.name] = f.default_factory()
        else:
            values[f.name] = None
    return values


class FormState(QObject, FormStateManager, metaclass=QObjectABCMeta):
    """
    Reference form-state manager backed by a dataclass schema.

    Field kinds are inferred from the schema's annotations and can be
    overridden with ``kinds``. Validation always reads the value stored at
    trigger time.

    Signals:
        value_changed(name, value): emitted on every write, even if the value is unchanged
        error_changed(name, message): emitted when a field's error message changes (None when cleared)
        validated(name, is_valid): emitted after each field validation
    """

    value_changed = pyqtSignal(str, object)
    error_changed = pyqtSignal(str, object)
    validated = pyqtSignal(str, bool)

    def __init__(self, schema: Any, defaults: Optional[Mapping[str, Any]] = None,
                 rules: Optional[Mapping[str, Iterable[ValidationRule]]] = None,
                 kinds: Optional[Mapping[str, FieldKind]] = None,
                 parent: Optional[QObject] = None):
        super().__init__(parent)
        self._kinds: Dict[str, Optional[FieldKind]] = field_kinds_for_schema(schema)
        self._defaults: Dict[str, Any] = _initial_values(schema)
        self._rules: Dict[str, List[ValidationRule]] = {name: [] for name in self._kinds}
        self._errors: Dict[str, str] = {}
        self._dirty: set = set()

        for name, kind in (kinds or {}).items():
            self._require(name)
            self._kinds[name] = kind
        for name, value in (defaults or {}).items():
            self._require(name)
            self._defaults[name] = value
        for name, field_rules in (rules or {}).items():
            self.register_rules(name, *field_rules)

        self._values: Dict[str, Any] = dict(self._defaults)

    # ========== SCHEMA ==========

    def _require(self, name: str) -> None:
        if name not in self._kinds:
            raise UnknownFieldError(f"Unknown form field '{name}'")

    @property
    def field_names(self) -> List[str]:
        return list(self._kinds)

    def field_kind(self, name: str) -> Optional[FieldKind]:
        self._require(name)
        return self._kinds[name]

    def register_rules(self, name: str, *rules: ValidationRule) -> None:
        """Append validation rules to a field."""
        self._require(name)
        self._rules[name].extend(rules)

    # ========== VALUES ==========

    def set_value(self, name: str, value: Any, mark_dirty: bool = True) -> None:
        self._require(name)
        self._values[name] = value
        if mark_dirty:
            self._dirty.add(name)
        logger.debug(f"FormState: {name} = {value!r} (dirty={name in self._dirty})")
        self.value_changed.emit(name, value)

    def get_value(self, name: str) -> Any:
        self._require(name)
        return self._values[name]

    def values(self) -> Dict[str, Any]:
        """Snapshot of all current values."""
        return dict(self._values)

    def watch(self, name: str, callback: Callable[[Any], None]) -> Callable[[], None]:
        """
        Call ``callback(value)`` whenever ``name`` is written.

        Returns:
            Function that removes the watch
        """
        self._require(name)

        def on_value_changed(changed: str, value: Any) -> None:
            if changed == name:
                callback(value)

        self.value_changed.connect(on_value_changed)
        return lambda: self.value_changed.disconnect(on_value_changed)

    def is_dirty(self, name: str) -> bool:
        self._require(name)
        return name in self._dirty

    @property
    def dirty_fields(self) -> FrozenSet[str]:
        return frozenset(self._dirty)

    # ========== VALIDATION ==========

    def trigger(self, name: Optional[str] = None) -> bool:
        if name is None:
            results = [self._validate_field(field_name) for field_name in self._kinds]
            return all(results)
        self._require(name)
        return self._validate_field(name)

    def _validate_field(self, name: str) -> bool:
        value = self._values[name]
        snapshot = dict(self._values)
        message: Optional[str] = None

        for rule in self._rules[name]:
            result = rule(value, snapshot)
            if result is not True:
                message = result if isinstance(result, str) and result else get_fieldkit_config().messages.pattern
                break

        self._set_error(name, message)
        is_valid = message is None
        logger.debug(f"FormState: validated {name} -> {'ok' if is_valid else message}")
        self.validated.emit(name, is_valid)
        return is_valid

    def _set_error(self, name: str, message: Optional[str]) -> None:
        if self._errors.get(name) == message:
            return
        if message is None:
            del self._errors[name]
        else:
            self._errors[name] = message
        self.error_changed.emit(name, message)

    def get_error(self, name: str) -> Optional[str]:
        self._require(name)
        return self._errors.get(name)

    @property
    def errors(self) -> Dict[str, str]:
        return dict(self._errors)

    @property
    def is_valid(self) -> bool:
        """True when no field currently has an error. Does not run validation."""
        return not self._errors

    # ========== RESET ==========

    def reset(self, values: Optional[Mapping[str, Any]] = None) -> None:
        """Restore defaults (optionally replaced by ``values``) and clear dirty flags and errors."""
        if values:
            for name, value in values.items():
                self._require(name)
                self._defaults[name] = value

        self._dirty.clear()
        for name in list(self._errors):
            self._set_error(name, None)
        for name, value in self._defaults.items():
            self._values[name] = value
            self.value_changed.emit(name, value)

"""
Form-state manager contract.

The handler layer never owns form data. It writes normalized values into a
form-state manager and asks that manager to validate. Any object implementing
this ABC (or registered as a virtual subclass) can be bound with bind_form.
"""

from abc import ABC, ABCMeta, abstractmethod
from typing import Any, Optional

from PyQt6.QtCore import QObject

from pyqt_fieldkit.forms.field_kinds import FieldKind

# Qt's metaclass combined with ABCMeta, so QObject subclasses can implement the ABC
_QtMetaclass = type(QObject)


class QObjectABCMeta(_QtMetaclass, ABCMeta):
    """Metaclass for QObject-based form-state managers."""
    pass


class FormStateManager(ABC):
    """
    ABC for the external manager that owns form values and errors.

    Handlers only rely on set_value and trigger. get_value and get_error are
    the read side used by per-field bindings.
    """

    @abstractmethod
    def set_value(self, name: str, value: Any, mark_dirty: bool = True) -> None:
        """
        Write a normalized value into the record.

        Args:
            name: Field name
            value: Already-normalized value
            mark_dirty: Flag the field as modified by the user
        """
        pass

    @abstractmethod
    def trigger(self, name: Optional[str] = None) -> bool:
        """
        Validate a field against its current value.

        Args:
            name: Field name, or None to validate every field

        Returns:
            True if valid. Handlers never inspect the result.
        """
        pass

    @abstractmethod
    def get_value(self, name: str) -> Any:
        """Return the current value of a field."""
        pass

    @abstractmethod
    def get_error(self, name: str) -> Optional[str]:
        """Return the current error message for a field, or None."""
        pass

    def field_kind(self, name: str) -> Optional[FieldKind]:
        """
        Return the declared kind of a field.

        Managers without schema information return None, which disables
        handler/field compatibility checks.
        """
        return None

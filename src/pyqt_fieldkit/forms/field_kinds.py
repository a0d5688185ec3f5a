"""
Field kinds and handler compatibility.

Every field in a form schema has a FieldKind describing the shape of the value
stored for it. Every handler factory has a HandlerCategory describing the
shape of the value it writes. Binding a handler to a field checks the two
against each other once, at construction, so a checkbox handler can never
silently write booleans into a text field.
"""

import dataclasses
import decimal
import logging
import typing
from enum import Enum
from typing import Any, Dict, FrozenSet, Literal, Optional, Type, Union, get_args, get_origin

from pyqt_fieldkit.exceptions import FieldKindMismatchError

logger = logging.getLogger(__name__)


class FieldKind(Enum):
    """Shape of the value stored for a field."""
    TEXT = "text"          # str
    NUMBER = "number"      # int | float | "" (empty input)
    BOOLEAN = "boolean"    # bool
    CHOICE = "choice"      # one value out of a fixed set, str or number
    FILES = "files"        # list of file paths, or None


class HandlerCategory(Enum):
    """Field categories that have a dedicated change handler."""
    TEXT = "text"
    NUMBER = "number"
    PHONE = "phone"
    EMAIL = "email"
    CURRENCY = "currency"
    CHECKBOX = "checkbox"
    SELECT = "select"
    FILE = "file"
    RADIO = "radio"


# Field kinds each handler category is allowed to write into
HANDLER_FIELD_KINDS: Dict[HandlerCategory, FrozenSet[FieldKind]] = {
    HandlerCategory.TEXT: frozenset({FieldKind.TEXT}),
    HandlerCategory.NUMBER: frozenset({FieldKind.NUMBER}),
    HandlerCategory.PHONE: frozenset({FieldKind.TEXT}),
    HandlerCategory.EMAIL: frozenset({FieldKind.TEXT}),
    HandlerCategory.CURRENCY: frozenset({FieldKind.NUMBER}),
    HandlerCategory.CHECKBOX: frozenset({FieldKind.BOOLEAN}),
    HandlerCategory.SELECT: frozenset({FieldKind.CHOICE, FieldKind.TEXT, FieldKind.NUMBER}),
    HandlerCategory.FILE: frozenset({FieldKind.FILES}),
    HandlerCategory.RADIO: frozenset({FieldKind.CHOICE, FieldKind.TEXT}),
}

_NUMERIC_TYPES = (int, float, decimal.Decimal)


def _is_enum(param_type: Any) -> bool:
    return isinstance(param_type, type) and issubclass(param_type, Enum)


def infer_field_kind(annotation: Any) -> Optional[FieldKind]:
    """
    Infer the FieldKind for a type annotation.

    Optional[T] is unwrapped. Unions of numbers and str (number-or-empty
    inputs) are NUMBER. Types that do not map to a kind return None, which
    leaves the field unchecked.

    Example:
        >>> infer_field_kind(Optional[int])
        <FieldKind.NUMBER: 'number'>
        >>> infer_field_kind(Literal["a", "b"])
        <FieldKind.CHOICE: 'choice'>
    """
    origin = get_origin(annotation)

    if origin is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return infer_field_kind(args[0])
        kinds = {infer_field_kind(arg) for arg in args}
        if kinds == {FieldKind.NUMBER, FieldKind.TEXT}:
            return FieldKind.NUMBER
        return kinds.pop() if len(kinds) == 1 else None

    if origin is Literal or _is_enum(annotation):
        return FieldKind.CHOICE
    if origin in (list, tuple) or annotation in (list, tuple):
        return FieldKind.FILES
    if annotation is bool:
        return FieldKind.BOOLEAN
    if isinstance(annotation, type) and issubclass(annotation, _NUMERIC_TYPES):
        return FieldKind.NUMBER
    if annotation is str:
        return FieldKind.TEXT
    return None


def field_kinds_for_schema(schema: Union[Type, Any]) -> Dict[str, Optional[FieldKind]]:
    """Map each field of a dataclass type or instance to its inferred kind."""
    schema_type = schema if isinstance(schema, type) else type(schema)
    if not dataclasses.is_dataclass(schema_type):
        raise TypeError(f"Form schema must be a dataclass, got {schema_type.__name__}")

    hints = typing.get_type_hints(schema_type)
    return {
        f.name: infer_field_kind(hints.get(f.name, f.type))
        for f in dataclasses.fields(schema_type)
    }


def check_handler_compatible(category: HandlerCategory, name: str, kind: Optional[FieldKind]) -> None:
    """
    Raise FieldKindMismatchError if a handler category cannot write a field kind.

    A kind of None means the manager has no schema information, and the check
    passes.
    """
    if kind is None:
        return
    allowed = HANDLER_FIELD_KINDS[category]
    if kind not in allowed:
        logger.warning(f"Handler '{category.value}' cannot be bound to field '{name}' of kind '{kind.value}'")
        expected = ", ".join(sorted(k.value for k in allowed))
        raise FieldKindMismatchError(
            f"{category.value} handler writes {expected} values, "
            f"but field '{name}' is {kind.value}"
        )

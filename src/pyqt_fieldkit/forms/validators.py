"""
Validation rule builders.

Each builder takes its configuration and an optional message and returns a
rule ``rule(value, form_data=None) -> True | str``. True means valid; a string
means invalid and is the message shown to the user. Rules are pure and
synchronous, and hold no reference to any form-state manager.

Example:
    rules = [required(), min_length(3), max_length(20)]
    form = FormState(SignupForm, rules={"username": rules})
"""

import re
from typing import Any, Callable, Mapping, Optional, Union

from pyqt_fieldkit.config import get_fieldkit_config
from pyqt_fieldkit.core.numbers import is_nan, to_number

ValidationResult = Union[bool, str]
ValidationRule = Callable[..., ValidationResult]
FormData = Optional[Mapping[str, Any]]

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
# Mobile numbers: 0, a carrier digit from {3, 5, 7, 8, 9}, then 8 digits
PHONE_PATTERN = re.compile(r"0[35789][0-9]{8}")
_WHITESPACE = re.compile(r"\s")


def _length(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, (str, list, tuple)):
        return len(value)
    return len(str(value))


def required(message: Optional[str] = None) -> ValidationRule:
    """Fail for None, empty strings and empty sequences. 0 and False pass."""
    if message is None:
        message = get_fieldkit_config().messages.required

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        if value is None:
            return message
        if isinstance(value, str) and value == "":
            return message
        if isinstance(value, (list, tuple)) and len(value) == 0:
            return message
        return True

    return rule


def email(message: Optional[str] = None) -> ValidationRule:
    """Fail unless the value looks like ``name@domain.tld``. No full RFC check."""
    if message is None:
        message = get_fieldkit_config().messages.email

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        if isinstance(value, str) and EMAIL_PATTERN.fullmatch(value):
            return True
        return message

    return rule


def phone(message: Optional[str] = None) -> ValidationRule:
    """Fail unless the value, with whitespace removed, is a 10-digit mobile number."""
    if message is None:
        message = get_fieldkit_config().messages.phone

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        if value is None:
            return message
        cleaned = _WHITESPACE.sub("", str(value))
        return True if PHONE_PATTERN.fullmatch(cleaned) else message

    return rule


def min_length(minimum: int, message: Optional[str] = None) -> ValidationRule:
    """Fail when the value has fewer than ``minimum`` characters."""
    if message is None:
        message = get_fieldkit_config().messages.min_length.format(min=minimum)

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        return True if _length(value) >= minimum else message

    return rule


def max_length(maximum: int, message: Optional[str] = None) -> ValidationRule:
    """Fail when the value has more than ``maximum`` characters."""
    if message is None:
        message = get_fieldkit_config().messages.max_length.format(max=maximum)

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        return True if _length(value) <= maximum else message

    return rule


def numeric(message: Optional[str] = None) -> ValidationRule:
    """Fail unless the value coerces to a number. Empty input counts as 0."""
    if message is None:
        message = get_fieldkit_config().messages.numeric

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        return message if is_nan(to_number(value)) else True

    return rule


def min_value(minimum: float, message: Optional[str] = None) -> ValidationRule:
    """Fail when the numeric value is below ``minimum`` or not a number."""
    if message is None:
        message = get_fieldkit_config().messages.min_value.format(min=minimum)

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        number = to_number(value)
        return True if not is_nan(number) and number >= minimum else message

    return rule


def max_value(maximum: float, message: Optional[str] = None) -> ValidationRule:
    """Fail when the numeric value is above ``maximum`` or not a number."""
    if message is None:
        message = get_fieldkit_config().messages.max_value.format(max=maximum)

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        number = to_number(value)
        return True if not is_nan(number) and number <= maximum else message

    return rule


def pattern(regex: Union[str, "re.Pattern[str]"], message: Optional[str] = None) -> ValidationRule:
    """Fail unless ``regex`` matches somewhere in the value."""
    compiled = re.compile(regex) if isinstance(regex, str) else regex
    if message is None:
        message = get_fieldkit_config().messages.pattern

    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        text = "" if value is None else str(value)
        return True if compiled.search(text) else message

    return rule


def conditional(condition: Callable[[FormData], bool], validation: ValidationRule) -> ValidationRule:
    """
    Apply ``validation`` only when ``condition(form_data)`` holds.

    Example:
        # Company name is required only for business accounts
        conditional(lambda data: data["account_type"] == "business", required())
    """
    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        if condition(form_data):
            return validation(value, form_data)
        return True

    return rule


def compose(*rules: ValidationRule) -> ValidationRule:
    """Run rules in order and return the first failure message, or True."""
    def rule(value: Any, form_data: FormData = None) -> ValidationResult:
        for validation in rules:
            result = validation(value, form_data)
            if result is not True:
                return result
        return True

    return rule

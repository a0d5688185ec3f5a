"""
Numeric coercion with browser number-input semantics.

Form inputs deliver text. These helpers decide whether that text is a number
the same way an HTML number field does, so that ``"1e3"`` and ``" 42 "`` are
accepted while ``"1_000"`` (valid for Python's ``float``) and ``"12a"`` are not.
"""

import math
import re
from typing import Any, Union

Number = Union[int, float]

_DECIMAL_LITERAL = re.compile(r"[+-]?(?:(\d+)\.?(\d*)|\.(\d+))(?:[eE][+-]?\d+)?")
_HEX_LITERAL = re.compile(r"0[xX][0-9a-fA-F]+")
_INFINITY_LITERAL = re.compile(r"([+-]?)Infinity")
_FLOAT_PREFIX = re.compile(r"[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


def is_nan(value: Any) -> bool:
    """True when value is a float NaN."""
    return isinstance(value, float) and math.isnan(value)


def _sequence_to_number(value: Union[list, tuple]) -> Number:
    # A sequence converts through its string form: [] is "", [x] is str(x)
    if len(value) == 0:
        return 0
    if len(value) == 1:
        item = value[0]
        if item is None:
            return 0
        if isinstance(item, (list, tuple)):
            return _sequence_to_number(item)
        return to_number(str(item))
    return math.nan


def to_number(value: Any) -> Number:
    """
    Coerce value to a number, returning NaN when it is not numeric.

    Strings are trimmed first and an empty string is 0. Integral decimal
    literals come back as ``int``, everything else as ``float``. ``None`` is
    0, as is an empty list; a one-item list converts like its item.

    Example:
        >>> to_number(" 42 ")
        42
        >>> to_number("1.5e2")
        150.0
        >>> to_number("12a")
        nan
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (list, tuple)):
        return _sequence_to_number(value)
    if not isinstance(value, str):
        return math.nan

    text = value.strip()
    if text == "":
        return 0

    if _DECIMAL_LITERAL.fullmatch(text):
        if "." in text or "e" in text or "E" in text:
            return float(text)
        try:
            return int(text)
        except ValueError:
            # Past the interpreter's int digit limit; float gives +/-inf
            return float(text)

    if _HEX_LITERAL.fullmatch(text):
        return int(text, 16)

    infinity = _INFINITY_LITERAL.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf

    return math.nan


def parse_float_prefix(value: str) -> float:
    """
    Parse the longest numeric prefix of value, or NaN if there is none.

    Leading whitespace is skipped and trailing garbage is ignored, so
    ``"1.2.3"`` parses as 1.2 while ``"."`` has no numeric prefix.
    """
    match = _FLOAT_PREFIX.match(value.lstrip())
    if not match:
        return math.nan
    literal = match.group(0)
    if literal.lstrip("+-") == "Infinity":
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)


def is_numeric_input(text: str) -> bool:
    """True when text is accepted by a number input: empty, or a full numeric literal."""
    if text == "":
        return True
    return not is_nan(to_number(text)) and not is_nan(parse_float_prefix(text))

"""
Display formatters for form field values.

All formatters are pure and total: input outside the expected shape is
coerced, never raised on. Number and currency rendering is locale-aware via
QLocale; the locale comes from FieldKitConfig unless passed explicitly.
"""

import datetime as dt
import math
import re
from typing import Any, Optional, Union

from PyQt6.QtCore import QLocale

from pyqt_fieldkit.config import get_fieldkit_config
from pyqt_fieldkit.core.numbers import is_nan, to_number

# Phone numbers are grouped left-to-right in blocks of three, at most four blocks
PHONE_BLOCK_SIZE = 3
PHONE_MAX_DIGITS = 12

# Maximum fraction digits shown by format_number
NUMBER_MAX_FRACTION_DIGITS = 3

_NON_DIGIT = re.compile(r"[^0-9]")
_QLONGLONG_LIMIT = 2 ** 63

LocaleLike = Union[QLocale, str, None]


def _resolve_locale(locale: LocaleLike) -> QLocale:
    if isinstance(locale, QLocale):
        return locale
    return QLocale(locale or get_fieldkit_config().locale_name)


def _finite_number(value: Any) -> Optional[Union[int, float]]:
    if value is None:
        return None
    number = to_number(value)
    if is_nan(number) or (isinstance(number, float) and math.isinf(number)):
        return None
    if isinstance(number, float) and number.is_integer() and abs(number) < _QLONGLONG_LIMIT:
        return int(number)
    if isinstance(number, int) and abs(number) >= _QLONGLONG_LIMIT:
        try:
            return float(number)
        except OverflowError:
            return None
    return number


def format_phone_number(value: Any) -> str:
    """
    Group the digits of a phone number for display.

    Non-digits are dropped and at most 12 digits are kept, grouped 3-3-3-3.

    Example:
        >>> format_phone_number("0912-345-678")
        '091 234 567 8'
        >>> format_phone_number("1234")
        '123 4'
    """
    if value is None:
        return ""
    digits = _NON_DIGIT.sub("", str(value))[:PHONE_MAX_DIGITS]
    blocks = [digits[i:i + PHONE_BLOCK_SIZE] for i in range(0, len(digits), PHONE_BLOCK_SIZE)]
    return " ".join(blocks)


def format_currency(value: Any, locale: LocaleLike = None) -> str:
    """
    Render an amount with locale grouping and the locale's currency symbol.

    Display only; the stored field value stays numeric. Returns an empty
    string for values that are not finite numbers.

    Example:
        >>> format_currency(1000000)
        '1.000.000 ₫'
    """
    number = _finite_number(value)
    if number is None:
        return ""
    return _resolve_locale(locale).toCurrencyString(number)


def format_number(value: Any, locale: LocaleLike = None) -> str:
    """Render a number with locale thousands grouping and no currency symbol."""
    number = _finite_number(value)
    if number is None:
        return ""

    qlocale = _resolve_locale(locale)
    if isinstance(number, int):
        return qlocale.toString(number)

    text = qlocale.toString(float(number), "f", NUMBER_MAX_FRACTION_DIGITS)
    decimal_point = qlocale.decimalPoint()
    if decimal_point in text:
        text = text.rstrip("0").rstrip(decimal_point)
    return text


def format_date_for_input(value: Union[dt.date, dt.datetime]) -> str:
    """Format a date as ``YYYY-MM-DD`` for date inputs. Aware datetimes are converted to UTC first."""
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.date().isoformat()
    return value.isoformat()

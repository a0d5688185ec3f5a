"""
Core utilities.

Framework-level building blocks with no form knowledge: numeric coercion,
display formatters, signal blocking and the debounce timer.
"""

from .debounce_timer import DebounceTimer, DebouncedTrigger, create_debounced_trigger
from .formatters import format_currency, format_date_for_input, format_number, format_phone_number
from .signals import block_signals

__all__ = [
    "DebounceTimer",
    "DebouncedTrigger",
    "create_debounced_trigger",
    "format_currency",
    "format_date_for_input",
    "format_number",
    "format_phone_number",
    "block_signals",
]

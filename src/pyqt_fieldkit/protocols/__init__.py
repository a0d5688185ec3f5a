"""
Protocol definitions.

ABC contract for the form-state manager the handler layer writes into.
"""

from .form_state import FormStateManager, QObjectABCMeta

__all__ = [
    "FormStateManager",
    "QObjectABCMeta",
]

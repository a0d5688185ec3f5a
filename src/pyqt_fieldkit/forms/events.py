"""Change event passed from widgets to handlers."""

from dataclasses import dataclass
from typing import Any, List, Optional


@dataclass(frozen=True)
class ChangeEvent:
    """Immutable snapshot of a user edit."""
    value: str = ""                      # Text content or selected option value
    checked: bool = False                # Checkbox / radio state
    files: Optional[List[str]] = None    # Selected file paths, None when cleared
    source: Any = None                   # Originating widget, if any

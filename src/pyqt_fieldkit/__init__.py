"""
pyqt-fieldkit: form-field orchestration for PyQt6.

Decides what value a form field stores and when it is validated:

- Formatters: phone grouping, locale-aware currency and number display
- Validators: composable rule builders returning True or a message
- DebouncedTrigger: one cancellable trailing timer per field
- Handler factories: per-category change handlers (text, number, phone,
  email, currency, checkbox, select, file, radio)
- bind_form: memoized handler map for one form-state manager

Form state itself (values, dirty flags, errors) belongs to a
FormStateManager; FormState is the bundled in-memory implementation.
"""

__version__ = "0.1.0"

from pyqt_fieldkit.config import FieldKitConfig, ValidationMessages, get_fieldkit_config, set_fieldkit_config
from pyqt_fieldkit.exceptions import (
    FieldKindMismatchError, FieldKitError, SchedulerDisposedError, UnknownFieldError,
)
from pyqt_fieldkit.core.debounce_timer import DebounceTimer, DebouncedTrigger, create_debounced_trigger
from pyqt_fieldkit.core.formatters import (
    format_currency, format_date_for_input, format_number, format_phone_number,
)
from pyqt_fieldkit.forms.events import ChangeEvent
from pyqt_fieldkit.forms.field_kinds import FieldKind, HandlerCategory
from pyqt_fieldkit.forms import validators
from pyqt_fieldkit.forms.handlers import (
    FocusHandlers,
    create_checkbox_handler, create_currency_handler, create_email_handler, create_file_handler,
    create_focus_handlers, create_number_handler, create_phone_handler, create_radio_handler,
    create_select_handler, create_text_handler,
    handle_checkbox_change, handle_currency_change, handle_email_change, handle_file_change,
    handle_number_change, handle_phone_change, handle_radio_change, handle_select_change,
    handle_text_change,
)
from pyqt_fieldkit.protocols.form_state import FormStateManager
from pyqt_fieldkit.forms.form_state import FormState
from pyqt_fieldkit.forms.enhanced_form import EnhancedForm, FormField, FormHandlers, FormUtils, bind_form

__all__ = [
    "__version__",
    "FieldKitConfig",
    "ValidationMessages",
    "get_fieldkit_config",
    "set_fieldkit_config",
    "FieldKitError",
    "FieldKindMismatchError",
    "SchedulerDisposedError",
    "UnknownFieldError",
    "DebounceTimer",
    "DebouncedTrigger",
    "create_debounced_trigger",
    "format_currency",
    "format_date_for_input",
    "format_number",
    "format_phone_number",
    "ChangeEvent",
    "FieldKind",
    "HandlerCategory",
    "validators",
    "FocusHandlers",
    "create_text_handler",
    "create_number_handler",
    "create_phone_handler",
    "create_email_handler",
    "create_currency_handler",
    "create_checkbox_handler",
    "create_select_handler",
    "create_file_handler",
    "create_radio_handler",
    "create_focus_handlers",
    "handle_text_change",
    "handle_number_change",
    "handle_phone_change",
    "handle_email_change",
    "handle_currency_change",
    "handle_checkbox_change",
    "handle_select_change",
    "handle_file_change",
    "handle_radio_change",
    "FormStateManager",
    "FormState",
    "EnhancedForm",
    "FormField",
    "FormHandlers",
    "FormUtils",
    "bind_form",
]

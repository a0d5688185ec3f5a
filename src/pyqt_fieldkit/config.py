"""Global configuration for pyqt-fieldkit.

Applications call ``set_fieldkit_config`` once at startup to change the
locale, default debounce delay or validation messages.
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ValidationMessages:
    """Default user-facing messages for the validation rule builders.

    Templated messages are rendered with ``str.format`` and receive the
    configured bound as ``{min}`` or ``{max}``.
    """

    required: str = "Trường này là bắt buộc"
    email: str = "Email không hợp lệ"
    phone: str = "Số điện thoại không hợp lệ"
    min_length: str = "Phải có ít nhất {min} ký tự"
    max_length: str = "Không được vượt quá {max} ký tự"
    numeric: str = "Phải là số"
    min_value: str = "Giá trị phải lớn hơn hoặc bằng {min}"
    max_value: str = "Giá trị phải nhỏ hơn hoặc bằng {max}"
    pattern: str = "Giá trị không hợp lệ"


@dataclass
class FieldKitConfig:
    """Configuration for formatting, validation and handler behaviour.

    Attributes:
        locale_name: QLocale name used by the number and currency formatters
        default_debounce_ms: Delay used when a debounced trigger gets no explicit delay
        messages: Default validation messages
        debug_handlers: Log every handler invocation at debug level
    """

    locale_name: str = "vi_VN"
    default_debounce_ms: int = 300
    messages: ValidationMessages = field(default_factory=ValidationMessages)
    debug_handlers: bool = False


# Global config instance (set by application)
_fieldkit_config: Optional[FieldKitConfig] = None


def set_fieldkit_config(config: Optional[FieldKitConfig]) -> None:
    """Set the global configuration. Passing None restores the defaults."""
    global _fieldkit_config
    _fieldkit_config = config


def get_fieldkit_config() -> FieldKitConfig:
    """Get the current configuration, or the defaults if none was set."""
    if _fieldkit_config is None:
        return FieldKitConfig()
    return _fieldkit_config

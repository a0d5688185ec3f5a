"""Field kit exceptions."""


class FieldKitError(Exception):
    """Base class for all pyqt-fieldkit errors."""


class UnknownFieldError(FieldKitError, KeyError):
    """Raised when a field name is not part of the form schema."""


class FieldKindMismatchError(FieldKitError, TypeError):
    """Raised when a handler is bound to a field whose kind it cannot write."""


class SchedulerDisposedError(FieldKitError, RuntimeError):
    """Raised when a disposed DebouncedTrigger is asked to schedule work."""

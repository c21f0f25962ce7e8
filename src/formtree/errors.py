"""Configuration-time exceptions.

Validation problems never raise; they surface as ValidationResult errors.
These exceptions signal a form that cannot be built at all.
"""


class FormTreeError(Exception):
    """Base class for formtree configuration failures."""


class ComponentNotFoundError(FormTreeError, LookupError):
    """Raised when no field implementation is registered under a component name."""


class UnsupportedTypeError(FormTreeError, TypeError):
    """Raised when a type descriptor has no editor (e.g. a bare union or dict)."""


class InvalidOptionsError(FormTreeError, ValueError):
    """Raised when declared field options cannot be converted to FieldOptions."""

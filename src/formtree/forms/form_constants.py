"""
Form tree constants for eliminating magic strings throughout the field classes.

This module centralizes template keys, validation-context keys, default
messages and the built-in English i18n table.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class FormConstants:
    """
    Centralized constants for the field tree.

    Categories:
    - Template keys looked up in ``Ctx.templates``
    - Validation-context keys
    - Messages and i18n keys
    - Select and keyboard defaults
    """

    # Template keys
    TEXTBOX_TEMPLATE: str = "textbox"
    CHECKBOX_TEMPLATE: str = "checkbox"
    SELECT_TEMPLATE: str = "select"
    DATE_PICKER_TEMPLATE: str = "datepicker"
    STRUCT_TEMPLATE: str = "struct"
    LIST_TEMPLATE: str = "list"

    # Validation context keys
    CONTEXT_REQUIRED_KEY: str = "required"
    CONTEXT_SCHEMA_KEY: str = "original_schema"
    SCHEMA_PROPERTIES_KEY: str = "properties"
    SCHEMA_ITEMS_KEY: str = "items"
    SCHEMA_REQUIRED_KEY: str = "required"

    # Messages
    REQUIRED_MESSAGE: str = "This field is required"
    INVALID_VALUE_MESSAGE: str = "Invalid value"

    # i18n keys
    I18N_OPTIONAL: str = "optional"
    I18N_REQUIRED: str = "required"
    I18N_REQUIRED_ERROR: str = "required_error"
    I18N_ADD: str = "add"
    I18N_REMOVE: str = "remove"
    I18N_UP: str = "up"
    I18N_DOWN: str = "down"

    # Select
    NULL_OPTION_VALUE: str = ""
    NULL_OPTION_TEXT: str = "-"
    ORDER_ASC: str = "asc"
    ORDER_DESC: str = "desc"

    # Keyboard hints and date modes
    NUMERIC_KEYBOARD: str = "numeric"
    DEFAULT_KEYBOARD: str = "default"
    DEFAULT_DATE_MODE: str = "date"


# Create a singleton instance for easy access throughout the codebase
CONSTANTS = FormConstants()

DEFAULT_I18N: Mapping[str, str] = MappingProxyType({
    CONSTANTS.I18N_OPTIONAL: " (optional)",
    CONSTANTS.I18N_REQUIRED: "",
    CONSTANTS.I18N_REQUIRED_ERROR: CONSTANTS.REQUIRED_MESSAGE,
    CONSTANTS.I18N_ADD: "Add",
    CONSTANTS.I18N_REMOVE: "✘",
    CONSTANTS.I18N_UP: "↑",
    CONSTANTS.I18N_DOWN: "↓",
})

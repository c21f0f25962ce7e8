"""
Leaf fields: Textbox, Checkbox, Select and DatePicker.
"""

import logging
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from formtree.core.transformers import Transformer, TransformerFactory
from formtree.errors import InvalidOptionsError
from formtree.forms.context import AutoMode
from formtree.forms.field_base import Field
from formtree.forms.form_constants import CONSTANTS
from formtree.types.descriptors import Integer, Number
from formtree.types.introspection import SelectOption, TypeIntrospector

logger = logging.getLogger(__name__)


class Textbox(Field):
    """Free-text input; numeric types get the number transformer and keyboard."""

    _field_id = "Textbox"
    template_kind = CONSTANTS.TEXTBOX_TEMPLATE

    def is_numeric(self) -> bool:
        return self.type_info.inner_type in (Number, Integer)

    def default_transformer(self) -> Transformer:
        return self.stock_transformer("number" if self.is_numeric() else "string")

    def kind_locals(self) -> Dict[str, Any]:
        keyboard = CONSTANTS.NUMERIC_KEYBOARD if self.is_numeric() else CONSTANTS.DEFAULT_KEYBOARD
        return {
            "placeholder": self.get_placeholder(),
            "keyboard_type": self.options.extras.get("keyboard_type", keyboard),
        }


class Checkbox(Field):
    """Boolean toggle."""

    _field_id = "Checkbox"
    template_kind = CONSTANTS.CHECKBOX_TEMPLATE

    def default_transformer(self) -> Transformer:
        return self.stock_transformer("boolean")

    def get_label(self) -> Optional[str]:
        # A checkbox has no placeholder to fall back on
        if self.options.label is None and self.auto == AutoMode.PLACEHOLDERS.value and self.ctx.label:
            return self.ctx.label + self._label_suffix()
        return super().get_label()


def _as_option(choice: Any) -> SelectOption:
    if isinstance(choice, SelectOption):
        return choice
    if isinstance(choice, Mapping):
        return SelectOption(value=choice["value"], text=str(choice["text"]))
    if isinstance(choice, (list, tuple)) and len(choice) == 2:
        return SelectOption(value=choice[0], text=str(choice[1]))
    raise InvalidOptionsError(f"Cannot read select choice {choice!r}")


class Select(Field):
    """
    Choice among the keys of an enums type (or ``options.choices``).

    A null option standing for "no value" is prepended unless
    ``options.null_option`` is False.
    """

    _field_id = "Select"
    template_kind = CONSTANTS.SELECT_TEMPLATE

    def get_null_option(self) -> Optional[SelectOption]:
        null_option = self.options.null_option
        if null_option is False:
            return None
        if null_option is None:
            return SelectOption(value=CONSTANTS.NULL_OPTION_VALUE, text=CONSTANTS.NULL_OPTION_TEXT)
        return _as_option(null_option)

    def default_transformer(self) -> Transformer:
        return TransformerFactory.select(self.get_null_option())

    def get_choices(self) -> List[SelectOption]:
        if self.options.choices is not None:
            choices = [_as_option(choice) for choice in self.options.choices]
        else:
            choices = TypeIntrospector.get_options_of_enum(self.type_)
        order = self.options.order
        if order in (CONSTANTS.ORDER_ASC, CONSTANTS.ORDER_DESC):
            choices.sort(key=lambda option: option.text, reverse=order == CONSTANTS.ORDER_DESC)
        null_option = self.get_null_option()
        if null_option is not None:
            choices.insert(0, null_option)
        return choices

    def is_value_empty(self) -> bool:
        null_option = self.get_null_option()
        if null_option is not None and self.value == null_option.value:
            return True
        return super().is_value_empty()

    def kind_locals(self) -> Dict[str, Any]:
        return {"choices": self.get_choices()}


class DatePicker(Field):
    """Date input; ``options.mode`` is handed to the picker."""

    _field_id = "DatePicker"
    template_kind = CONSTANTS.DATE_PICKER_TEMPLATE

    def default_transformer(self) -> Transformer:
        return self.stock_transformer("date")

    def kind_locals(self) -> Dict[str, Any]:
        return {"mode": self.options.mode or CONSTANTS.DEFAULT_DATE_MODE}

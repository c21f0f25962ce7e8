"""
Value transformers between stored values and edit buffers.

A Transformer is a ``format``/``parse`` pair: ``format`` turns a stored
value into what an editor shows, ``parse`` turns the edit buffer back into
a stored value. ``parse`` may raise ValueError for input it cannot read;
fields record that as a parse error.

Transformers are handed to fields through ``Ctx.transformers`` (see
``default_transformers``) so hosts can swap one per tree.
"""

import dataclasses
import datetime
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transformer:
    """A format/parse pair."""
    format: Callable[[Any], Any]
    parse: Callable[[Any], Any]


def to_null(value: Any) -> Any:
    """Map None and blank strings to None."""
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return None
    return value


def parse_number(value: Any) -> Any:
    """
    Parse a numeric edit buffer.

    Commas are read as decimal separators. Integer text yields an int.

    Raises:
        ValueError: If the text is not a number
    """
    value = to_null(value)
    if not isinstance(value, str):
        return value
    text = value.strip().replace(",", ".")
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"{value!r} is not a number") from None


def parse_date(value: Any) -> Optional[datetime.date]:
    """
    Parse an ISO date string (dates pass through).

    Raises:
        ValueError: If the string is not an ISO date
    """
    value = to_null(value)
    if value is None or isinstance(value, datetime.date):
        return value
    if isinstance(value, str):
        try:
            return datetime.date.fromisoformat(value.strip())
        except ValueError:
            raise ValueError(f"{value!r} is not a date (expected YYYY-MM-DD)") from None
    raise ValueError(f"Cannot read {value!r} as a date")


class TransformerFactory:
    """
    Builds the stock transformers.

    Consolidates the None handling every editor needs: a None stored value
    formats to the editor's neutral buffer.
    """

    @staticmethod
    def create_nil_aware(default: Any, format_fn: Optional[Callable[[Any], Any]] = None,
                         parse_fn: Optional[Callable[[Any], Any]] = None) -> Transformer:
        def _format(value):
            if value is None:
                return default
            return format_fn(value) if format_fn else value

        return Transformer(format=_format, parse=parse_fn or (lambda value: value))

    @staticmethod
    def identity() -> Transformer:
        return Transformer(format=lambda value: value, parse=lambda value: value)

    @staticmethod
    def string() -> Transformer:
        """Textbox: None shows as '', blank text parses to None."""
        return TransformerFactory.create_nil_aware("", str, to_null)

    @staticmethod
    def number() -> Transformer:
        """Textbox for numbers: European decimal commas accepted."""
        return TransformerFactory.create_nil_aware("", str, parse_number)

    @staticmethod
    def boolean() -> Transformer:
        """Checkbox: None shows as unchecked."""
        return TransformerFactory.create_nil_aware(False)

    @staticmethod
    def array() -> Transformer:
        """List: None shows as [], a scalar as a one-item list."""
        def _format(value):
            if value is None:
                return []
            if not isinstance(value, (list, tuple)):
                return [value]
            return list(value)

        return Transformer(format=_format, parse=lambda value: value)

    @staticmethod
    def struct() -> Transformer:
        """Struct: None shows as {}, dataclass instances as their field mapping."""
        def _format(value):
            if value is None:
                return {}
            if dataclasses.is_dataclass(value) and not isinstance(value, type):
                return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
            if isinstance(value, Mapping):
                return dict(value)
            logger.debug(f"Stored value {value!r} is not a mapping; showing empty struct")
            return {}

        return Transformer(format=_format, parse=lambda value: value)

    @staticmethod
    def date() -> Transformer:
        """DatePicker: ISO strings are read as dates; unreadable stored strings show as empty."""
        def _format(value):
            try:
                return parse_date(value)
            except ValueError:
                logger.debug(f"Stored value {value!r} is not a date; showing empty picker")
                return None

        return Transformer(format=_format, parse=parse_date)

    @staticmethod
    def select(null_option: Optional[Any] = None) -> Transformer:
        """
        Select: None shows as the null option's value, which parses back to None.

        Args:
            null_option: The SelectOption standing for "no value", if any
        """
        null_value = getattr(null_option, "value", None)

        def _format(value):
            if value is None:
                return null_value
            return str(value)

        def _parse(value):
            if null_option is not None and value == null_value:
                return None
            return value

        return Transformer(format=_format, parse=_parse)


def default_transformers() -> Dict[str, Transformer]:
    """The stock transformer table installed on a tree's Ctx."""
    return {
        "identity": TransformerFactory.identity(),
        "string": TransformerFactory.string(),
        "number": TransformerFactory.number(),
        "boolean": TransformerFactory.boolean(),
        "array": TransformerFactory.array(),
        "struct": TransformerFactory.struct(),
        "date": TransformerFactory.date(),
    }

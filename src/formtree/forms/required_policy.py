"""
Requiredness of a field.

Several sources can say whether a field is required: the type itself, the
field options, the validation context and the JSON schema a type was built
from. RequiredPolicy consults them in a fixed order; the first source that
decides wins, and a field no source decides for is optional.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Sequence, Union

from formtree.forms.context import FieldOptions, Path
from formtree.forms.form_constants import CONSTANTS
from formtree.protocols import FormConfig, get_form_config
from formtree.types.introspection import TypeInfo

logger = logging.getLogger(__name__)


class RequiredSource(Enum):
    """A source of requiredness, in the order names used by FormConfig.required_order."""
    TYPE_META = "type_meta"
    OPTIONS = "options"
    CONTEXT_LIST = "context_list"
    SCHEMA = "schema"
    OPTIONALITY = "optionality"


def _is_index(segment) -> bool:
    return isinstance(segment, int) or (isinstance(segment, str) and segment.isdigit())


def _from_type_meta(info: TypeInfo, options: FieldOptions, path: Path, context: Mapping) -> Optional[bool]:
    for type_ in (info.type, info.inner_type):
        if type_ is not None and type_.is_required is True:
            return True
    return None


def _from_options(info: TypeInfo, options: FieldOptions, path: Path, context: Mapping) -> Optional[bool]:
    if isinstance(options.required, bool):
        return options.required
    return None


def _from_context_list(info: TypeInfo, options: FieldOptions, path: Path, context: Mapping) -> Optional[bool]:
    required = context.get(CONSTANTS.CONTEXT_REQUIRED_KEY)
    if path and isinstance(required, (list, tuple, set, frozenset)) and path[-1] in required:
        return True
    return None


def _from_schema(info: TypeInfo, options: FieldOptions, path: Path, context: Mapping) -> Optional[bool]:
    schema = context.get(CONSTANTS.CONTEXT_SCHEMA_KEY)
    if not path or not isinstance(schema, Mapping):
        return None
    for segment in path[:-1]:
        if _is_index(segment):
            schema = schema.get(CONSTANTS.SCHEMA_ITEMS_KEY)
        else:
            schema = (schema.get(CONSTANTS.SCHEMA_PROPERTIES_KEY) or {}).get(segment)
        if not isinstance(schema, Mapping):
            return None
    required = schema.get(CONSTANTS.SCHEMA_REQUIRED_KEY)
    if isinstance(required, (list, tuple)) and path[-1] in required:
        return True
    return None


def _from_optionality(info: TypeInfo, options: FieldOptions, path: Path, context: Mapping) -> Optional[bool]:
    return not info.is_maybe


RequiredRule = Callable[[TypeInfo, FieldOptions, Path, Mapping], Optional[bool]]

_RULES: Dict[RequiredSource, RequiredRule] = {
    RequiredSource.TYPE_META: _from_type_meta,
    RequiredSource.OPTIONS: _from_options,
    RequiredSource.CONTEXT_LIST: _from_context_list,
    RequiredSource.SCHEMA: _from_schema,
    RequiredSource.OPTIONALITY: _from_optionality,
}

DEFAULT_ORDER = (
    RequiredSource.TYPE_META,
    RequiredSource.OPTIONS,
    RequiredSource.CONTEXT_LIST,
    RequiredSource.SCHEMA,
    RequiredSource.OPTIONALITY,
)


class RequiredPolicy:
    """
    Ordered requiredness rules.

    Example:
        policy = RequiredPolicy(["options", "optionality"])
        policy.is_required(TypeIntrospector.classify(maybe(String)),
                           FieldOptions(required=True), ("name",), {})  # True
    """

    def __init__(self, order: Optional[Iterable[Union[RequiredSource, str]]] = None):
        self.order: Sequence[RequiredSource] = tuple(
            RequiredSource(source) for source in (DEFAULT_ORDER if order is None else order)
        )

    @classmethod
    def from_config(cls, config: Optional[FormConfig] = None) -> "RequiredPolicy":
        config = config or get_form_config()
        return cls(config.required_order)

    def is_required(self, info: TypeInfo, options: FieldOptions, path: Path,
                    context: Optional[Mapping] = None) -> bool:
        context = context or {}
        for source in self.order:
            decision = _RULES[source](info, options, path, context)
            if decision is not None:
                return decision
        return False

    def __repr__(self) -> str:
        return f"RequiredPolicy({[source.value for source in self.order]})"

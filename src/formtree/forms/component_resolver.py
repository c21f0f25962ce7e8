"""
Selection of the Field class that edits a type.
"""

import importlib
import logging
from typing import Mapping, Optional, Type

from formtree.errors import UnsupportedTypeError
from formtree.forms.component_registry import get_field_class
from formtree.forms.context import FieldOptions
from formtree.types.descriptors import Boolean, Date, TypeDescriptor, TypeKind

logger = logging.getLogger(__name__)

# Modules whose import registers the built-in fields
_BUILTIN_FIELD_MODULES = (
    "formtree.forms.fields",
    "formtree.forms.struct_field",
    "formtree.forms.list_field",
)

_NAME_BY_KIND = {
    TypeKind.STRUCT: "Struct",
    TypeKind.LIST: "List",
    TypeKind.ENUMS: "Select",
}

_WRAPPER_KINDS = (TypeKind.MAYBE, TypeKind.SUBTYPE, TypeKind.REFINEMENT)


def _ensure_builtin_fields() -> None:
    for module_name in _BUILTIN_FIELD_MODULES:
        importlib.import_module(module_name)


class ComponentResolver:
    """
    Maps (type, options) to a Field class.

    Precedence: ``options.factory``, then the type's own ``form_factory``,
    then the component named after the type's kind.
    """

    @staticmethod
    def get_component_name(type_: TypeDescriptor) -> str:
        """
        Canonical component name for ``type_``.

        Raises:
            UnsupportedTypeError: For union and dict types
        """
        if type_ is None:
            raise UnsupportedTypeError("Cannot pick a field for a missing type")
        kind = type_.kind
        if kind is TypeKind.IRREDUCIBLE:
            if type_ is Boolean:
                return "Checkbox"
            if type_ is Date:
                return "DatePicker"
            return "Textbox"
        if kind in _NAME_BY_KIND:
            return _NAME_BY_KIND[kind]
        if kind in _WRAPPER_KINDS:
            if type_.inner is type_:
                return "Textbox"
            return ComponentResolver.get_component_name(type_.inner)
        raise UnsupportedTypeError(f"Unsupported type {type_.name} ({kind.value})")

    @staticmethod
    def resolve(type_: TypeDescriptor, options: Optional[FieldOptions] = None,
                registry: Optional[Mapping[str, Type]] = None) -> Type:
        """
        Resolve the Field class for ``type_``.

        Args:
            type_: Concrete (union-dispatched) type of the node
            options: Resolved options of the node
            registry: Component mapping used instead of FIELD_IMPLEMENTATIONS

        Raises:
            UnsupportedTypeError: For union and dict types
            ComponentNotFoundError: If the component name is not registered
        """
        options = options or FieldOptions()
        if options.factory is not None:
            return options.factory
        if type_ is not None and type_.form_factory is not None:
            return type_.form_factory(options)

        name = ComponentResolver.get_component_name(type_)
        if registry is None:
            _ensure_builtin_fields()
        logger.debug(f"Resolved {type_.name} to component '{name}'")
        return get_field_class(name, registry)

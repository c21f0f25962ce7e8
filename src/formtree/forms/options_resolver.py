"""
Resolution of declared field options.

Options may be declared as FieldOptions, plain mappings, callables of the
field value, or (for union-typed fields) per-member lists and mappings.
OptionsResolver reduces any of these to one FieldOptions.
"""

import logging
from collections.abc import Mapping
from typing import Any, Optional

from formtree.errors import InvalidOptionsError
from formtree.forms.context import FieldOptions
from formtree.types.descriptors import TypeDescriptor
from formtree.types.introspection import TypeIntrospector

logger = logging.getLogger(__name__)


class OptionsResolver:
    """
    Reduces declared options to a FieldOptions for one value.

    Example:
        >>> Shape = union([Circle, Square])
        >>> OptionsResolver.resolve({"Square": {"label": "Side"}}, {"side": 2}, Shape).label
        'Side'
    """

    @staticmethod
    def resolve(declared: Any, value: Any, type_: Optional[TypeDescriptor]) -> FieldOptions:
        """
        Resolve ``declared`` against ``value`` and its declared ``type_``.

        Args:
            declared: None, FieldOptions, callable, list/tuple or mapping
            value: Current value of the field
            type_: Declared (not yet dispatched) type of the field

        Returns:
            Resolved options; options objects of other classes are returned
            unchanged and a per-member list on a type without a union resolves
            to the defaults

        Raises:
            InvalidOptionsError: If dispatch returns a type that is not a
                member of the union
        """
        if declared is None:
            return FieldOptions()
        if isinstance(declared, FieldOptions):
            return declared
        if callable(declared):
            return OptionsResolver.resolve(declared(value), value, type_)

        if isinstance(declared, (list, tuple)):
            if not TypeIntrospector.contains_union(type_):
                logger.warning(f"Ignoring per-member options list on {type_!r}, which has no union")
                return FieldOptions()
            union = TypeIntrospector.get_union(type_)
            member = union.dispatch(value) or union.types[0]
            index = next((i for i, candidate in enumerate(union.types) if candidate is member), None)
            if index is None:
                raise InvalidOptionsError(
                    f"Dispatch of {union.name} returned {member!r}, which is not one of its members"
                )
            entry = declared[index] if index < len(declared) else None
            logger.debug(f"Union options: {union.name} dispatched to member #{index} ({member.name})")
            return OptionsResolver.resolve(entry, value, member)

        if isinstance(declared, Mapping):
            if TypeIntrospector.contains_union(type_):
                union = TypeIntrospector.get_union(type_)
                member = union.dispatch(value) or union.types[0]
                if member.name in declared:
                    logger.debug(f"Union options: {union.name} dispatched to {member.name}")
                    return OptionsResolver.resolve(declared[member.name], value, member)
            return FieldOptions.from_mapping(declared)

        return declared

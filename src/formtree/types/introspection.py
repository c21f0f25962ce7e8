"""
Type introspection utilities.

Centralizes classification of type descriptors (TypeInfo) and union
dispatch so Field implementations never inspect descriptor internals
themselves.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from formtree.types.descriptors import (
    EnumsType, MaybeType, SubtypeType, TypeDescriptor, TypeKind, UnionType,
)

logger = logging.getLogger(__name__)

_PEELABLE = (TypeKind.MAYBE, TypeKind.SUBTYPE, TypeKind.REFINEMENT)


@dataclass(frozen=True)
class TypeInfo:
    """Derived, immutable classification of one type descriptor."""
    type: Optional[TypeDescriptor]
    kind: TypeKind
    inner_type: Optional[TypeDescriptor]
    is_maybe: bool = False
    is_subtype: bool = False
    is_enum: bool = False
    is_list: bool = False
    is_dict: bool = False
    is_union: bool = False
    is_refinement: bool = False
    is_primitive: bool = False
    is_object: bool = False
    get_validation_error_message: Optional[Callable] = None

    @property
    def is_predicated(self) -> bool:
        """True when the aggregate value is narrowed by a subtype/refinement predicate."""
        return self.is_subtype or self.is_refinement


@dataclass(frozen=True)
class SelectOption:
    """One entry of a select field's choice list."""
    value: Any
    text: str


class TypeIntrospector:
    """
    Static helpers for classifying types and resolving unions.

    Example:
        >>> info = TypeIntrospector.classify(maybe(String))
        >>> info.is_maybe, info.inner_type.name
        (True, 'String')
    """

    @staticmethod
    def classify(type_: Optional[TypeDescriptor]) -> TypeInfo:
        """
        Classify a type descriptor.

        Wrappers (maybe, subtype, refinement) are peeled to reach the core
        type, setting their flag on the way; the core type's tag sets the
        enum/list/dict/union flags.

        Args:
            type_: The descriptor, or None

        Returns:
            TypeInfo; for None an all-false irreducible classification
        """
        if type_ is None:
            return TypeInfo(type=None, kind=TypeKind.IRREDUCIBLE, inner_type=None)

        flags = {TypeKind.MAYBE: False, TypeKind.SUBTYPE: False, TypeKind.REFINEMENT: False}
        hook = None
        inner = type_
        while inner.kind in _PEELABLE:
            flags[inner.kind] = True
            hook = hook or inner.get_validation_error_message
            if inner.inner is inner:
                break
            inner = inner.inner
        hook = hook or inner.get_validation_error_message

        is_maybe = flags[TypeKind.MAYBE]
        is_subtype = flags[TypeKind.SUBTYPE]
        is_refinement = flags[TypeKind.REFINEMENT]
        is_enum = inner.kind is TypeKind.ENUMS
        is_list = inner.kind is TypeKind.LIST
        is_dict = inner.kind is TypeKind.DICT
        is_union = inner.kind is TypeKind.UNION

        return TypeInfo(
            type=type_,
            kind=type_.kind,
            inner_type=inner,
            is_maybe=is_maybe,
            is_subtype=is_subtype,
            is_enum=is_enum,
            is_list=is_list,
            is_dict=is_dict,
            is_union=is_union,
            is_refinement=is_refinement,
            is_primitive=not any((is_maybe, is_subtype, is_enum, is_list, is_dict,
                                  is_union, is_refinement)),
            is_object=is_subtype or is_dict,
            get_validation_error_message=hook,
        )

    @staticmethod
    def contains_union(type_: Optional[TypeDescriptor]) -> bool:
        """Check if a union sits at the top of ``type_`` (possibly under maybe/subtype)."""
        if type_ is None:
            return False
        if type_.kind is TypeKind.UNION:
            return True
        if type_.kind in _PEELABLE and type_.inner is not type_:
            return TypeIntrospector.contains_union(type_.inner)
        return False

    @staticmethod
    def get_union(type_: TypeDescriptor) -> UnionType:
        """
        Return the union under ``type_``.

        Raises:
            ValueError: If ``type_`` does not contain a union
        """
        if not TypeIntrospector.contains_union(type_):
            raise ValueError(f"Type {type_!r} does not contain a union")
        while type_.kind is not TypeKind.UNION:
            type_ = type_.inner
        return type_

    @staticmethod
    def get_type_from_union(type_: Optional[TypeDescriptor], value: Any) -> Optional[TypeDescriptor]:
        """
        Resolve the concrete type of ``value`` for a (possibly wrapped) union.

        Wrappers around the union are rebuilt around the concrete member, so
        ``maybe(union([A, B]))`` with a B value resolves to ``maybe(B)``. A
        value no member accepts (typically None for a fresh list item)
        resolves to the first member.

        Returns:
            The concrete type, or ``type_`` itself when it holds no union
        """
        if not TypeIntrospector.contains_union(type_):
            return type_

        if isinstance(type_, UnionType):
            member = type_.dispatch(value)
            if member is None:
                logger.debug(f"No union member of {type_.name} accepts {value!r}; using first member")
                return type_.types[0]
            return TypeIntrospector.get_type_from_union(member, value)

        concrete = TypeIntrospector.get_type_from_union(type_.inner, value)
        if isinstance(type_, MaybeType):
            return MaybeType(concrete, is_required=type_.is_required,
                             error_message=type_.get_validation_error_message)
        if isinstance(type_, SubtypeType):
            return type(type_)(concrete, type_.predicate, type_.name,
                               is_required=type_.is_required,
                               error_message=type_.get_validation_error_message)
        return type_

    @staticmethod
    def get_options_of_enum(type_: TypeDescriptor) -> List[SelectOption]:
        """Build select choices from an enums type (also under maybe/subtype)."""
        inner = TypeIntrospector.classify(type_).inner_type
        if not isinstance(inner, EnumsType):
            return []
        return [
            SelectOption(value=key, text=str(label))
            for key, label in inner.map.items()
            if label is not None
        ]

    @staticmethod
    def unwrap(type_: TypeDescriptor) -> TypeDescriptor:
        """Return the core type under maybe/subtype/refinement wrappers."""
        return TypeIntrospector.classify(type_).inner_type

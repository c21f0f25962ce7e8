"""
Declarative type algebra driving form composition.

Each kind of type node is an explicit class (a tagged union over TypeKind)
instead of a duck-typed object with a ``meta.kind`` string. Callers match on
``descriptor.kind`` or on the class; nothing probes attributes.

Example:
    Person = struct({
        "name": String,
        "age": maybe(Number),
        "tags": list_of(String),
    }, name="Person")

    Person.matches({"name": "Ada", "age": None, "tags": []})  # True
"""

import datetime
import logging
import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union as TypingUnion

logger = logging.getLogger(__name__)

# (value, path, context) -> message
ErrorMessageHook = Callable[[Any, Sequence, Mapping], Optional[str]]


class TypeKind(Enum):
    """Variant tag of a TypeDescriptor."""
    IRREDUCIBLE = "irreducible"
    STRUCT = "struct"
    LIST = "list"
    DICT = "dict"
    MAYBE = "maybe"
    SUBTYPE = "subtype"
    REFINEMENT = "refinement"
    ENUMS = "enums"
    UNION = "union"


class TypeDescriptor(ABC):
    """
    Base class for every type node.

    Attributes:
        name: Display name used in error messages and for union-keyed options
        is_required: Explicit requiredness; ``True`` overrides optionality rules
        get_validation_error_message: Optional hook producing a custom message
        form_factory: Optional hook ``(options) -> Field class`` so a type can
            pick its own editor
        original_schema: Optional JSON-Schema-shaped mapping the type was built from
    """

    kind: TypeKind

    def __init__(
        self,
        name: Optional[str] = None,
        *,
        is_required: Optional[bool] = None,
        error_message: Optional[ErrorMessageHook] = None,
        form_factory: Optional[Callable] = None,
        original_schema: Optional[Mapping] = None,
    ):
        self.name = name or self._default_name()
        self.is_required = is_required
        self.get_validation_error_message = error_message
        self.form_factory = form_factory
        self.original_schema = original_schema

    @abstractmethod
    def matches(self, value: Any) -> bool:
        """Return True if ``value`` is an instance of this type."""
        pass

    def _default_name(self) -> str:
        return self.kind.value

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class Irreducible(TypeDescriptor):
    """Primitive type checked by a plain predicate."""

    kind = TypeKind.IRREDUCIBLE

    def __init__(self, name: str, predicate: Callable[[Any], bool], **kwargs):
        super().__init__(name, **kwargs)
        self.predicate = predicate

    def matches(self, value: Any) -> bool:
        return bool(self.predicate(value))


class WrapperType(TypeDescriptor):
    """A type node that wraps exactly one inner type."""

    def __init__(self, inner: TypeDescriptor, name: Optional[str] = None, **kwargs):
        self.inner = inner
        super().__init__(name, **kwargs)


class MaybeType(WrapperType):
    """Optional wrapper: ``None`` or a value of the inner type."""

    kind = TypeKind.MAYBE

    def _default_name(self) -> str:
        return f"?{self.inner.name}"

    def matches(self, value: Any) -> bool:
        return value is None or self.inner.matches(value)


class SubtypeType(WrapperType):
    """Inner type narrowed by a predicate."""

    kind = TypeKind.SUBTYPE

    def __init__(self, inner: TypeDescriptor, predicate: Callable[[Any], bool],
                 name: Optional[str] = None, **kwargs):
        self.predicate = predicate
        super().__init__(inner, name, **kwargs)

    def _default_name(self) -> str:
        return f"{{{self.inner.name} | {getattr(self.predicate, '__name__', 'predicate')}}}"

    def matches(self, value: Any) -> bool:
        return self.inner.matches(value) and bool(self.predicate(value))


class RefinementType(SubtypeType):
    """A subtype tagged as a refinement (validated the same way)."""

    kind = TypeKind.REFINEMENT


class ListType(WrapperType):
    """Homogeneous list; ``inner`` is the item type."""

    kind = TypeKind.LIST

    def _default_name(self) -> str:
        return f"Array<{self.inner.name}>"

    def matches(self, value: Any) -> bool:
        return isinstance(value, (list, tuple)) and all(self.inner.matches(v) for v in value)


class DictType(TypeDescriptor):
    """Mapping with typed keys (``domain``) and values (``codomain``)."""

    kind = TypeKind.DICT

    def __init__(self, domain: TypeDescriptor, codomain: TypeDescriptor,
                 name: Optional[str] = None, **kwargs):
        self.domain = domain
        self.codomain = codomain
        super().__init__(name, **kwargs)

    @property
    def inner(self) -> TypeDescriptor:
        return self.codomain

    def _default_name(self) -> str:
        return f"{{[key: {self.domain.name}]: {self.codomain.name}}}"

    def matches(self, value: Any) -> bool:
        return isinstance(value, Mapping) and all(
            self.domain.matches(k) and self.codomain.matches(v) for k, v in value.items()
        )


class StructType(TypeDescriptor):
    """
    Fixed set of named properties.

    ``constructor``, when given, builds the aggregate output value from the
    validated property dict (e.g. a dataclass).
    """

    kind = TypeKind.STRUCT

    def __init__(self, props: Mapping[str, TypeDescriptor], name: Optional[str] = None,
                 constructor: Optional[Callable[..., Any]] = None, **kwargs):
        self.props: Dict[str, TypeDescriptor] = dict(props)
        self.constructor = constructor
        super().__init__(name, **kwargs)

    def _default_name(self) -> str:
        return "{" + ", ".join(f"{k}: {t.name}" for k, t in self.props.items()) + "}"

    def matches(self, value: Any) -> bool:
        if self.constructor is not None and isinstance(self.constructor, type) \
                and isinstance(value, self.constructor):
            return True
        return isinstance(value, Mapping) and all(
            prop_type.matches(value.get(prop)) for prop, prop_type in self.props.items()
        )


class EnumsType(TypeDescriptor):
    """Closed set of keys, each with a display label."""

    kind = TypeKind.ENUMS

    def __init__(self, map: Mapping[str, Any], name: Optional[str] = None, **kwargs):
        self.map: Dict[str, Any] = dict(map)
        super().__init__(name, **kwargs)

    def _default_name(self) -> str:
        return " | ".join(repr(k) for k in self.map)

    def matches(self, value: Any) -> bool:
        return isinstance(value, str) and value in self.map


class UnionType(TypeDescriptor):
    """
    One of several member types.

    ``dispatch`` maps a value to its concrete member. Without a custom
    dispatch function the first member whose ``matches`` accepts the value
    is used. Dispatch never relies on exceptions.
    """

    kind = TypeKind.UNION

    def __init__(self, types: Sequence[TypeDescriptor], name: Optional[str] = None,
                 dispatch: Optional[Callable[[Any], Optional[TypeDescriptor]]] = None, **kwargs):
        if not types:
            raise ValueError("union requires at least one member type")
        self.types = list(types)
        self._dispatch = dispatch
        super().__init__(name, **kwargs)

    def _default_name(self) -> str:
        return " | ".join(t.name for t in self.types)

    def dispatch(self, value: Any) -> Optional[TypeDescriptor]:
        """Return the concrete member for ``value`` or None when nothing matches."""
        if self._dispatch is not None:
            return self._dispatch(value)
        return next((t for t in self.types if t.matches(value)), None)

    def dispatch_index(self, value: Any) -> Optional[int]:
        """Return the position of the dispatched member among ``types``."""
        member = self.dispatch(value)
        if member is None:
            return None
        for index, candidate in enumerate(self.types):
            if candidate is member:
                return index
        return None

    def matches(self, value: Any) -> bool:
        member = self.dispatch(value)
        return member is not None and member.matches(value)


# ==================== Built-in irreducibles ====================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


String = Irreducible("String", lambda v: isinstance(v, str))
Number = Irreducible("Number", _is_number)
Integer = Irreducible("Integer", lambda v: _is_number(v) and float(v).is_integer())
Boolean = Irreducible("Boolean", lambda v: isinstance(v, bool))
Date = Irreducible("Date", lambda v: isinstance(v, datetime.date))
Anything = Irreducible("Any", lambda v: True)


# ==================== Constructors ====================

def irreducible(name: str, predicate: Callable[[Any], bool], **kwargs) -> Irreducible:
    return Irreducible(name, predicate, **kwargs)


def struct(props: Mapping[str, TypeDescriptor], name: Optional[str] = None, **kwargs) -> StructType:
    return StructType(props, name, **kwargs)


def list_of(item_type: TypeDescriptor, name: Optional[str] = None, **kwargs) -> ListType:
    return ListType(item_type, name, **kwargs)


def dict_of(domain: TypeDescriptor, codomain: TypeDescriptor,
            name: Optional[str] = None, **kwargs) -> DictType:
    return DictType(domain, codomain, name, **kwargs)


def maybe(inner: TypeDescriptor, name: Optional[str] = None, **kwargs) -> TypeDescriptor:
    """Wrap ``inner`` as optional. Maybe of maybe is the same type."""
    if isinstance(inner, MaybeType) and name is None and not kwargs:
        return inner
    return MaybeType(inner, name, **kwargs)


def subtype(inner: TypeDescriptor, predicate: Callable[[Any], bool],
            name: Optional[str] = None, **kwargs) -> SubtypeType:
    return SubtypeType(inner, predicate, name, **kwargs)


def refinement(inner: TypeDescriptor, predicate: Callable[[Any], bool],
               name: Optional[str] = None, **kwargs) -> RefinementType:
    return RefinementType(inner, predicate, name, **kwargs)


def enums(values: TypingUnion[Mapping[str, Any], Sequence[str]],
          name: Optional[str] = None, **kwargs) -> EnumsType:
    """Build an enums type from a key->label mapping or a sequence of keys."""
    if not isinstance(values, Mapping):
        values = {key: key for key in values}
    return EnumsType(values, name, **kwargs)


def enums_from_enum(enum_cls: type, name: Optional[str] = None, **kwargs) -> EnumsType:
    """Build an enums type from a Python Enum: member names are keys, values are labels."""
    return EnumsType({member.name: member.value for member in enum_cls},
                     name or enum_cls.__name__, **kwargs)


def union(types: Sequence[TypeDescriptor], name: Optional[str] = None,
          dispatch: Optional[Callable[[Any], Optional[TypeDescriptor]]] = None,
          **kwargs) -> UnionType:
    return UnionType(types, name, dispatch=dispatch, **kwargs)

"""
Type algebra, structural validation and type introspection.
"""

from .descriptors import (
    TypeKind,
    TypeDescriptor,
    Irreducible,
    WrapperType,
    MaybeType,
    SubtypeType,
    RefinementType,
    ListType,
    DictType,
    StructType,
    EnumsType,
    UnionType,
    String,
    Number,
    Integer,
    Boolean,
    Date,
    Anything,
    irreducible,
    struct,
    list_of,
    dict_of,
    maybe,
    subtype,
    refinement,
    enums,
    enums_from_enum,
    union,
)
from .validation import ValidationError, ValidationResult, ValidationUtils, validate
from .introspection import TypeInfo, SelectOption, TypeIntrospector

__all__ = [
    "TypeKind",
    "TypeDescriptor",
    "Irreducible",
    "WrapperType",
    "MaybeType",
    "SubtypeType",
    "RefinementType",
    "ListType",
    "DictType",
    "StructType",
    "EnumsType",
    "UnionType",
    "String",
    "Number",
    "Integer",
    "Boolean",
    "Date",
    "Anything",
    "irreducible",
    "struct",
    "list_of",
    "dict_of",
    "maybe",
    "subtype",
    "refinement",
    "enums",
    "enums_from_enum",
    "union",
    "ValidationError",
    "ValidationResult",
    "ValidationUtils",
    "validate",
    "TypeInfo",
    "SelectOption",
    "TypeIntrospector",
]

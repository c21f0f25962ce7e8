"""
Structural validation of values against type descriptors.

``validate(value, type_, path, context)`` walks the type algebra and returns a
ValidationResult; it never raises for invalid values. ValidationUtils bundles
the result/error constructors and emptiness checks shared by fields.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from formtree.types.descriptors import (
    DictType, EnumsType, ListType, MaybeType, StructType, SubtypeType,
    TypeDescriptor, TypeKind, UnionType,
)

logger = logging.getLogger(__name__)

PathSegment = Any  # str | int


@dataclass
class ValidationError:
    """One failed check, addressed by its path from the form root."""
    message: str
    path: List[PathSegment]
    actual: Any = None
    expected: Any = None


@dataclass
class ValidationResult:
    """Outcome of validating one node (and, for composites, its subtree)."""
    value: Any = None
    errors: List[ValidationError] = field(default_factory=list)

    def is_valid(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> Optional[ValidationError]:
        return self.errors[0] if self.errors else None


class ValidationUtils:
    """
    Shared helpers for building validation results.

    Consolidates the result/error construction and emptiness checks used by
    leaf fields, Struct and List.
    """

    REQUIRED_MESSAGE = "This field is required"
    SELECT_MESSAGE = "Please select a value"

    @staticmethod
    def create_validation_error(message: str, path: Sequence[PathSegment], actual: Any = None,
                                expected: Any = None) -> ValidationError:
        return ValidationError(message=message, path=list(path), actual=actual, expected=expected)

    @staticmethod
    def create_success_result(value: Any) -> ValidationResult:
        return ValidationResult(value=value, errors=[])

    @staticmethod
    def create_error_result(value: Any, message: str, path: Sequence[PathSegment] = (),
                            actual: Any = None, expected: Any = None) -> ValidationResult:
        """Failed result carrying a single error."""
        error = ValidationUtils.create_validation_error(
            message, path, value if actual is None else actual, expected or "valid value"
        )
        return ValidationResult(value=value, errors=[error])

    @staticmethod
    def is_empty_value(value: Any, kind: str = "any") -> bool:
        """
        Check if a value counts as empty for its expected shape.

        Args:
            value: The value to check
            kind: One of "string", "array", "object", "any"
        """
        if value is None:
            return True
        if kind == "string":
            return value == ""
        if kind == "array":
            return isinstance(value, (list, tuple)) and len(value) == 0
        if kind == "object":
            return isinstance(value, Mapping) and len(value) == 0
        if isinstance(value, str):
            return value.strip() == ""
        if isinstance(value, (list, tuple, Mapping)):
            return len(value) == 0
        return False

    @staticmethod
    def has_only_null_values(value: Any) -> bool:
        """True for a non-empty sequence whose items are all None or ''."""
        return isinstance(value, (list, tuple)) and len(value) > 0 and all(
            item is None or item == "" for item in value
        )

    @staticmethod
    def normalize_error_message(message: str) -> str:
        if "Invalid value None" in message and "expected one of" in message:
            return ValidationUtils.SELECT_MESSAGE
        return message


def _path_label(path: Sequence[PathSegment], type_: TypeDescriptor) -> str:
    if not path:
        return type_.name
    return "/" + "/".join(str(segment) for segment in path) + f": {type_.name}"


def _default_message(value: Any, path: Sequence[PathSegment], type_: TypeDescriptor) -> str:
    message = f"Invalid value {value!r} supplied to {_path_label(path, type_)}"
    if isinstance(type_, EnumsType):
        message += f" (expected one of {list(type_.map)})"
    return ValidationUtils.normalize_error_message(message)


def _fail(value: Any, type_: TypeDescriptor, path: List[PathSegment], context: Mapping,
          errors: List[ValidationError]) -> Any:
    message = None
    hook = type_.get_validation_error_message
    if hook is not None:
        message = hook(value, path, context)
    errors.append(ValidationError(
        message=message or _default_message(value, path, type_),
        path=list(path),
        actual=value,
        expected=type_,
    ))
    return value


def _validate_irreducible(value, type_, path, context, errors):
    if not type_.matches(value):
        return _fail(value, type_, path, context, errors)
    return value


def _validate_maybe(value, type_: MaybeType, path, context, errors):
    if value is None:
        return None
    return _validate(value, type_.inner, path, context, errors)


def _validate_subtype(value, type_: SubtypeType, path, context, errors):
    before = len(errors)
    result = _validate(value, type_.inner, path, context, errors)
    if len(errors) > before:
        return result
    if not type_.predicate(result):
        return _fail(value, type_, path, context, errors)
    return result


def _validate_struct(value, type_: StructType, path, context, errors):
    if type_.constructor is not None and isinstance(type_.constructor, type) \
            and isinstance(value, type_.constructor):
        return value
    if not isinstance(value, Mapping):
        return _fail(value, type_, path, context, errors)
    result: Dict[str, Any] = {}
    before = len(errors)
    for prop, prop_type in type_.props.items():
        result[prop] = _validate(value.get(prop), prop_type, path + [prop], context, errors)
    if len(errors) == before and type_.constructor is not None:
        try:
            return type_.constructor(**result)
        except (TypeError, ValueError) as exc:
            errors.append(ValidationError(str(exc) or _default_message(value, path, type_),
                                          list(path), value, type_))
    return result


def _validate_list(value, type_: ListType, path, context, errors):
    if not isinstance(value, (list, tuple)):
        return _fail(value, type_, path, context, errors)
    return [
        _validate(item, type_.inner, path + [index], context, errors)
        for index, item in enumerate(value)
    ]


def _validate_dict(value, type_: DictType, path, context, errors):
    if not isinstance(value, Mapping):
        return _fail(value, type_, path, context, errors)
    result = {}
    for key, item in value.items():
        _validate(key, type_.domain, path + [key], context, errors)
        result[key] = _validate(item, type_.codomain, path + [key], context, errors)
    return result


def _validate_enums(value, type_: EnumsType, path, context, errors):
    if not type_.matches(value):
        return _fail(value, type_, path, context, errors)
    return value


def _validate_union(value, type_: UnionType, path, context, errors):
    member = type_.dispatch(value)
    if member is None:
        return _fail(value, type_, path, context, errors)
    return _validate(value, member, path, context, errors)


_HANDLERS: Dict[TypeKind, Callable] = {
    TypeKind.IRREDUCIBLE: _validate_irreducible,
    TypeKind.MAYBE: _validate_maybe,
    TypeKind.SUBTYPE: _validate_subtype,
    TypeKind.REFINEMENT: _validate_subtype,
    TypeKind.STRUCT: _validate_struct,
    TypeKind.LIST: _validate_list,
    TypeKind.DICT: _validate_dict,
    TypeKind.ENUMS: _validate_enums,
    TypeKind.UNION: _validate_union,
}


def _validate(value, type_, path, context, errors):
    return _HANDLERS[type_.kind](value, type_, path, context, errors)


def validate(value: Any, type_: Optional[TypeDescriptor], path: Sequence[PathSegment] = (),
             context: Optional[Mapping] = None) -> ValidationResult:
    """
    Validate ``value`` against ``type_``.

    Args:
        value: The value to check
        type_: Type descriptor; ``None`` accepts anything
        path: Path of the value from the form root, prefixed onto error paths
        context: Arbitrary mapping handed to message hooks

    Returns:
        ValidationResult whose ``value`` is the validated (possibly
        constructed) value and whose ``errors`` list every failure
    """
    if type_ is None:
        return ValidationUtils.create_success_result(value)
    errors: List[ValidationError] = []
    result = _validate(value, type_, list(path), context or {}, errors)
    return ValidationResult(value=result, errors=errors)

"""
Struct: one child field per declared property.
"""

import functools
import logging
from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, Optional, Tuple

from formtree.core.text_utils import humanize
from formtree.core.transformers import Transformer
from formtree.errors import UnsupportedTypeError
from formtree.forms.component_resolver import ComponentResolver
from formtree.forms.composite import CompositeField
from formtree.forms.context import ChangeKind, Path
from formtree.forms.field_base import Field
from formtree.forms.form_constants import CONSTANTS
from formtree.forms.options_resolver import OptionsResolver
from formtree.types.descriptors import StructType, TypeDescriptor
from formtree.types.introspection import TypeIntrospector
from formtree.types.validation import ValidationResult, ValidationUtils, validate

logger = logging.getLogger(__name__)


class StructField(CompositeField):
    """
    Edits a struct type.

    Children follow ``options.order`` (unlisted properties appended) or the
    declaration order. The struct's ``value`` maps property names to the
    children's edit buffers.
    """

    _field_id = "Struct"
    template_kind = CONSTANTS.STRUCT_TEMPLATE

    def __init__(self, type_, value, options, ctx, on_change=None):
        self.children: Dict[str, Field] = {}
        super().__init__(type_, value, options, ctx, on_change)
        self._build_children()

    def default_transformer(self) -> Transformer:
        return self.stock_transformer("struct")

    @property
    def struct_type(self) -> StructType:
        inner = self.type_info.inner_type
        if not isinstance(inner, StructType):
            raise UnsupportedTypeError(f"Struct field needs a struct type, got {self.type_!r}")
        return inner

    def iter_children(self) -> Iterator[Tuple[str, Field]]:
        return iter(list(self.children.items()))

    def get_order(self) -> List[str]:
        props = self.struct_type.props
        order = self.options.order
        if not isinstance(order, (list, tuple)):
            return list(props)
        unknown = [name for name in order if name not in props]
        if unknown:
            logger.warning(f"Struct {self.struct_type.name}: ignoring unknown names in order: {unknown}")
        listed = [name for name in order if name in props]
        return listed + [name for name in props if name not in listed]

    # ==================== Children ====================

    def _child_context(self) -> Mapping:
        schema = self.type_.original_schema or self.struct_type.original_schema
        if isinstance(schema, Mapping) and isinstance(schema.get(CONSTANTS.SCHEMA_REQUIRED_KEY), (list, tuple)):
            return {**self.ctx.context,
                    CONSTANTS.CONTEXT_REQUIRED_KEY: list(schema[CONSTANTS.SCHEMA_REQUIRED_KEY])}
        return self.ctx.context

    def _build_children(self) -> None:
        props = self.struct_type.props
        values = self.value if isinstance(self.value, Mapping) else {}
        context = self._child_context()
        self.children = {
            name: self._create_child(name, props[name], values.get(name), context)
            for name in self.get_order()
        }
        self.value = {**values, **{name: child.value for name, child in self.children.items()}}

    def _create_child(self, name: str, prop_type: TypeDescriptor, sub_value: Any, context: Mapping) -> Field:
        options = OptionsResolver.resolve(self.options.fields.get(name), sub_value, prop_type)
        concrete = TypeIntrospector.get_type_from_union(prop_type, sub_value)
        child_ctx = self.ctx.child(
            name,
            label=options.label or humanize(name),
            context=context,
            auto=self.auto,
            i18n=self.i18n,
            stylesheet=self.get_stylesheet(),
            config=self.get_config(),
        )
        component = ComponentResolver.resolve(concrete, options, self.ctx.registry)
        return component(concrete, sub_value, options, child_ctx,
                         on_change=functools.partial(self.on_field_change, name))

    def on_field_change(self, name: str, value: Any, path: Optional[Path] = None,
                        kind: Optional[ChangeKind] = None) -> None:
        """Merge a child's new buffer and report the change upward."""
        new_value = dict(self.value)
        new_value[name] = value
        self.value = new_value
        path = path or self.path + (name,)

        if kind == ChangeKind.VALIDATION_STATE_CHANGE:
            if not any(child.has_error() for child in self.children.values()):
                self._has_error = False
            self._forward_validation_state_change(path)
            return
        self._notify_parent(self.value, path, kind)

    # ==================== Value and validation ====================

    def get_value(self) -> Any:
        return self.transformer.parse({name: child.get_value() for name, child in self.children.items()})

    def pure_validate(self) -> ValidationResult:
        return self._validate_tree(pure=True)

    def validate(self) -> ValidationResult:
        return self._validate_tree(pure=False)

    def _validate_tree(self, pure: bool) -> ValidationResult:
        if self.type_info.is_maybe and self.is_value_nully():
            if not pure:
                self.remove_errors()
            return ValidationUtils.create_success_result(None)

        errors = []
        value: Dict[str, Any] = {}
        for name, child in self.children.items():
            result = child.pure_validate() if pure else child.validate()
            errors.extend(result.errors)
            value[name] = result.value

        own_errors = []
        if not errors and (self.type_info.is_predicated or self.struct_type.constructor is not None):
            aggregate = validate(value, self.type_, self.path, self.ctx.context)
            own_errors = aggregate.errors
            value = aggregate.value
            errors.extend(own_errors)

        if not pure:
            self._has_error = bool(own_errors)
            self.error_message = own_errors[0].message if own_errors else None
            self.validation_attempted = True
        return ValidationResult(value=value, errors=errors)

    def kind_locals(self) -> Dict[str, Any]:
        return {
            "inputs": dict(self.children),
            "order": list(self.children),
        }

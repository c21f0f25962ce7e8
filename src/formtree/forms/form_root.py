"""
Top-level owner of a field tree.

FormRoot builds the root field for a type, owns what the whole tree shares
(uid generator, message queue, i18n table, required policy, transformer
table) and is the host's entry point for reading, validating and updating
the form.
"""

import dataclasses
import logging
from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Sequence, Type, Union

from formtree.core.message_queue import MessageQueue
from formtree.core.performance_monitor import timer
from formtree.core.transformers import Transformer, default_transformers
from formtree.core.uid import UIDGenerator
from formtree.forms.component_resolver import ComponentResolver
from formtree.forms.context import AutoMode, ChangeKind, Ctx, Path, PathSegment
from formtree.forms.field_base import Field
from formtree.forms.form_constants import CONSTANTS, DEFAULT_I18N
from formtree.forms.options_resolver import OptionsResolver
from formtree.forms.reconcile import FieldInput
from formtree.forms.required_policy import RequiredPolicy
from formtree.protocols import FormConfig, get_form_config
from formtree.types.descriptors import TypeDescriptor
from formtree.types.introspection import TypeIntrospector
from formtree.types.validation import ValidationResult

logger = logging.getLogger(__name__)

_UNSET = object()


class FormRoot:
    """
    A form: one type, its current value and the field tree editing it.

    Example:
        Person = struct({"name": String, "age": maybe(Number)})
        form = FormRoot(Person, {"name": "Ada"})
        form.get_component(["age"]).on_change("36")
        form.validate().is_valid()   # True
        form.get_value()             # {"name": "Ada", "age": 36}
    """

    def __init__(
        self,
        type_: TypeDescriptor,
        value: Any = None,
        options: Any = None,
        *,
        on_change: Optional[Callable[[Any, Path, Optional[ChangeKind]], None]] = None,
        templates: Optional[Mapping[str, Any]] = None,
        stylesheet: Optional[Mapping[str, Any]] = None,
        i18n: Optional[Mapping[str, str]] = None,
        config: Optional[Mapping[str, Any]] = None,
        context: Optional[Mapping[str, Any]] = None,
        auto: Optional[Union[AutoMode, str]] = None,
        registry: Optional[Mapping[str, Type[Field]]] = None,
        transformers: Optional[Mapping[str, Transformer]] = None,
        required_policy: Optional[RequiredPolicy] = None,
        message_queue: Optional[MessageQueue] = None,
        form_config: Optional[FormConfig] = None,
    ):
        self.form_config = form_config or get_form_config()
        self.type_ = type_
        self.value = value
        self.declared_options = options
        self._host_on_change = on_change

        self.uid_generator = UIDGenerator(self.form_config.uid_seed)
        self.message_queue = message_queue or MessageQueue()
        self.i18n: Dict[str, str] = {**DEFAULT_I18N, **self.form_config.i18n, **(i18n or {})}
        self.required_policy = required_policy or RequiredPolicy.from_config(self.form_config)

        auto = auto or self.form_config.default_auto
        self.ctx = Ctx(
            uid_generator=self.uid_generator,
            message_queue=self.message_queue,
            required_policy=self.required_policy,
            auto=AutoMode(auto).value,
            i18n=self.i18n,
            templates=dict(templates or {}),
            stylesheet=dict(stylesheet or {}),
            config=dict(config or {}),
            path=(),
            context=self._validation_context(type_, context),
            registry=registry,
            transformers={**default_transformers(), **(transformers or {})},
        )
        self.root = self._build_root(type_, value, options)

    @staticmethod
    def _validation_context(type_: TypeDescriptor, context: Optional[Mapping]) -> Dict[str, Any]:
        result = dict(context or {})
        schema = type_.original_schema if type_ is not None else None
        if isinstance(schema, Mapping):
            result.setdefault(CONSTANTS.CONTEXT_SCHEMA_KEY, schema)
            required = schema.get(CONSTANTS.SCHEMA_REQUIRED_KEY)
            if isinstance(required, (list, tuple)):
                result.setdefault(CONSTANTS.CONTEXT_REQUIRED_KEY, list(required))
        return result

    def _resolve(self, type_: TypeDescriptor, value: Any, options: Any):
        resolved_options = OptionsResolver.resolve(options, value, type_)
        concrete = TypeIntrospector.get_type_from_union(type_, value)
        component = ComponentResolver.resolve(concrete, resolved_options, self.ctx.registry)
        return component, concrete, resolved_options

    def _build_root(self, type_: TypeDescriptor, value: Any, options: Any) -> Field:
        component, concrete, resolved_options = self._resolve(type_, value, options)
        logger.debug(f"Building form root {component.__name__} for {concrete.name}")
        return component(concrete, value, resolved_options, self.ctx, on_change=self._on_root_change)

    def _on_root_change(self, value: Any, path: Path, kind: Optional[ChangeKind] = None) -> None:
        if self._host_on_change is not None:
            self._host_on_change(value, path, kind)

    # ==================== Host API ====================

    def get_value(self) -> Any:
        """Parsed value of the whole tree, valid or not."""
        return self.root.get_value()

    def validate(self) -> ValidationResult:
        """Validate the tree, showing errors on every field."""
        with timer("Validating form", type=self.type_.name, log_args=True):
            result = self.root.validate()
        self.root.force_error(not result.is_valid())
        return result

    def pure_validate(self) -> ValidationResult:
        """Validate without marking fields as validated."""
        with timer("Validating form (pure)", type=self.type_.name, log_args=True):
            return self.root.pure_validate()

    def get_component(self, path: Union[str, Sequence[PathSegment]]) -> Optional[Field]:
        """
        Field at ``path``.

        Args:
            path: Sequence of segments or a dotted string ("addresses.0.city")

        Returns:
            The field, or None if nothing lives at ``path``
        """
        if isinstance(path, str):
            path = [segment for segment in path.split(".") if segment]
        field = self.root
        for segment in path:
            field = field.get_child(segment)
            if field is None:
                return None
        return field

    def receive(self, value: Any = _UNSET, options: Any = _UNSET, type_: Any = _UNSET) -> None:
        """
        Apply new host input.

        Arguments left out keep their current value. The root field is
        rebuilt only when its component class changes.
        """
        type_ = self.type_ if type_ is _UNSET else type_
        value = self.value if value is _UNSET else value
        options = self.declared_options if options is _UNSET else options

        component, concrete, resolved_options = self._resolve(type_, value, options)
        if type_ is not self.type_:
            self.ctx = self._with_context(type_)
        self.type_, self.value, self.declared_options = type_, value, options

        if component is not type(self.root):
            logger.debug(f"Root component changed to {component.__name__}; rebuilding")
            self.root.dispose()
            self.root = component(concrete, value, resolved_options, self.ctx,
                                  on_change=self._on_root_change)
            return
        self.root.ctx = self.ctx
        self.root.receive(FieldInput(concrete, value, resolved_options))

    def _with_context(self, type_: TypeDescriptor) -> Ctx:
        context = {
            key: item for key, item in self.ctx.context.items()
            if key not in (CONSTANTS.CONTEXT_SCHEMA_KEY, CONSTANTS.CONTEXT_REQUIRED_KEY)
        }
        return dataclasses.replace(self.ctx, context=self._validation_context(type_, context))

    def process_pending_messages(self) -> int:
        """Deliver deferred notifications; returns how many were delivered."""
        return self.message_queue.drain()

    def get_locals(self):
        return self.root.get_locals()

    def dispose(self) -> None:
        self.root.dispose()
        self.message_queue.clear()

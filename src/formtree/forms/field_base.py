"""
Base class of every node in a field tree.

A Field owns the edit state of one node: the formatted edit buffer, whether
the user touched it, whether validation ran, the last parse error and the
persisted error flag. Error visibility is derived from that state:

    has_error = options.has_error is True
             or parse_error is not None
             or (is_required() and is_value_empty() and (touched or validation_attempted))
             or persisted _has_error

so a required field that starts empty shows no error until the user
interacts with it or validation runs.
"""

import logging
from abc import abstractmethod
from typing import Any, Callable, Dict, Optional

from formtree.core.transformers import Transformer, TransformerFactory
from formtree.forms.component_registry import FieldMeta
from formtree.forms.context import (
    AutoMode, ChangeKind, Ctx, FieldLocals, FieldOptions, Path, PathSegment,
)
from formtree.forms.form_constants import CONSTANTS
from formtree.forms.reconcile import FieldInput, TransitionKind, reconcile
from formtree.types.descriptors import TypeDescriptor
from formtree.types.introspection import TypeIntrospector
from formtree.types.validation import ValidationResult, ValidationUtils, validate

logger = logging.getLogger(__name__)

# (value, path, kind) -> None
OnChange = Callable[[Any, Path, Optional[ChangeKind]], None]


class Field(metaclass=FieldMeta):
    """
    One editable node.

    Subclasses set ``_field_id`` to auto-register as a component and
    ``template_kind`` to pick their template from ``Ctx.templates``.
    """

    template_kind: str = ""

    _TRANSITION_HANDLERS: Dict[TransitionKind, str] = {
        TransitionKind.RETYPE: "_apply_retype",
        TransitionKind.UPDATE_OPTIONS: "_apply_options",
        TransitionKind.CLEAR_FORCED_ERROR: "_apply_clear_forced_error",
        TransitionKind.REFORMAT_VALUE: "set_value",
    }

    def __init__(self, type_: Optional[TypeDescriptor], value: Any, options: Optional[FieldOptions],
                 ctx: Ctx, on_change: Optional[OnChange] = None):
        self.type_ = type_
        self.type_info = TypeIntrospector.classify(type_)
        self.options = options if options is not None else FieldOptions()
        self.ctx = ctx
        self._parent_on_change = on_change

        self.touched = False
        self.validation_attempted = False
        self.parse_error: Optional[str] = None
        self.error_message: Optional[str] = None
        self._has_error = False
        self.disposed = False

        self.transformer = self.get_transformer()
        self.value = self.transformer.format(value)
        self._input = FieldInput(type_, value, self.options)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {'/'.join(map(str, self.path)) or '(root)'}>"

    # ==================== Context ====================

    @property
    def path(self) -> Path:
        return self.ctx.path

    @property
    def i18n(self) -> Dict[str, str]:
        return {**self.ctx.i18n, **(self.options.i18n or {})}

    @property
    def auto(self) -> str:
        return self.options.auto or self.ctx.auto

    def get_config(self) -> Dict[str, Any]:
        return {**self.ctx.config, **(self.options.config or {})}

    def get_stylesheet(self):
        return self.options.stylesheet or self.ctx.stylesheet

    def get_template(self) -> Any:
        if self.options.template is not None:
            return self.options.template
        return self.ctx.templates.get(self.template_kind)

    # ==================== Value pipeline ====================

    def get_transformer(self) -> Transformer:
        return self.options.transformer or self.default_transformer()

    @abstractmethod
    def default_transformer(self) -> Transformer:
        """Transformer used when the options do not name one."""
        pass

    def stock_transformer(self, name: str) -> Transformer:
        """Transformer ``name`` from the tree's table, else the stock one."""
        transformer = self.ctx.transformers.get(name)
        if transformer is None:
            transformer = getattr(TransformerFactory, name)()
            logger.debug(f"No '{name}' transformer on ctx; using a fresh stock one")
        return transformer

    def get_value(self) -> Any:
        """Parsed value of the edit buffer; None when the buffer cannot be parsed."""
        try:
            return self.transformer.parse(self.value)
        except (TypeError, ValueError) as exc:
            logger.debug(f"Unparseable buffer {self.value!r} at {self.path}: {exc}")
            return None

    def set_value(self, value: Any) -> None:
        """Replace the edit buffer with the formatted ``value``."""
        self.value = self.transformer.format(value)
        self.parse_error = None

    def set_buffer(self, raw: Any) -> None:
        self.value = raw

    def is_value_empty(self) -> bool:
        return ValidationUtils.is_empty_value(self.value)

    def is_value_nully(self) -> bool:
        """True when the buffer parses to None; an unparseable buffer is not nully."""
        try:
            return self.transformer.parse(self.value) is None
        except (TypeError, ValueError):
            return False

    def is_required(self) -> bool:
        return self.ctx.required_policy.is_required(
            self.type_info, self.options, self.path, self.ctx.context
        )

    def required_message(self) -> str:
        return self.i18n.get(CONSTANTS.I18N_REQUIRED_ERROR, CONSTANTS.REQUIRED_MESSAGE)

    # ==================== Validation ====================

    def pure_validate(self) -> ValidationResult:
        """Validate the edit buffer without touching the persisted error flag."""
        try:
            parsed = self.transformer.parse(self.value)
        except (TypeError, ValueError) as exc:
            self.parse_error = str(exc) or CONSTANTS.INVALID_VALUE_MESSAGE
            return ValidationUtils.create_error_result(self.value, self.parse_error, self.path)
        self.parse_error = None

        if ValidationUtils.is_empty_value(parsed):
            if self.is_required():
                return ValidationUtils.create_error_result(parsed, self.required_message(), self.path)
            return ValidationUtils.create_success_result(None)
        return validate(parsed, self.type_, self.path, self.ctx.context)

    def validate(self) -> ValidationResult:
        result = self.pure_validate()
        self._apply_result(result)
        self.validation_attempted = True
        return result

    def _apply_result(self, result: ValidationResult) -> None:
        self._has_error = not result.is_valid()
        self.error_message = result.first_error.message if result.first_error else None

    def _refresh_error_state(self) -> None:
        self._apply_result(self.pure_validate())

    def has_error(self) -> bool:
        if self.options.has_error is True:
            return True
        if self.parse_error is not None:
            return True
        if self.is_required() and self.is_value_empty() and (self.touched or self.validation_attempted):
            return True
        return self._has_error

    def get_error(self) -> Optional[str]:
        """Message shown for the current error, or None when there is no error."""
        if not self.has_error():
            return None
        error = self.options.error
        if callable(error):
            return error(self.get_value())
        if isinstance(error, str):
            return error
        if self.type_info.get_validation_error_message is not None and self.parse_error is None:
            result = validate(self.get_value(), self.type_, self.path, self.ctx.context)
            if not result.is_valid():
                return result.first_error.message
        if self.parse_error is not None:
            return self.parse_error
        if self.error_message:
            return self.error_message
        if self.is_required() and self.is_value_empty():
            return self.required_message()
        return None

    def remove_errors(self) -> None:
        self._has_error = False
        self.parse_error = None
        self.error_message = None
        self.validation_attempted = False
        self.touched = False

    def force_error(self, has_error: bool) -> None:
        self._has_error = has_error

    def error_state(self) -> Dict[str, Any]:
        """Snapshot of the error-related state, restorable with ``restore_error_state``."""
        return {
            "has_error": self._has_error,
            "validation_attempted": self.validation_attempted,
            "parse_error": self.parse_error,
            "error_message": self.error_message,
        }

    def restore_error_state(self, state: Dict[str, Any]) -> None:
        self._has_error = state["has_error"]
        self.validation_attempted = state["validation_attempted"]
        self.parse_error = state["parse_error"]
        self.error_message = state["error_message"]

    # ==================== Interaction ====================

    def on_change(self, raw: Any) -> None:
        """Store a new edit buffer and report it to the parent."""
        self.value = raw
        self.touched = True
        if self.validation_attempted or self._has_error or self.parse_error is not None:
            self._refresh_error_state()
        self._notify_parent(self.value, self.path, None)

    def on_blur(self) -> None:
        self.touched = True
        self._refresh_error_state()

    def _notify_parent(self, value: Any, path: Path, kind: Optional[ChangeKind]) -> None:
        if self._parent_on_change is not None and not self.disposed:
            self._parent_on_change(value, path, kind)

    # ==================== Labels ====================

    def is_list_item(self) -> bool:
        if not self.path:
            return False
        last = self.path[-1]
        return isinstance(last, int) or (isinstance(last, str) and last.isdigit())

    def _label_suffix(self) -> str:
        key = CONSTANTS.I18N_REQUIRED if self.is_required() else CONSTANTS.I18N_OPTIONAL
        return self.i18n.get(key, "")

    def get_label(self) -> Optional[str]:
        if self.options.label is not None:
            if self.is_list_item():
                return self.options.label
            return self.options.label + self._label_suffix()
        if self.auto != AutoMode.LABELS.value or not self.ctx.label:
            return None
        return self.ctx.label + self._label_suffix()

    def get_placeholder(self) -> Optional[str]:
        if self.options.placeholder is not None:
            return self.options.placeholder
        if self.auto == AutoMode.PLACEHOLDERS.value and self.options.label is None and self.ctx.label:
            return self.ctx.label + self._label_suffix()
        return None

    # ==================== Tree ====================

    def get_child(self, segment: PathSegment) -> Optional["Field"]:
        return None

    def relocate(self, path: Path) -> None:
        self.ctx = self.ctx.with_path(path)

    def dispose(self) -> None:
        self.disposed = True

    # ==================== Host input ====================

    def receive(self, next_input: FieldInput) -> None:
        """Bring the field in line with new host input."""
        for transition in reconcile(self._input, next_input):
            logger.debug(f"{self!r}: applying {transition.kind.value}")
            getattr(self, self._TRANSITION_HANDLERS[transition.kind])(transition.payload)
        self._input = next_input

    def _apply_retype(self, type_: Optional[TypeDescriptor]) -> None:
        current = self.get_value()
        self.type_ = type_
        self.type_info = TypeIntrospector.classify(type_)
        self._rebuild(current)

    def _apply_options(self, options: FieldOptions) -> None:
        current = self.get_value()
        self.options = options
        self._rebuild(current)

    def _apply_clear_forced_error(self, _payload: Any = None) -> None:
        self._has_error = False

    def _rebuild(self, current: Any) -> None:
        transformer = self.get_transformer()
        if transformer is not self.transformer:
            self.transformer = transformer
            self.value = transformer.format(current)

    # ==================== Rendering ====================

    def get_locals(self) -> FieldLocals:
        """Props for the rendering host."""
        locals_ = FieldLocals(
            value=self.value,
            label=self.get_label(),
            help=self.options.help,
            error=self.get_error(),
            has_error=self.has_error(),
            on_change=self.on_change,
            on_blur=self.on_blur,
            stylesheet=self.get_stylesheet(),
            config=self.get_config(),
            hidden=self.options.hidden,
            path=self.path,
        )
        locals_.update(self.options.extras)
        locals_.update(self.kind_locals())
        return locals_

    def kind_locals(self) -> Dict[str, Any]:
        return {}

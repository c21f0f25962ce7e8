"""
List: one child field per item, keyed by a stable UID.

Items keep their UID (and so their field, with its edit state) when they
are reordered; only removed items lose their field. A validation pass that
turns the list from invalid to valid notifies the parent through the
tree's MessageQueue instead of synchronously, so the notification cannot
re-enter the change that caused it.
"""

import functools
import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from formtree.core.text_utils import move
from formtree.core.transformers import Transformer
from formtree.core.uid import UIDGenerator
from formtree.errors import UnsupportedTypeError
from formtree.forms.component_resolver import ComponentResolver
from formtree.forms.composite import CompositeField
from formtree.forms.context import ChangeKind, Path
from formtree.forms.field_base import Field
from formtree.forms.form_constants import CONSTANTS
from formtree.forms.options_resolver import OptionsResolver
from formtree.types.descriptors import ListType, TypeDescriptor
from formtree.types.introspection import TypeIntrospector
from formtree.types.validation import ValidationResult, ValidationUtils, validate

logger = logging.getLogger(__name__)


def to_same_length(value: Any, keys: Sequence[str], uid_generator: UIDGenerator) -> List[str]:
    """
    Resync item keys after the value changed from outside.

    Existing keys keep their positions; missing positions get fresh UIDs
    and surplus keys are dropped.
    """
    if not isinstance(value, (list, tuple)):
        return []
    if len(value) == len(keys):
        return list(keys)
    return [keys[index] if index < len(keys) else uid_generator.next() for index in range(len(value))]


class ListField(CompositeField):
    """
    Edits a list type.

    ``keys`` holds the item UIDs in display order, parallel to ``value``;
    ``children`` maps each UID to its item field.
    """

    _field_id = "List"
    template_kind = CONSTANTS.LIST_TEMPLATE

    def __init__(self, type_, value, options, ctx, on_change=None):
        self.children: Dict[str, Field] = {}
        self.keys: List[str] = []
        super().__init__(type_, value, options, ctx, on_change)
        self._build_children()

    def default_transformer(self) -> Transformer:
        return self.stock_transformer("array")

    @property
    def item_type(self) -> TypeDescriptor:
        inner = self.type_info.inner_type
        if not isinstance(inner, ListType):
            raise UnsupportedTypeError(f"List field needs a list type, got {self.type_!r}")
        return inner.inner

    def iter_children(self) -> Iterator[Tuple[str, Field]]:
        return iter([(uid, self.children[uid]) for uid in self.keys if uid in self.children])

    # ==================== Children ====================

    def _build_children(self) -> None:
        if not isinstance(self.value, list):
            self.value = list(self.value or [])
        self.keys = to_same_length(self.value, self.keys, self.ctx.uid_generator)
        self.children = {}
        self._sync_children()

    def _sync_children(self) -> None:
        """Create fields for new UIDs, move kept ones to their slot, dispose dropped ones."""
        children: Dict[str, Field] = {}
        for index, uid in enumerate(self.keys):
            child = self.children.get(uid)
            if child is None:
                child = self._create_item(uid, index, self.value[index])
                self.value[index] = child.value
            elif child.path != self.path + (index,):
                child.relocate(self.path + (index,))
            children[uid] = child
        for uid, child in self.children.items():
            if uid not in children:
                child.dispose()
        self.children = children

    def _create_item(self, uid: str, index: int, item_value: Any) -> Field:
        declared = self.item_type
        options = OptionsResolver.resolve(self.options.item, item_value, declared)
        if self.options.fields and not options.fields:
            options = options.replace(fields=self.options.fields)
        options = options.replace(has_error=None)
        concrete = TypeIntrospector.get_type_from_union(declared, item_value)
        item_ctx = self.ctx.child(
            index,
            label=None,
            auto=self.auto,
            i18n=self.i18n,
            stylesheet=self.get_stylesheet(),
            config=self.get_config(),
        )
        component = ComponentResolver.resolve(concrete, options, self.ctx.registry)
        return component(concrete, item_value, options, item_ctx,
                         on_change=functools.partial(self.on_item_change, uid))

    # ==================== Mutations ====================

    def emit_change(self, value: Sequence[Any], keys: Sequence[str], path: Path,
                    kind: Optional[ChangeKind]) -> None:
        """
        Adopt a new value/keys pair and report it.

        The list is revalidated so its own error flag follows the change,
        while every item keeps the error state it had before.
        """
        self.value = list(value)
        self.keys = list(keys)
        self._sync_children()
        self.touched = True
        self._notify_parent(self.value, path, kind)

        snapshots = {uid: child.error_state() for uid, child in self.iter_children()}
        self._validate_tree(pure=False, validate_items=False)
        for uid, state in snapshots.items():
            self.children[uid].restore_error_state(state)

        if kind == ChangeKind.ITEM_CHANGE:
            for uid, item_value in zip(self.keys, self.value):
                child = self.children[uid]
                if child.value is not item_value and child.value != item_value:
                    child.set_buffer(item_value)

    def on_item_change(self, uid: str, value: Any, path: Optional[Path] = None,
                       kind: Optional[ChangeKind] = None) -> None:
        if uid not in self.children:
            logger.debug(f"Ignoring change from removed item {uid}")
            return
        index = self.keys.index(uid)
        new_value = list(self.value)
        new_value[index] = value
        item_path = path or self.path + (index,)

        if kind == ChangeKind.VALIDATION_STATE_CHANGE:
            self.value = new_value
            self._forward_validation_state_change(item_path)
            return
        self.emit_change(new_value, self.keys, item_path, ChangeKind.ITEM_CHANGE)

    def add(self) -> None:
        value = self.value + [None]
        keys = self.keys + [self.ctx.uid_generator.next()]
        self.emit_change(value, keys, self.path + (len(value) - 1,), ChangeKind.ADD)

    def remove(self, index: int) -> None:
        value = list(self.value)
        keys = list(self.keys)
        del value[index]
        del keys[index]
        self.emit_change(value, keys, self.path + (index,), ChangeKind.REMOVE)

    def move_up(self, index: int) -> None:
        if index > 0:
            value = move(list(self.value), index, index - 1)
            keys = move(list(self.keys), index, index - 1)
            self.emit_change(value, keys, self.path + (index,), ChangeKind.MOVE_UP)

    def move_down(self, index: int) -> None:
        if index < len(self.value) - 1:
            value = move(list(self.value), index, index + 1)
            keys = move(list(self.keys), index, index + 1)
            self.emit_change(value, keys, self.path + (index,), ChangeKind.MOVE_DOWN)

    # ==================== Value and validation ====================

    def get_value(self) -> Any:
        return self.transformer.parse([child.get_value() for _, child in self.iter_children()])

    def pure_validate(self) -> ValidationResult:
        return self._validate_tree(pure=True)

    def validate(self) -> ValidationResult:
        return self._validate_tree(pure=False)

    def _validate_tree(self, pure: bool, validate_items: Optional[bool] = None) -> ValidationResult:
        """
        Validate the list and its items.

        ``validate_items`` picks ``validate()`` over ``pure_validate()`` for
        the items; it defaults to ``not pure``. Pure item passes never post
        messages from nested lists.
        """
        if validate_items is None:
            validate_items = not pure
        required = self.is_required()
        own_errors = []

        if self.is_value_nully():
            if not required:
                result = ValidationUtils.create_success_result(None)
            else:
                result = ValidationUtils.create_error_result([], self.required_message(), self.path)
                own_errors = result.errors
        else:
            errors = []
            value = []
            for _, child in self.iter_children():
                item_result = child.validate() if validate_items else child.pure_validate()
                errors.extend(item_result.errors)
                value.append(item_result.value)
            if not errors and self.type_info.is_predicated:
                own_errors = validate(value, self.type_, self.path, self.ctx.context).errors
                errors.extend(own_errors)
            result = ValidationResult(value=value, errors=errors)

        if not pure:
            self._apply_list_result(result, own_errors, required)
        return result

    def _apply_list_result(self, result: ValidationResult, own_errors: List, required: bool) -> None:
        was_error = self._has_error
        self._has_error = not result.is_valid() if required else bool(own_errors)
        self.error_message = own_errors[0].message if own_errors else None
        self.validation_attempted = True
        if was_error and not self._has_error:
            logger.debug(f"{self!r} became valid; queueing validationStateChange")
            self.ctx.message_queue.post(self._deliver_validation_state_change)

    def _deliver_validation_state_change(self) -> None:
        if self.disposed:
            return
        self._forward_validation_state_change(self.path)

    # ==================== Rendering ====================

    def kind_locals(self) -> Dict[str, Any]:
        i18n = self.i18n
        items = []
        for index, (uid, child) in enumerate(self.iter_children()):
            buttons = []
            if not self.options.disable_remove:
                buttons.append(self._button("remove", i18n.get(CONSTANTS.I18N_REMOVE),
                                            functools.partial(self.remove, index)))
            if not self.options.disable_order:
                buttons.append(self._button("moveUp", i18n.get(CONSTANTS.I18N_UP),
                                            functools.partial(self.move_up, index)))
                buttons.append(self._button("moveDown", i18n.get(CONSTANTS.I18N_DOWN),
                                            functools.partial(self.move_down, index)))
            items.append({"key": uid, "input": child, "buttons": buttons})

        return {
            "items": items,
            "add": self._button("add", i18n.get(CONSTANTS.I18N_ADD), self.add,
                                disabled=self.options.disable_add),
        }

    @staticmethod
    def _button(type_: str, label: Optional[str], click, disabled: bool = False) -> Dict[str, Any]:
        return {
            "type": type_,
            "label": label,
            "click": (lambda: None) if disabled else click,
            "disabled": disabled,
        }

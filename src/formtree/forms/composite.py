"""
Shared behavior of fields that own child fields (Struct and List).

A composite's ``value`` mirrors its children's edit buffers; its parsed
value is always read from the children.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict, Iterator, Optional, Tuple

from formtree.forms.context import ChangeKind, Path, PathSegment
from formtree.forms.field_base import Field

logger = logging.getLogger(__name__)


class CompositeField(Field):
    """Field whose value is assembled from child fields."""

    @abstractmethod
    def iter_children(self) -> Iterator[Tuple[Any, Field]]:
        """Yield ``(key, child)`` pairs in display order."""
        pass

    @abstractmethod
    def _build_children(self) -> None:
        pass

    def _dispose_children(self) -> None:
        for _, child in self.iter_children():
            child.dispose()

    # ==================== State ====================

    def has_error(self) -> bool:
        return self.options.has_error is True or self._has_error

    def is_value_empty(self) -> bool:
        return self.is_value_nully()

    def is_value_nully(self) -> bool:
        return all(child.is_value_nully() for _, child in self.iter_children())

    def remove_errors(self) -> None:
        super().remove_errors()
        for _, child in self.iter_children():
            child.remove_errors()

    def error_state(self) -> Dict[str, Any]:
        state = super().error_state()
        state["children"] = {key: child.error_state() for key, child in self.iter_children()}
        return state

    def restore_error_state(self, state: Dict[str, Any]) -> None:
        super().restore_error_state(state)
        children = dict(self.iter_children())
        for key, child_state in state.get("children", {}).items():
            if key in children:
                children[key].restore_error_state(child_state)

    def set_value(self, value: Any) -> None:
        self._rebuild(value)
        self.parse_error = None

    def set_buffer(self, raw: Any) -> None:
        # The buffer is derived from the children
        pass

    def on_change(self, raw: Any) -> None:
        """Replace the whole value from the host and report it."""
        self.set_value(raw)
        self.touched = True
        self._notify_parent(self.value, self.path, None)

    def on_blur(self) -> None:
        self.touched = True

    # ==================== Tree ====================

    def get_child(self, segment: PathSegment) -> Optional[Field]:
        for _, child in self.iter_children():
            if child.path and str(child.path[-1]) == str(segment):
                return child
        return None

    def relocate(self, path: Path) -> None:
        super().relocate(path)
        for _, child in self.iter_children():
            child.relocate(tuple(path) + (child.path[-1],))

    def dispose(self) -> None:
        super().dispose()
        self._dispose_children()

    def _rebuild(self, current: Any) -> None:
        self.transformer = self.get_transformer()
        self._dispose_children()
        self.value = self.transformer.format(current)
        self._build_children()

    def _forward_validation_state_change(self, path: Path) -> None:
        self._notify_parent(self.value, path, ChangeKind.VALIDATION_STATE_CHANGE)

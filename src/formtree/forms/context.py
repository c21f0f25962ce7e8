"""
Value objects threaded through a field tree.

- FieldOptions: per-field presentation and behavior overrides
- Ctx: inherited construction context, derived top-down with ``child()``
- FieldLocals: the props a rendering host receives from ``get_locals()``
- ChangeKind: the kinds of change a field reports to its parent
"""

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import (
    TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, TypedDict, Union,
)

from formtree.core.message_queue import MessageQueue
from formtree.core.transformers import Transformer
from formtree.core.uid import UIDGenerator
from formtree.errors import InvalidOptionsError

if TYPE_CHECKING:
    from formtree.forms.required_policy import RequiredPolicy

PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


class AutoMode(str, Enum):
    """How a field derives its label when none is given."""
    LABELS = "labels"
    PLACEHOLDERS = "placeholders"
    NONE = "none"


class ChangeKind(str, Enum):
    """Kind of change reported through ``on_change(value, path, kind)``."""
    ITEM_CHANGE = "itemChange"
    ADD = "add"
    REMOVE = "remove"
    MOVE_UP = "moveUp"
    MOVE_DOWN = "moveDown"
    VALIDATION_STATE_CHANGE = "validationStateChange"


@dataclass(frozen=True)
class FieldOptions:
    """
    Per-field options.

    Common keys apply to every field; ``fields``/``order`` are read by
    Struct, ``item``/``disable_*`` by List, ``choices``/``null_option``/
    ``order`` by Select and ``mode`` by DatePicker. ``extras`` holds any
    other kind-specific props and is copied into the field's locals.
    """
    label: Optional[str] = None
    help: Optional[str] = None
    error: Union[str, Callable[[Any], str], None] = None
    has_error: Optional[bool] = None
    transformer: Optional[Transformer] = None
    template: Any = None
    factory: Optional[type] = None
    auto: Optional[str] = None
    i18n: Optional[Mapping[str, str]] = None
    stylesheet: Optional[Mapping[str, Any]] = None
    config: Optional[Mapping[str, Any]] = None
    hidden: bool = False
    placeholder: Optional[str] = None
    required: Optional[bool] = None
    # Struct
    fields: Mapping[str, Any] = field(default_factory=dict)
    order: Union[Sequence[str], str, None] = None
    # List
    item: Any = None
    disable_add: bool = False
    disable_remove: bool = False
    disable_order: bool = False
    # Select
    choices: Optional[Sequence[Any]] = None
    null_option: Any = None
    # DatePicker
    mode: Optional[str] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "FieldOptions":
        """
        Build options from a plain mapping.

        Raises:
            InvalidOptionsError: If the mapping has keys that are not options
                (put kind-specific props under ``extras``)
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(str(key) for key in mapping if key not in known)
        if unknown:
            raise InvalidOptionsError(
                f"Unknown option keys: {unknown}. Kind-specific props belong under 'extras'."
            )
        return cls(**mapping)

    def replace(self, **changes) -> "FieldOptions":
        return dataclasses.replace(self, **changes)


@dataclass(frozen=True)
class Ctx:
    """
    Construction context handed from parent to child.

    The uid generator, message queue, registry, transformer table and
    required policy are shared by the whole tree; ``path`` and ``label``
    change per node.
    """
    uid_generator: UIDGenerator
    message_queue: MessageQueue
    required_policy: "RequiredPolicy"
    auto: str = AutoMode.LABELS.value
    label: Optional[str] = None
    i18n: Mapping[str, str] = field(default_factory=dict)
    templates: Mapping[str, Any] = field(default_factory=dict)
    stylesheet: Mapping[str, Any] = field(default_factory=dict)
    config: Mapping[str, Any] = field(default_factory=dict)
    path: Path = ()
    context: Mapping[str, Any] = field(default_factory=dict)
    registry: Optional[Mapping[str, type]] = None
    transformers: Mapping[str, Transformer] = field(default_factory=dict)

    def child(self, segment: PathSegment, **overrides) -> "Ctx":
        """Derive the context of the child at ``segment``."""
        return dataclasses.replace(self, path=self.path + (segment,), **overrides)

    def with_path(self, path: Path) -> "Ctx":
        return dataclasses.replace(self, path=tuple(path))


class FieldLocals(TypedDict, total=False):
    """Props a rendering host receives for one field."""
    value: Any
    label: Optional[str]
    help: Optional[str]
    error: Optional[str]
    has_error: bool
    on_change: Callable[[Any], None]
    on_blur: Callable[[], None]
    stylesheet: Mapping[str, Any]
    config: Mapping[str, Any]
    hidden: bool
    path: Path
    # Textbox
    placeholder: Optional[str]
    keyboard_type: str
    # Select
    choices: List[Any]
    # DatePicker
    mode: str
    # Struct
    inputs: Dict[str, Any]
    order: List[str]
    # List
    items: List[Dict[str, Any]]
    add: Dict[str, Any]

"""
Reconciliation of new host input with an existing field.

When a host re-renders a field with new input, ``reconcile`` lists the
state transitions needed to bring the field in line; ``Field.receive``
applies them. The function is pure, so transitions can be inspected and
tested without a field.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from formtree.forms.context import FieldOptions
from formtree.types.descriptors import TypeDescriptor


@dataclass(frozen=True)
class FieldInput:
    """The inputs a host passes to a field."""
    type: Optional[TypeDescriptor]
    value: Any = None
    options: FieldOptions = field(default_factory=FieldOptions)


class TransitionKind(Enum):
    RETYPE = "retype"
    UPDATE_OPTIONS = "update_options"
    CLEAR_FORCED_ERROR = "clear_forced_error"
    REFORMAT_VALUE = "reformat_value"


@dataclass(frozen=True)
class StateTransition:
    kind: TransitionKind
    payload: Any = None


def _value_changed(prev: Any, next_: Any) -> bool:
    if prev is next_:
        return False
    try:
        return bool(prev != next_)
    except (TypeError, ValueError):
        # Values without a usable equality (e.g. arrays) compare by identity
        return True


def reconcile(prev: FieldInput, next_: FieldInput) -> List[StateTransition]:
    """
    Derive the transitions from ``prev`` to ``next_``.

    Transitions come in application order: retype, options, forced error,
    value.
    """
    transitions: List[StateTransition] = []
    if next_.type is not prev.type:
        transitions.append(StateTransition(TransitionKind.RETYPE, next_.type))
    if next_.options != prev.options:
        transitions.append(StateTransition(TransitionKind.UPDATE_OPTIONS, next_.options))
        if prev.options.has_error is True and next_.options.has_error is not True:
            transitions.append(StateTransition(TransitionKind.CLEAR_FORCED_ERROR))
    if _value_changed(prev.value, next_.value):
        transitions.append(StateTransition(TransitionKind.REFORMAT_VALUE, next_.value))
    return transitions

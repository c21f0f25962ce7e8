"""Tests for reconciling new host input."""

from formtree.forms.context import FieldOptions
from formtree.forms.reconcile import FieldInput, StateTransition, TransitionKind, reconcile
from formtree.types import Number, String


def kinds(transitions):
    return [transition.kind for transition in transitions]


def test_same_input_needs_nothing():
    options = FieldOptions(label="a")
    assert reconcile(FieldInput(String, "x", options), FieldInput(String, "x", options)) == []


def test_equal_options_are_not_a_change():
    assert reconcile(FieldInput(String, "x", FieldOptions(label="a")),
                     FieldInput(String, "x", FieldOptions(label="a"))) == []


def test_retype():
    transitions = reconcile(FieldInput(String, "x"), FieldInput(Number, "x"))
    assert transitions == [StateTransition(TransitionKind.RETYPE, Number)]


def test_value_change():
    transitions = reconcile(FieldInput(String, "x"), FieldInput(String, "y"))
    assert transitions == [StateTransition(TransitionKind.REFORMAT_VALUE, "y")]


def test_dropping_a_forced_error():
    transitions = reconcile(FieldInput(String, "x", FieldOptions(has_error=True)),
                            FieldInput(String, "x", FieldOptions()))
    assert kinds(transitions) == [TransitionKind.UPDATE_OPTIONS, TransitionKind.CLEAR_FORCED_ERROR]


def test_transition_order():
    """Retype, options, forced error and value come in that order."""
    transitions = reconcile(FieldInput(String, "1", FieldOptions(has_error=True)),
                            FieldInput(Number, 2, FieldOptions(label="n")))
    assert kinds(transitions) == [
        TransitionKind.RETYPE,
        TransitionKind.UPDATE_OPTIONS,
        TransitionKind.CLEAR_FORCED_ERROR,
        TransitionKind.REFORMAT_VALUE,
    ]


def test_values_without_equality_count_as_changed():
    class Opaque:
        def __eq__(self, other):
            raise TypeError("no comparison")

        def __ne__(self, other):
            raise TypeError("no comparison")

    first, second = Opaque(), Opaque()
    assert kinds(reconcile(FieldInput(String, first), FieldInput(String, second))) == [
        TransitionKind.REFORMAT_VALUE,
    ]
    assert reconcile(FieldInput(String, first), FieldInput(String, first)) == []

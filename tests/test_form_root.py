"""Tests for FormRoot, the host-facing entry point."""

import logging

import pytest

from formtree.errors import InvalidOptionsError
from formtree.forms.fields import Checkbox, Textbox
from formtree.forms.form_constants import CONSTANTS
from formtree.forms.form_root import FormRoot
from formtree.forms.list_field import ListField
from formtree.protocols import FormConfig, set_form_config
from formtree.types import Boolean, Number, String, list_of, maybe, struct

PERSON = struct({
    "name": String,
    "age": maybe(Number),
    "tags": maybe(list_of(String)),
}, name="Person")


def test_edit_validate_read():
    """Test the basic host flow: edit a field, validate, read the value."""
    form = FormRoot(PERSON, {"name": "Ada"})
    form.get_component(["age"]).on_change("36")

    result = form.validate()
    assert result.is_valid()
    assert result.value == {"name": "Ada", "age": 36, "tags": None}
    assert form.get_value() == {"name": "Ada", "age": 36, "tags": []}


def test_get_value_of_invalid_form():
    """get_value returns the parsed current state even when it does not validate."""
    form = FormRoot(PERSON, {"age": "abc"})
    assert form.get_value() == {"name": None, "age": None, "tags": []}


def test_validate_marks_root():
    form = FormRoot(PERSON, {})
    assert not form.root.has_error()

    assert not form.validate().is_valid()
    assert form.root.has_error()
    assert form.get_component(["name"]).has_error()

    form.get_component(["name"]).on_change("Ada")
    assert form.validate().is_valid()
    assert not form.root.has_error()


def test_pure_validate_leaves_state_alone():
    form = FormRoot(PERSON, {})
    result = form.pure_validate()

    assert not result.is_valid()
    assert not form.root.has_error()
    assert not form.get_component(["name"]).has_error()


def test_get_component_paths():
    form = FormRoot(PERSON, {"tags": ["a", "b"]})

    assert form.get_component([]) is form.root
    assert form.get_component("tags.1").value == "b"
    assert form.get_component(["tags", 1]) is form.get_component("tags.1")
    assert form.get_component("tags.5") is None
    assert form.get_component(["name", "first"]) is None


def test_host_on_change():
    calls = []
    form = FormRoot(String, "a", on_change=lambda *args: calls.append(args))
    form.root.on_change("b")
    assert calls == [("b", (), None)]


def test_receive_value():
    form = FormRoot(String, "a")
    root = form.root
    form.receive(value="b")

    assert form.root is root
    assert root.value == "b"


def test_receive_type_with_same_component():
    form = FormRoot(String, "a")
    root = form.root
    form.receive(type_=maybe(String))

    assert form.root is root
    assert root.type_info.is_maybe
    assert root.get_label() is None


def test_receive_type_with_other_component():
    """A type change that needs a different component rebuilds the root."""
    form = FormRoot(String, "a")
    old_root = form.root
    form.receive(type_=list_of(String), value=["a"])

    assert old_root.disposed
    assert isinstance(form.root, ListField)
    assert form.get_value() == ["a"]


def test_receive_options():
    form = FormRoot(String, "a")
    form.receive(options={"has_error": True})
    assert form.root.has_error()

    form.receive(options={})
    assert not form.root.has_error()


def test_receive_type_refreshes_schema_context():
    first = struct({"nick": maybe(String)}, original_schema={"required": ["nick"]})
    second = struct({"nick": maybe(String)})
    form = FormRoot(first, {})
    assert form.ctx.context["required"] == ["nick"]

    form.receive(type_=second)
    assert "required" not in form.ctx.context
    assert not form.get_component(["nick"]).is_required()


def test_invalid_options_are_rejected():
    with pytest.raises(InvalidOptionsError):
        FormRoot(String, "a", {"colour": "red"})


def test_context_is_shared_with_children():
    form = FormRoot(PERSON, {}, context={"required": ["age"]})
    assert form.get_component(["age"]).is_required()


def test_i18n_overrides():
    form = FormRoot(PERSON, {}, i18n={"optional": " (opt)"})
    assert form.get_component(["age"]).get_label() == "Age (opt)"


def test_templates_and_stylesheet():
    form = FormRoot(PERSON, {}, templates={CONSTANTS.TEXTBOX_TEMPLATE: "line-edit"},
                    stylesheet={"color": "red"})
    name = form.get_component(["name"])

    assert name.get_template() == "line-edit"
    assert name.get_stylesheet() == {"color": "red"}


def test_custom_registry():
    class ToggleField(Checkbox):
        pass

    form = FormRoot(Boolean, True, registry={"Checkbox": ToggleField})
    assert type(form.root) is ToggleField


def test_custom_transformer_table():
    from formtree.core import Transformer

    shouting = Transformer(format=lambda v: (v or "").upper(), parse=lambda v: v.lower() or None)
    form = FormRoot(String, "ada", transformers={"string": shouting})

    assert form.root.value == "ADA"
    assert form.get_value() == "ada"


def test_form_config_seed_and_auto():
    set_form_config(FormConfig(uid_seed="people", default_auto="placeholders"))
    form = FormRoot(PERSON, {"tags": ["a"]})

    assert form.get_component(["tags"]).keys == ["tfid-people-0"]
    assert form.get_component(["name"]).get_label() is None
    assert form.get_component(["name"]).get_placeholder() == "Name"


def test_explicit_form_config():
    form = FormRoot(PERSON, {}, form_config=FormConfig(required_order=["options"]))
    assert not form.get_component(["name"]).is_required()


def test_auto_argument_overrides_config():
    form = FormRoot(PERSON, {}, auto="none")
    assert form.get_component(["name"]).get_label() is None


def test_validate_is_timed(caplog):
    caplog.set_level(logging.DEBUG, logger="formtree.performance")
    FormRoot(PERSON, {"name": "Ada"}).validate()

    messages = [r.getMessage() for r in caplog.records if r.name == "formtree.performance"]
    assert len(messages) == 1
    assert messages[0].startswith("Validating form: ")
    assert "type=Person" in messages[0]


def test_dispose():
    form = FormRoot(list_of(String), [""])
    form.validate()
    form.get_component([0]).on_change("a")
    assert len(form.message_queue) == 1

    form.dispose()
    assert form.root.disposed
    assert len(form.message_queue) == 0


def test_leaf_root_locals():
    locals_ = FormRoot(Number, 3, {"label": "Count"}).get_locals()
    assert locals_["label"] == "Count"
    assert locals_["value"] == "3"
    assert type(FormRoot(Number).root) is Textbox

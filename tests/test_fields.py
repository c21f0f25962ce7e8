"""Tests for leaf fields: Textbox, Checkbox, Select and DatePicker."""

import datetime

import pytest

from formtree.forms.component_resolver import ComponentResolver
from formtree.forms.context import FieldOptions
from formtree.forms.fields import Checkbox, DatePicker, Select, Textbox
from formtree.forms.form_constants import CONSTANTS
from formtree.forms.reconcile import FieldInput
from formtree.types import (
    Boolean, Date, Integer, Number, SelectOption, String, enums, maybe, subtype,
)

COUNTRY = enums({"it": "Italy", "us": "United States", "fr": "France"}, name="Country")


def build(type_, value=None, options=None, ctx=None, on_change=None):
    component = ComponentResolver.resolve(type_, options)
    return component(type_, value, options, ctx, on_change=on_change)


# ==================== Error visibility ====================

def test_required_field_starts_without_error(make_ctx):
    field = Textbox(String, None, None, make_ctx())
    assert field.is_required()
    assert not field.has_error()
    assert field.get_error() is None


def test_required_field_errors_after_edit(make_ctx):
    """Clearing a required field shows the required error at once."""
    field = Textbox(String, "Ada", None, make_ctx())
    field.on_change("")
    assert field.has_error()
    assert field.get_error() == "This field is required"


def test_required_field_errors_after_blur(make_ctx):
    field = Textbox(String, None, None, make_ctx())
    field.on_blur()
    assert field.has_error()


def test_required_field_errors_after_validate(make_ctx):
    field = Textbox(String, None, None, make_ctx(path=("name",)))
    result = field.validate()

    assert field.has_error()
    assert len(result.errors) == 1
    assert result.first_error.path == ["name"]
    assert result.first_error.message == "This field is required"


def test_optional_field_empty_is_valid(make_ctx):
    field = Textbox(maybe(String), None, None, make_ctx())
    field.on_change("")
    result = field.validate()

    assert result.is_valid()
    assert result.value is None
    assert not field.has_error()


def test_required_error_message_follows_i18n(make_ctx):
    i18n = {"required_error": "Obbligatorio"}
    field = Textbox(String, None, FieldOptions(i18n=i18n), make_ctx())
    assert field.validate().first_error.message == "Obbligatorio"


@pytest.mark.parametrize("type_, value", [
    (String, "abc"),
    (Number, 3.5),
    (Integer, 4),
    (Boolean, True),
    (Boolean, False),
    (Date, datetime.date(2024, 1, 2)),
    (COUNTRY, "it"),
    (maybe(String), None),
    (maybe(Number), None),
])
def test_valid_value_validates_to_itself(make_ctx, type_, value):
    """A field built from a valid value validates to that value."""
    field = build(type_, value, ctx=make_ctx())
    result = field.validate()

    assert result.is_valid()
    assert result.value == value
    assert field.get_value() == value
    assert not field.has_error()


# ==================== Parse errors ====================

def test_parse_error_shows_after_blur(make_ctx):
    field = Textbox(Number, None, None, make_ctx())
    field.on_change("abc")
    assert not field.has_error()

    field.on_blur()
    assert field.has_error()
    assert field.get_error() == "'abc' is not a number"
    assert field.get_value() is None


def test_parse_error_clears_on_valid_edit(make_ctx):
    field = Textbox(Number, None, None, make_ctx())
    field.on_change("abc")
    assert not field.validate().is_valid()

    field.on_change("12")
    assert not field.has_error()
    assert field.parse_error is None
    assert field.get_value() == 12


def test_edit_after_validation_rechecks(make_ctx):
    field = Textbox(String, None, None, make_ctx())
    field.validate()
    assert field.has_error()

    field.on_change("Ada")
    assert not field.has_error()


# ==================== Error text ====================

def test_options_error_string(make_ctx):
    field = Textbox(String, None, FieldOptions(error="Tell us your name"), make_ctx())
    field.validate()
    assert field.get_error() == "Tell us your name"


def test_options_error_callable_receives_value(make_ctx):
    field = Textbox(Number, "-1", FieldOptions(error=lambda value: f"{value} is too small",
                                               has_error=True), make_ctx())
    assert field.get_error() == "-1 is too small"


def test_type_hook_message(make_ctx):
    def too_short(value, path, context):
        return "At least 3 characters"

    name = subtype(String, lambda s: len(s) >= 3, name="Name", error_message=too_short)
    field = Textbox(name, None, None, make_ctx())
    field.on_change("ab")
    field.on_blur()

    assert field.has_error()
    assert field.get_error() == "At least 3 characters"


def test_default_message_for_failed_predicate(make_ctx):
    positive = subtype(Number, lambda n: n > 0, name="Positive")
    field = Textbox(positive, -2, None, make_ctx())
    field.validate()
    assert field.get_error() == "Invalid value -2 supplied to Positive"


def test_forced_error_from_options(make_ctx):
    field = Textbox(String, "Ada", FieldOptions(has_error=True), make_ctx())
    assert field.has_error()


def test_force_and_remove_errors(make_ctx):
    field = Textbox(String, None, None, make_ctx())
    field.validate()
    field.force_error(True)
    assert field.has_error()

    field.remove_errors()
    assert not field.has_error()
    assert not field.touched
    assert not field.validation_attempted


# ==================== Change notification ====================

def test_on_change_notifies_parent(make_ctx):
    calls = []
    field = Textbox(String, None, None, make_ctx(path=("name",)),
                    on_change=lambda *args: calls.append(args))
    field.on_change("Ada")

    assert calls == [("Ada", ("name",), None)]
    assert field.touched


def test_disposed_field_does_not_notify(make_ctx):
    calls = []
    field = Textbox(String, None, None, make_ctx(), on_change=lambda *args: calls.append(args))
    field.dispose()
    field.on_change("Ada")
    assert calls == []


# ==================== Labels ====================

def test_label_from_context(make_ctx):
    assert Textbox(String, None, None, make_ctx(label="Name")).get_label() == "Name"


def test_optional_label_suffix(make_ctx):
    field = Textbox(maybe(String), None, None, make_ctx(label="Name"))
    assert field.get_label() == "Name (optional)"


def test_explicit_label_gets_suffix(make_ctx):
    field = Textbox(maybe(String), None, FieldOptions(label="Nickname"), make_ctx(label="Name"))
    assert field.get_label() == "Nickname (optional)"


def test_list_item_label_has_no_suffix(make_ctx):
    field = Textbox(maybe(String), None, FieldOptions(label="Tag"), make_ctx(path=("tags", 0)))
    assert field.is_list_item()
    assert field.get_label() == "Tag"


def test_auto_none_hides_label(make_ctx):
    field = Textbox(String, None, None, make_ctx(label="Name", auto="none"))
    assert field.get_label() is None
    assert field.get_placeholder() is None


def test_auto_placeholders(make_ctx):
    field = Textbox(maybe(String), None, None, make_ctx(label="Name", auto="placeholders"))
    assert field.get_label() is None
    assert field.get_placeholder() == "Name (optional)"


def test_explicit_placeholder(make_ctx):
    field = Textbox(String, None, FieldOptions(placeholder="e.g. Ada"), make_ctx())
    assert field.get_placeholder() == "e.g. Ada"


def test_checkbox_keeps_label_with_placeholders(make_ctx):
    field = Checkbox(Boolean, None, None, make_ctx(label="Subscribe", auto="placeholders"))
    assert field.get_label() == "Subscribe"


# ==================== Locals and templates ====================

def test_textbox_locals(make_ctx):
    field = Textbox(Number, 3, FieldOptions(help="Years", extras={"suffix": "y"}),
                    make_ctx(label="Age", path=("age",)))
    locals_ = field.get_locals()

    assert locals_["value"] == "3"
    assert locals_["label"] == "Age"
    assert locals_["help"] == "Years"
    assert locals_["has_error"] is False
    assert locals_["error"] is None
    assert locals_["keyboard_type"] == CONSTANTS.NUMERIC_KEYBOARD
    assert locals_["path"] == ("age",)
    assert locals_["suffix"] == "y"
    assert locals_["on_change"] == field.on_change


def test_text_keyboard(make_ctx):
    locals_ = Textbox(String, None, None, make_ctx()).get_locals()
    assert locals_["keyboard_type"] == CONSTANTS.DEFAULT_KEYBOARD


def test_template_lookup(make_ctx):
    ctx = make_ctx(templates={CONSTANTS.TEXTBOX_TEMPLATE: "line-edit"})
    assert Textbox(String, None, None, ctx).get_template() == "line-edit"
    assert Textbox(String, None, FieldOptions(template="area"), ctx).get_template() == "area"
    assert Checkbox(Boolean, None, None, ctx).get_template() is None


def test_config_and_i18n_merge(make_ctx):
    ctx = make_ctx(config={"a": 1, "b": 1})
    field = Textbox(String, None, FieldOptions(config={"b": 2}, i18n={"optional": " (opt)"}), ctx)

    assert field.get_config() == {"a": 1, "b": 2}
    assert field.i18n["optional"] == " (opt)"
    assert field.i18n["add"] == "Add"


def test_custom_transformer(make_ctx):
    from formtree.core import Transformer

    upper = Transformer(format=lambda v: (v or "").lower(), parse=lambda v: v.upper() or None)
    field = Textbox(String, "ADA", FieldOptions(transformer=upper), make_ctx())

    assert field.value == "ada"
    assert field.get_value() == "ADA"


# ==================== Checkbox ====================

def test_checkbox_none_is_unchecked(make_ctx):
    field = Checkbox(Boolean, None, None, make_ctx())
    assert field.value is False
    assert field.get_value() is False


def test_required_checkbox_accepts_false(make_ctx):
    field = Checkbox(Boolean, False, None, make_ctx())
    assert field.validate().is_valid()


# ==================== Select ====================

def test_select_choices(make_ctx):
    field = Select(COUNTRY, None, None, make_ctx())
    assert field.get_choices() == [
        SelectOption("", "-"),
        SelectOption("it", "Italy"),
        SelectOption("us", "United States"),
        SelectOption("fr", "France"),
    ]
    assert field.value == ""


def test_select_order(make_ctx):
    asc = Select(COUNTRY, None, FieldOptions(order=CONSTANTS.ORDER_ASC), make_ctx())
    desc = Select(COUNTRY, None, FieldOptions(order=CONSTANTS.ORDER_DESC), make_ctx())

    assert [o.text for o in asc.get_choices()] == ["-", "France", "Italy", "United States"]
    assert [o.text for o in desc.get_choices()] == ["-", "United States", "Italy", "France"]


def test_select_without_null_option(make_ctx):
    field = Select(COUNTRY, "it", FieldOptions(null_option=False), make_ctx())
    assert [o.value for o in field.get_choices()] == ["it", "us", "fr"]
    assert field.get_value() == "it"


def test_select_custom_null_option(make_ctx):
    field = Select(maybe(COUNTRY), None, FieldOptions(null_option=("none", "No country")), make_ctx())
    assert field.get_choices()[0] == SelectOption("none", "No country")
    assert field.value == "none"
    assert field.get_value() is None


def test_select_choices_from_options(make_ctx):
    choices = [("a", "Alpha"), {"value": "b", "text": "Beta"}, SelectOption("c", "Gamma")]
    field = Select(enums(["a", "b", "c"]), None, FieldOptions(choices=choices), make_ctx())
    assert [o.text for o in field.get_choices()] == ["-", "Alpha", "Beta", "Gamma"]


def test_required_select_null_value_is_empty(make_ctx):
    field = Select(COUNTRY, "it", None, make_ctx())
    field.on_change("")

    assert field.is_value_empty()
    assert field.has_error()
    assert field.get_value() is None


def test_optional_select(make_ctx):
    field = Select(maybe(COUNTRY), None, None, make_ctx())
    result = field.validate()
    assert result.is_valid()
    assert result.value is None


# ==================== DatePicker ====================

def test_date_picker_reads_iso_strings(make_ctx):
    field = DatePicker(Date, "2024-01-02", None, make_ctx())
    assert field.value == datetime.date(2024, 1, 2)
    assert field.get_value() == datetime.date(2024, 1, 2)


def test_date_picker_ignores_unreadable_stored_value(make_ctx):
    field = DatePicker(maybe(Date), "someday", None, make_ctx())
    assert field.value is None


def test_date_picker_mode(make_ctx):
    assert DatePicker(Date, None, None, make_ctx()).get_locals()["mode"] == "date"
    field = DatePicker(Date, None, FieldOptions(mode="datetime"), make_ctx())
    assert field.get_locals()["mode"] == "datetime"


# ==================== Host input ====================

def test_receive_new_value(make_ctx):
    field = Textbox(Number, 1, None, make_ctx())
    field.receive(FieldInput(Number, 2, FieldOptions()))
    assert field.value == "2"


def test_receive_keeps_buffer_for_same_value(make_ctx):
    field = Textbox(Number, 1, None, make_ctx())
    field.on_change("1,0")
    field.receive(FieldInput(Number, 1, FieldOptions()))
    assert field.value == "1,0"


def test_receive_forced_error_then_clear(make_ctx):
    field = Textbox(Number, 1, None, make_ctx())
    field.receive(FieldInput(Number, 1, FieldOptions(has_error=True)))
    assert field.has_error()

    field.force_error(True)
    field.receive(FieldInput(Number, 1, FieldOptions()))
    assert not field.has_error()


def test_receive_new_type_swaps_transformer(make_ctx):
    ctx = make_ctx()
    field = Textbox(Number, 2, None, ctx)
    field.receive(FieldInput(String, 2, FieldOptions()))

    assert field.transformer is ctx.transformers["string"]
    assert field.type_info.inner_type is String
    assert field.value == "2"

"""
Field tree: options, component resolution, fields and the form root.

FormRoot builds a tree of Field objects from a type; Struct and List own
their children, leaf fields own an edit buffer.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .context import AutoMode, ChangeKind, Ctx, FieldLocals, FieldOptions
    from .options_resolver import OptionsResolver
    from .component_registry import FieldMeta, FIELD_IMPLEMENTATIONS, get_field_class
    from .component_resolver import ComponentResolver
    from .required_policy import RequiredPolicy, RequiredSource
    from .reconcile import FieldInput, StateTransition, TransitionKind, reconcile
    from .field_base import Field
    from .fields import Checkbox, DatePicker, Select, Textbox
    from .struct_field import StructField
    from .list_field import ListField, to_same_length
    from .form_root import FormRoot
    from .form_constants import CONSTANTS, DEFAULT_I18N, FormConstants

_EXPORTS = {
    "AutoMode": ("formtree.forms.context", "AutoMode"),
    "ChangeKind": ("formtree.forms.context", "ChangeKind"),
    "Ctx": ("formtree.forms.context", "Ctx"),
    "FieldLocals": ("formtree.forms.context", "FieldLocals"),
    "FieldOptions": ("formtree.forms.context", "FieldOptions"),
    "OptionsResolver": ("formtree.forms.options_resolver", "OptionsResolver"),
    "FieldMeta": ("formtree.forms.component_registry", "FieldMeta"),
    "FIELD_IMPLEMENTATIONS": ("formtree.forms.component_registry", "FIELD_IMPLEMENTATIONS"),
    "get_field_class": ("formtree.forms.component_registry", "get_field_class"),
    "ComponentResolver": ("formtree.forms.component_resolver", "ComponentResolver"),
    "RequiredPolicy": ("formtree.forms.required_policy", "RequiredPolicy"),
    "RequiredSource": ("formtree.forms.required_policy", "RequiredSource"),
    "FieldInput": ("formtree.forms.reconcile", "FieldInput"),
    "StateTransition": ("formtree.forms.reconcile", "StateTransition"),
    "TransitionKind": ("formtree.forms.reconcile", "TransitionKind"),
    "reconcile": ("formtree.forms.reconcile", "reconcile"),
    "Field": ("formtree.forms.field_base", "Field"),
    "Textbox": ("formtree.forms.fields", "Textbox"),
    "Checkbox": ("formtree.forms.fields", "Checkbox"),
    "Select": ("formtree.forms.fields", "Select"),
    "DatePicker": ("formtree.forms.fields", "DatePicker"),
    "StructField": ("formtree.forms.struct_field", "StructField"),
    "ListField": ("formtree.forms.list_field", "ListField"),
    "to_same_length": ("formtree.forms.list_field", "to_same_length"),
    "FormRoot": ("formtree.forms.form_root", "FormRoot"),
    "FormConstants": ("formtree.forms.form_constants", "FormConstants"),
    "CONSTANTS": ("formtree.forms.form_constants", "CONSTANTS"),
    "DEFAULT_I18N": ("formtree.forms.form_constants", "DEFAULT_I18N"),
}


def __getattr__(name: str):
    if name in _EXPORTS:
        module_name, attr = _EXPORTS[name]
        module = importlib.import_module(module_name)
        value = getattr(module, attr)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = list(_EXPORTS.keys())

"""pytest configuration and fixtures for formtree tests."""

import os
from collections.abc import Mapping

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from formtree.core import MessageQueue, UIDGenerator, default_transformers
from formtree.forms.context import Ctx
from formtree.forms.form_constants import DEFAULT_I18N
from formtree.forms.required_policy import RequiredPolicy
from formtree.protocols import set_form_config
from formtree.types import Number, String, maybe, struct, union


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def default_form_config():
    """Every test starts from the default FormConfig."""
    set_form_config(None)
    yield
    set_form_config(None)


@pytest.fixture
def make_ctx():
    """Factory for a root Ctx with the stock tree-wide collaborators."""
    def _make(**overrides):
        values = dict(
            uid_generator=UIDGenerator("test"),
            message_queue=MessageQueue(),
            required_policy=RequiredPolicy(),
            i18n=dict(DEFAULT_I18N),
            transformers=default_transformers(),
        )
        values.update(overrides)
        return Ctx(**values)
    return _make


@pytest.fixture
def person_type():
    return struct({"name": String, "age": maybe(Number)}, name="Person")


@pytest.fixture
def shape_types():
    """(Shape union, Circle, Square) with a dispatch on the 'side' key."""
    circle = struct({"radius": Number}, name="Circle")
    square = struct({"side": Number}, name="Square")

    def dispatch(value):
        if isinstance(value, Mapping) and "side" in value:
            return square
        return circle

    return union([circle, square], name="Shape", dispatch=dispatch), circle, square

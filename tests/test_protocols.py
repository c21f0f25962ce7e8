"""Tests for the configuration hooks."""


def test_default_form_config():
    """Test the defaults returned when no config is set."""
    from formtree.protocols import get_form_config

    config = get_form_config()
    assert config.default_auto == "labels"
    assert config.uid_seed == "form"
    assert config.required_order == ["type_meta", "options", "context_list", "schema", "optionality"]
    assert config.performance_logger_name == "formtree.performance"


def test_set_form_config():
    from formtree.protocols import FormConfig, get_form_config, set_form_config

    config = FormConfig(uid_seed="app")
    set_form_config(config)
    assert get_form_config() is config

    set_form_config(None)
    assert get_form_config().uid_seed == "form"


def test_form_config_subclass():
    """Applications can subclass FormConfig to change defaults."""
    from dataclasses import dataclass

    from formtree.protocols import FormConfig, get_form_config, set_form_config

    @dataclass
    class PlaceholderConfig(FormConfig):
        default_auto: str = "placeholders"

    set_form_config(PlaceholderConfig())
    assert get_form_config().default_auto == "placeholders"

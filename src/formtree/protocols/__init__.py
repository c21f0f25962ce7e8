"""
Application-facing configuration hooks.
"""

from .form_config import FormConfig, set_form_config, get_form_config

__all__ = [
    "FormConfig",
    "set_form_config",
    "get_form_config",
]

"""Base configuration for form trees.

Provides hooks for applications to customize how field trees are built.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class FormConfig:
    """Base configuration for form tree behavior.

    Applications can subclass this to provide custom configuration.

    Attributes:
        default_auto: Label mode when the root options name none
            ("labels", "placeholders" or "none")
        uid_seed: Seed of the list item identifiers (``tfid-{seed}-{n}``)
        required_order: Order in which requiredness sources are consulted;
            names of ``RequiredSource`` members
        i18n: Overrides merged over the built-in English strings
        performance_logger_name: Logger receiving validation timings
        performance_threshold_ms: Only timings at or above this are logged
    """

    default_auto: str = "labels"
    uid_seed: str = "form"
    required_order: List[str] = field(default_factory=lambda: [
        "type_meta", "options", "context_list", "schema", "optionality",
    ])
    i18n: Dict[str, str] = field(default_factory=dict)
    performance_logger_name: str = "formtree.performance"
    performance_threshold_ms: float = 0.0


# Global config instance (set by application)
_form_config: Optional[FormConfig] = None


def set_form_config(config: Optional[FormConfig]) -> None:
    """Set the global form configuration.

    Args:
        config: FormConfig instance, or None to restore the defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormConfig:
    """Get the current form configuration.

    Returns:
        Current FormConfig or default if not set
    """
    if _form_config is None:
        return FormConfig()
    return _form_config

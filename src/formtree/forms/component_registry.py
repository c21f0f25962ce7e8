"""
Field registry with metaclass auto-registration.

Field classes auto-register when they are defined, eliminating manual
registration boilerplate.

Design:
- FieldMeta metaclass handles auto-registration
- FIELD_IMPLEMENTATIONS: Global registry of all field components by name
- Abstract classes and classes without ``_field_id`` are skipped
"""

from abc import ABCMeta
from typing import Dict, Mapping, Optional, Type
import logging

from formtree.errors import ComponentNotFoundError

logger = logging.getLogger(__name__)

# Global registry of field implementations
# Maps component name -> field class
FIELD_IMPLEMENTATIONS: Dict[str, Type] = {}


class FieldMeta(ABCMeta):
    """
    Metaclass for automatic field registration.

    1. Only registers concrete implementations (no abstract methods)
    2. Requires a ``_field_id`` attribute naming the component
    3. Auto-populates FIELD_IMPLEMENTATIONS

    Example:
        class ColorField(Textbox):
            _field_id = "Color"

    The field auto-registers in FIELD_IMPLEMENTATIONS["Color"] when the
    class is defined.
    """

    def __new__(cls, name, bases, attrs):
        new_class = super().__new__(cls, name, bases, attrs)

        abstract_methods = getattr(new_class, '__abstractmethods__', None)
        if abstract_methods:
            logger.debug(
                f"Skipping registration for {name} - abstract methods remaining: "
                f"{set(abstract_methods)}"
            )
            return new_class

        field_id = attrs.get('_field_id')
        if field_id is None:
            # Inherited ids are not re-registered; subclasses must opt in
            logger.debug(f"Skipping registration for {name} - no _field_id attribute")
            return new_class

        if field_id in FIELD_IMPLEMENTATIONS:
            existing = FIELD_IMPLEMENTATIONS[field_id]
            logger.warning(
                f"Field ID '{field_id}' already registered to {existing.__name__}. "
                f"Overwriting with {name}."
            )

        FIELD_IMPLEMENTATIONS[field_id] = new_class
        logger.debug(f"Auto-registered {name} as '{field_id}'")
        return new_class


def get_field_class(field_id: str, registry: Optional[Mapping[str, Type]] = None) -> Type:
    """
    Get field class by component name.

    Args:
        field_id: The component name (e.g., "Textbox")
        registry: Mapping consulted instead of the global registry

    Returns:
        The field class

    Raises:
        ComponentNotFoundError: If ``field_id`` is not registered
    """
    implementations = FIELD_IMPLEMENTATIONS if registry is None else registry
    if field_id not in implementations:
        raise ComponentNotFoundError(
            f"No field registered with ID '{field_id}'. "
            f"Available fields: {list(implementations.keys())}"
        )
    return implementations[field_id]

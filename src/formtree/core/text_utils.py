"""Small text and sequence helpers."""

import re
from typing import List, TypeVar

T = TypeVar("T")

_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z]+)")
_SEPARATORS = re.compile(r"[-\s]+")


def underscored(text: str) -> str:
    """Convert camelCase / dashed / spaced text to snake_case."""
    text = _CAMEL_BOUNDARY.sub(r"\1_\2", text.strip())
    return _SEPARATORS.sub("_", text).lower()


def humanize(text: str) -> str:
    """
    Turn a property name into a label.

    Example:
        >>> humanize("firstName")
        'First name'
        >>> humanize("owner_id")
        'Owner'
    """
    words = re.sub(r"_id$", "", underscored(text)).replace("_", " ")
    return words[:1].upper() + words[1:]


def move(items: List[T], from_index: int, to_index: int) -> List[T]:
    """Move one element in place and return the list."""
    element = items.pop(from_index)
    items.insert(to_index, element)
    return items

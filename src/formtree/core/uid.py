"""Monotonic identifiers for list items."""


class UIDGenerator:
    """
    Produces ``tfid-{seed}-{n}`` identifiers.

    One generator is shared by a whole field tree and never reset, so an
    identifier is unique for the tree's lifetime.
    """

    def __init__(self, seed: str = "form"):
        self._prefix = f"tfid-{seed}-"
        self._counter = 0

    def next(self) -> str:
        uid = f"{self._prefix}{self._counter}"
        self._counter += 1
        return uid

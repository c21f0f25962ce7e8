"""
formtree: type-driven form composition and validation.

Builds an editable field tree from a declarative type description, tracks
per-field touched/validated state, derives error visibility from it and
assembles edited values back into one value shaped like the type.

Architecture:
- Tier 1 (Types): type algebra, structural validation, type introspection
- Tier 2 (Core): transformers, UIDs, deferred message queue, timing
- Tier 3 (Protocols): application configuration hooks
- Tier 4 (Forms): options and component resolution, fields, FormRoot
- Tier 5 (Qt): PyQt6 event-loop integration

Rendering is left to the host: every field exposes ``get_locals()`` and
``get_template()`` for whatever widget layer draws it.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]

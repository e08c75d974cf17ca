"""
Emitters that turn classified record schemas into ast declarations.

Module structure:
- nodes.py: ast node constructors shared by the emitters
- builder.py: The builder class (slots, setters, finalizer)
- factory.py: The builder factory added to the record class
"""

from .builder import build_builder_schema, emit_builder
from .factory import emit_factory
from .nodes import RUNTIME_ALIAS, runtime_import

__all__ = [
    "build_builder_schema",
    "emit_builder",
    "emit_factory",
    "runtime_import",
    "RUNTIME_ALIAS",
]

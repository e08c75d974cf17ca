"""
Parsers for record declarations and field types.

Module structure:
- declaration.py: Schema extraction from class definitions
- types.py: Structural classification of field annotations
"""

from .declaration import extract_fields, extract_schema, is_enum_declaration
from .types import classify, classify_schema, optional_inner_type

__all__ = [
    # Declarations
    "extract_schema",
    "extract_fields",
    "is_enum_declaration",
    # Types
    "classify",
    "classify_schema",
    "optional_inner_type",
]

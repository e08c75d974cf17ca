"""
Pydantic models describing records and the builders generated for them.
"""

from recordbuilder.enums import FieldKind
from recordbuilder.models.base import SchemaModel
from recordbuilder.models.schema import (
    BuilderSchema,
    Classification,
    FieldSchema,
    RecordSchema,
    Slot,
)

__all__ = [
    "SchemaModel",
    "Classification",
    "FieldSchema",
    "RecordSchema",
    "BuilderSchema",
    "Slot",
    "FieldKind",
]

"""
Schema models for record declarations and their builders.

A RecordSchema is produced by the declaration parser, completed by the
type classifier and consumed by the emitters. BuilderSchema only exists
while the builder class is being emitted.
"""

import ast
from typing import Optional

from pydantic import Field, field_validator

from recordbuilder.enums import FieldKind
from recordbuilder.models.base import SchemaModel


class Classification(SchemaModel):
    """
    How a field is treated by the builder.

    Attributes:
        kind: REQUIRED or OPTIONAL
        effective_type: The field type with the optional wrapper removed
    """

    kind: FieldKind
    effective_type: ast.expr

    @property
    def is_optional(self) -> bool:
        return self.kind == FieldKind.OPTIONAL


class FieldSchema(SchemaModel):
    """
    A single named field of a record.

    Attributes:
        name: Field name
        declared_type: Annotation exactly as written in the declaration
        classification: Set by the classifier, None straight out of the parser
        lineno: Line of the field declaration
        col_offset: Column of the field declaration
    """

    name: str
    declared_type: ast.expr
    classification: Optional[Classification] = None
    lineno: int = 1
    col_offset: int = 0

    @property
    def type_source(self) -> str:
        """Declared type rendered back to source."""
        return ast.unparse(self.declared_type)

    def classified(self, classification: Classification) -> "FieldSchema":
        """Return a copy of this field carrying a classification."""
        return self.model_copy(update={"classification": classification})


class RecordSchema(SchemaModel):
    """
    A record declaration: its name and ordered named fields.

    Field order is the declaration order and is preserved in every
    generated artifact.
    """

    name: str
    fields: tuple[FieldSchema, ...] = Field(..., min_length=1)
    lineno: int = 1
    col_offset: int = 0

    @field_validator("fields")
    @classmethod
    def _unique_names(cls, fields: tuple[FieldSchema, ...]) -> tuple[FieldSchema, ...]:
        seen: set[str] = set()
        for f in fields:
            if f.name in seen:
                raise ValueError(f"duplicate field name: {f.name}")
            seen.add(f.name)
        return fields

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    @property
    def is_classified(self) -> bool:
        """Check if every field has been through the classifier."""
        return all(f.classification is not None for f in self.fields)

    @property
    def required_fields(self) -> list[FieldSchema]:
        return [
            f for f in self.fields
            if f.classification is not None and not f.classification.is_optional
        ]

    @property
    def optional_fields(self) -> list[FieldSchema]:
        return [
            f for f in self.fields
            if f.classification is not None and f.classification.is_optional
        ]


class Slot(SchemaModel):
    """One storage slot of a builder."""

    field_name: str
    attribute: str
    value_type: ast.expr
    kind: FieldKind


class BuilderSchema(SchemaModel):
    """
    Shape of the builder generated for one record.

    Attributes:
        builder_name: Record name plus the configured suffix
        record_name: Name of the record the builder finalizes into
        slots: One slot per record field, in declaration order
    """

    builder_name: str
    record_name: str
    slots: tuple[Slot, ...]

    @classmethod
    def from_record(cls, schema: RecordSchema, builder_name: str) -> "BuilderSchema":
        """Derive the builder shape from a classified record."""
        if not schema.is_classified:
            raise ValueError(f"record {schema.name} has unclassified fields")
        slots = tuple(
            Slot(
                field_name=f.name,
                attribute=f"_{f.name}",
                value_type=f.classification.effective_type,
                kind=f.classification.kind,
            )
            for f in schema.fields
        )
        return cls(builder_name=builder_name, record_name=schema.name, slots=slots)

    @property
    def attributes(self) -> list[str]:
        return [s.attribute for s in self.slots]

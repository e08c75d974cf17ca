"""
Parser for record declarations.

Turns a class definition into a RecordSchema: the class name plus its
annotated fields in declaration order. Anything that is not a plain class
with named fields is rejected with a ShapeError.
"""

import ast
import copy
import logging
from typing import Iterable

from pydantic import ValidationError

from recordbuilder.errors import ShapeError
from recordbuilder.models import FieldSchema, RecordSchema

logger = logging.getLogger(__name__)

# Bases that make a class a sum type rather than a record
ENUM_BASES = frozenset({"Enum", "IntEnum", "StrEnum", "Flag", "IntFlag"})

# Annotations that declare class-level markers instead of record fields
NON_FIELD_MARKERS = frozenset({"ClassVar", "KW_ONLY"})

# Members every generated builder defines for itself
BUILDER_MEMBERS = frozenset({"__init__", "__slots__"})


def _terminal_name(node: ast.expr) -> str | None:
    """Last identifier of ``Name`` / ``a.b.Name`` expressions."""
    if isinstance(node, ast.Name):
        return node.id
    if isinstance(node, ast.Attribute):
        return node.attr
    return None


def _describe(node: ast.AST) -> str:
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return f"function '{node.name}'"
    if isinstance(node, (ast.Assign, ast.AnnAssign)):
        return "assignment"
    return type(node).__name__


def is_enum_declaration(node: ast.ClassDef) -> bool:
    """Check if a class derives from one of the enum base classes."""
    return any(_terminal_name(base) in ENUM_BASES for base in node.bases)


def is_non_field_annotation(annotation: ast.expr) -> bool:
    """Check for ``ClassVar[...]`` and ``KW_ONLY`` style annotations."""
    target = annotation.value if isinstance(annotation, ast.Subscript) else annotation
    return _terminal_name(target) in NON_FIELD_MARKERS


def _check_field_name(name: str, target: ast.AST, reserved: frozenset) -> None:
    if name.startswith("__"):
        raise ShapeError(
            f"field '{name}': names starting with '__' are not supported", target
        )
    if name in reserved:
        raise ShapeError(
            f"field '{name}' collides with a generated member of the same name", target
        )


def _check_storage_names(record_name: str, targets: dict[str, ast.Name]) -> None:
    """Reject fields named like the builder slot of another field (``x`` and ``_x``)."""
    for name, target in targets.items():
        if name.startswith("_") and name[1:] in targets:
            raise ShapeError(
                f"field '{name}' in {record_name} collides with the builder storage "
                f"of field '{name[1:]}'",
                target,
            )


def extract_fields(node: ast.ClassDef, reserved: Iterable[str] = ()) -> list[FieldSchema]:
    """
    Collect the annotated fields of a class body.

    Args:
        node: Class definition
        reserved: Names the generated code uses on the record or builder

    Returns:
        Fields in declaration order (unclassified)
    """
    reserved = frozenset(reserved) | BUILDER_MEMBERS
    fields: list[FieldSchema] = []
    targets: dict[str, ast.Name] = {}

    for stmt in node.body:
        if not isinstance(stmt, ast.AnnAssign):
            continue
        if not isinstance(stmt.target, ast.Name):
            raise ShapeError(
                f"unsupported field target '{ast.unparse(stmt.target)}' in {node.name}",
                stmt.target,
            )
        if is_non_field_annotation(stmt.annotation):
            logger.debug(f"{node.name}.{stmt.target.id}: skipping class-level annotation")
            continue

        name = stmt.target.id
        _check_field_name(name, stmt.target, reserved)
        if name in targets:
            raise ShapeError(
                f"duplicate field '{name}' in {node.name} (first declared on line {targets[name].lineno})",
                stmt.target,
            )
        targets[name] = stmt.target

        fields.append(
            FieldSchema(
                name=name,
                declared_type=copy.deepcopy(stmt.annotation),
                lineno=stmt.lineno,
                col_offset=stmt.col_offset,
            )
        )

    _check_storage_names(node.name, targets)
    return fields


def extract_schema(node: ast.AST, reserved: Iterable[str] = ()) -> RecordSchema:
    """
    Build a RecordSchema from a declaration.

    Args:
        node: The declaration the builder was requested for
        reserved: Field names that would collide with generated members

    Returns:
        RecordSchema with unclassified fields

    Raises:
        ShapeError: If the declaration is not a class with named fields
    """
    if not isinstance(node, ast.ClassDef):
        raise ShapeError(
            f"builder can only be derived for class declarations, found {_describe(node)}",
            node,
        )
    if is_enum_declaration(node):
        raise ShapeError(f"builder cannot be derived for enum '{node.name}'", node)

    fields = extract_fields(node, reserved)
    if not fields:
        raise ShapeError(
            f"record '{node.name}' has no named fields; declare fields as 'name: type'",
            node,
        )

    try:
        schema = RecordSchema(
            name=node.name,
            fields=tuple(fields),
            lineno=node.lineno,
            col_offset=node.col_offset,
        )
    except ValidationError as e:
        raise ShapeError(f"invalid record '{node.name}': {e}", node) from e

    logger.debug(f"Extracted {schema.name} with fields {schema.field_names}")
    return schema

"""
Emitter for builder classes.

Produces the builder class for a classified record as an ast.ClassDef:
slot storage, one fluent setter per field and the finalizer. Every slot
starts out MISSING regardless of whether the field is required; only the
finalizer treats the two kinds differently.
"""

import ast
import copy
import logging

from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.enums import FieldKind
from recordbuilder.models import BuilderSchema, RecordSchema, Slot

from . import nodes

logger = logging.getLogger(__name__)

MISSING_LIST = "_missing"


def build_builder_schema(schema: RecordSchema, config: GeneratorConfig = DEFAULT_CONFIG) -> BuilderSchema:
    """Derive the builder shape for a classified record."""
    return BuilderSchema.from_record(schema, config.builder_name(schema.name))


def _slots_declaration(builder: BuilderSchema) -> ast.Assign:
    return ast.Assign(
        targets=[nodes.store("__slots__")],
        value=ast.Tuple(
            elts=[ast.Constant(value=attr) for attr in builder.attributes],
            ctx=ast.Load(),
        ),
    )


def _slot_annotation(slot: Slot) -> ast.Subscript:
    return ast.Subscript(
        value=nodes.runtime("Slot"),
        slice=copy.deepcopy(slot.value_type),
        ctx=ast.Load(),
    )


def _emit_init(builder: BuilderSchema) -> ast.FunctionDef:
    body: list[ast.stmt] = [
        ast.AnnAssign(
            target=nodes.self_attr(slot.attribute, ast.Store()),
            annotation=_slot_annotation(slot),
            value=nodes.runtime("MISSING"),
            simple=0,
        )
        for slot in builder.slots
    ]
    return nodes.function(
        "__init__",
        nodes.arguments("self"),
        body,
        returns=ast.Constant(value=None),
    )


def _emit_setter(builder: BuilderSchema, slot: Slot) -> ast.FunctionDef:
    body: list[ast.stmt] = [
        ast.Assign(
            targets=[nodes.self_attr(slot.attribute, ast.Store())],
            value=nodes.load("value"),
        ),
        ast.Return(value=nodes.load("self")),
    ]
    return nodes.function(
        slot.field_name,
        nodes.arguments("self", "value", annotations=[None, copy.deepcopy(slot.value_type)]),
        body,
        returns=ast.Constant(value=builder.builder_name),
    )


def _raise_missing(*names: ast.expr) -> ast.Raise:
    return ast.Raise(
        exc=ast.Call(func=nodes.runtime("MissingFieldError"), args=list(names), keywords=[]),
        cause=None,
    )


def _presence_checks_fail_fast(required: list[Slot]) -> list[ast.stmt]:
    return [
        ast.If(
            test=nodes.is_missing(nodes.self_attr(slot.attribute)),
            body=[_raise_missing(ast.Constant(value=slot.field_name))],
            orelse=[],
        )
        for slot in required
    ]


def _presence_checks_collecting(required: list[Slot]) -> list[ast.stmt]:
    checks: list[ast.stmt] = [
        ast.Assign(targets=[nodes.store(MISSING_LIST)], value=ast.List(elts=[], ctx=ast.Load()))
    ]
    for slot in required:
        append = ast.Call(
            func=ast.Attribute(value=nodes.load(MISSING_LIST), attr="append", ctx=ast.Load()),
            args=[ast.Constant(value=slot.field_name)],
            keywords=[],
        )
        checks.append(
            ast.If(
                test=nodes.is_missing(nodes.self_attr(slot.attribute)),
                body=[ast.Expr(value=append)],
                orelse=[],
            )
        )
    checks.append(
        ast.If(
            test=nodes.load(MISSING_LIST),
            body=[_raise_missing(ast.Starred(value=nodes.load(MISSING_LIST), ctx=ast.Load()))],
            orelse=[],
        )
    )
    return checks


def _slot_value(slot: Slot) -> ast.expr:
    """Value passed to the record constructor for one slot."""
    if slot.kind == FieldKind.REQUIRED:
        return nodes.self_attr(slot.attribute)
    # absent optional fields become None
    return ast.IfExp(
        test=nodes.is_missing(nodes.self_attr(slot.attribute)),
        body=ast.Constant(value=None),
        orelse=nodes.self_attr(slot.attribute),
    )


def _emit_finalizer(builder: BuilderSchema, config: GeneratorConfig) -> ast.FunctionDef:
    required = [s for s in builder.slots if s.kind == FieldKind.REQUIRED]
    if config.collect_missing and required:
        body = _presence_checks_collecting(required)
    else:
        body = _presence_checks_fail_fast(required)

    construct = ast.Call(
        func=nodes.load(builder.record_name),
        args=[],
        keywords=[ast.keyword(arg=s.field_name, value=_slot_value(s)) for s in builder.slots],
    )
    body.append(ast.Return(value=construct))

    return nodes.function(
        config.finalizer_name,
        nodes.arguments("self"),
        body,
        returns=ast.Constant(value=builder.record_name),
    )


def emit_builder(schema: RecordSchema, config: GeneratorConfig = DEFAULT_CONFIG) -> ast.ClassDef:
    """
    Generate the builder class for a classified record.

    Args:
        schema: Record schema with every field classified
        config: Naming and finalization policy

    Returns:
        The builder class definition, with locations filled in
    """
    builder = build_builder_schema(schema, config)

    body: list[ast.stmt] = [
        nodes.docstring(f"Incremental builder for {builder.record_name}."),
        _slots_declaration(builder),
        _emit_init(builder),
    ]
    body.extend(_emit_setter(builder, slot) for slot in builder.slots)
    body.append(_emit_finalizer(builder, config))

    class_node = nodes.class_def(builder.builder_name, body)
    logger.debug(
        f"Emitted {builder.builder_name} with {len(builder.slots)} setters "
        f"({len(schema.required_fields)} required)"
    )
    return ast.fix_missing_locations(class_node)

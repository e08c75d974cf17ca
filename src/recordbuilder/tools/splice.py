"""
Source transformation for modules with annotated records.

Expands every annotated class of a module and splices the generated
declarations back in: the factory goes into the record's class body, the
builder class directly after the record, and the runtime import once at
the top of the module.
"""

import ast
import hashlib
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from recordbuilder import __version__
from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.diagnostics import Diagnostic, from_syntax_error, translate
from recordbuilder.errors import GenerationError, ShapeError
from recordbuilder.workflow import BuilderExpander, ExpansionResult

from .detection import (
    AnnotatedClass,
    config_with_overrides,
    decorator_overrides,
    find_annotated_classes,
)

logger = logging.getLogger(__name__)

GENERATOR_VERSION = __version__
FORMAT_VERSION = "1"
DIGEST_PATTERN = re.compile(r"^# digest: ([0-9a-f]{64})$", re.MULTILINE)


@dataclass
class TransformResult:
    """
    Result of transforming one module.

    Attributes:
        source: Transformed module source, None if there were errors
        expansions: One result per annotated top-level class
        diagnostics: Errors that prevented the transformation
    """

    source: Optional[str] = None
    expansions: list[ExpansionResult] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    @property
    def record_names(self) -> list[str]:
        return [e.record_name for e in self.expansions if e.record_name]


def _is_docstring(stmt: ast.stmt) -> bool:
    return (
        isinstance(stmt, ast.Expr)
        and isinstance(stmt.value, ast.Constant)
        and isinstance(stmt.value.value, str)
    )


def _import_position(module: ast.Module) -> int:
    """Index after the module docstring and ``__future__`` imports."""
    body = module.body
    position = 1 if body and _is_docstring(body[0]) else 0
    while position < len(body):
        stmt = body[position]
        if not (isinstance(stmt, ast.ImportFrom) and stmt.module == "__future__"):
            break
        position += 1
    return position


def expand_annotated(
    annotated: AnnotatedClass,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> ExpansionResult:
    """
    Expand one annotated declaration found in a module.

    Nested classes are rejected, and literal decorator arguments are
    applied on top of the config before the declaration is expanded.
    """
    if not annotated.top_level:
        error = ShapeError(
            f"builder can only be derived for module-level classes, "
            f"'{annotated.name}' is nested",
            annotated.node,
        )
        return ExpansionResult(record_name=annotated.name, diagnostics=[translate(error)])
    try:
        overrides = decorator_overrides(annotated.decorator)
        class_config = config_with_overrides(config, overrides, annotated.decorator)
    except ShapeError as e:
        return ExpansionResult(record_name=annotated.name, diagnostics=[translate(e)])
    return BuilderExpander(class_config).expand(annotated.node)


def expand_module(module: ast.Module, config: GeneratorConfig = DEFAULT_CONFIG) -> TransformResult:
    """
    Expand the annotated classes of a parsed module in place.

    The module is only modified when every annotated class expands
    without errors.
    """
    result = TransformResult()
    annotated = find_annotated_classes(module, config.activation_name)

    for target in annotated:
        expansion = expand_annotated(target, config)
        result.expansions.append(expansion)
        result.diagnostics.extend(expansion.diagnostics)

    if result.has_errors or not annotated:
        return result

    by_node = {id(t.node): (t, e) for t, e in zip(annotated, result.expansions)}
    body: list[ast.stmt] = []
    for stmt in module.body:
        body.append(stmt)
        if id(stmt) not in by_node:
            continue
        target, expansion = by_node[id(stmt)]
        stmt.decorator_list = [d for d in stmt.decorator_list if d is not target.decorator]
        stmt.body.append(expansion.factory)
        body.append(expansion.builder)

    position = _import_position(module)
    body[position:position] = result.expansions[0].imports
    module.body = body
    ast.fix_missing_locations(module)
    return result


def transform_module(
    source: str,
    config: GeneratorConfig = DEFAULT_CONFIG,
    filename: str = "<string>",
) -> TransformResult:
    """
    Transform module source, expanding every annotated class.

    Modules without annotated classes are returned unchanged.

    Args:
        source: Module source code
        config: Generator settings
        filename: Used for syntax error reporting

    Returns:
        TransformResult with the new source or diagnostics
    """
    try:
        module = ast.parse(source, filename=filename)
    except SyntaxError as e:
        return TransformResult(diagnostics=[from_syntax_error(e)])

    result = expand_module(module, config)
    if result.has_errors:
        return result
    if not result.expansions:
        logger.info(f"No classes decorated with @{config.activation_name} in {filename}")
        result.source = source
        return result

    result.source = ast.unparse(module) + "\n"
    logger.info(f"Expanded {', '.join(result.record_names)} in {filename}")
    return result


def compute_digest(source_bytes: bytes, config: GeneratorConfig = DEFAULT_CONFIG) -> str:
    h = hashlib.sha256()
    h.update(GENERATOR_VERSION.encode("utf-8"))
    h.update(b"\x00")
    h.update(FORMAT_VERSION.encode("utf-8"))
    h.update(b"\x00")
    h.update(config.model_dump_json().encode("utf-8"))
    h.update(b"\x00")
    h.update(source_bytes)
    return h.hexdigest()


def _source_label(source_path: Path) -> str:
    try:
        return str(source_path.resolve().relative_to(Path.cwd().resolve()))
    except ValueError:
        return str(source_path.resolve())


def render_file(
    source_path: Path,
    source_text: str,
    config: GeneratorConfig = DEFAULT_CONFIG,
) -> str:
    """
    Render the generated module for a source file, with a digest header.

    Raises:
        GenerationError: If any annotated class could not be expanded
    """
    result = transform_module(source_text, config, filename=str(source_path))
    if result.has_errors:
        raise GenerationError(result.diagnostics)

    digest = compute_digest(source_text.encode("utf-8"), config)
    meta = (
        "# record-builder generated\n"
        f"# source: {_source_label(source_path)}\n"
        f"# generator_version: {GENERATOR_VERSION}\n"
        f"# format_version: {FORMAT_VERSION}\n"
        f"# digest: {digest}\n\n"
    )
    return meta + result.source


def extract_existing_digest(text: str) -> str | None:
    m = DIGEST_PATTERN.search(text)
    if not m:
        return None
    return m.group(1)

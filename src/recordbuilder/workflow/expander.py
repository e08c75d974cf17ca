"""
Builder expander for record declarations.

The orchestrator of the generation pipeline.
"""

import ast
import logging
from typing import Optional

from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.diagnostics import translate
from recordbuilder.emitters import emit_builder, emit_factory, runtime_import
from recordbuilder.errors import ShapeError
from recordbuilder.parsers import classify_schema, extract_schema

from .result import ExpansionResult

logger = logging.getLogger(__name__)


class BuilderExpander:
    """
    Expands one record declaration into its builder declarations.

    Workflow:
    1. Extract the record schema from the class definition
    2. Classify every field as required or optional
    3. Emit the builder class and the record's factory

    Shape errors from any step end up as diagnostics on the result; no
    partial output is produced.

    Example:
        expander = BuilderExpander()
        result = expander.expand(class_node)

        if result.is_complete:
            module.body.extend(result.declarations)
        else:
            for diagnostic in result.diagnostics:
                print(diagnostic.render("models.py"))
    """

    def __init__(self, config: Optional[GeneratorConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG

    @property
    def reserved_names(self) -> tuple[str, ...]:
        """Field names that would clash with generated members."""
        return (self.config.factory_name, self.config.finalizer_name)

    def expand(self, node: ast.AST) -> ExpansionResult:
        """
        Expand a declaration.

        Args:
            node: The declaration the builder was requested for

        Returns:
            ExpansionResult with generated declarations or diagnostics
        """
        result = ExpansionResult(record_name=getattr(node, "name", None))

        try:
            schema = extract_schema(node, reserved=self.reserved_names)
            schema = classify_schema(schema, self.config.wrapper_name)
        except ShapeError as e:
            result.diagnostics.append(translate(e))
            logger.info(f"Not expanding {result.record_name or 'declaration'}: {e}")
            return result

        result.schema = schema
        result.builder = emit_builder(schema, self.config)
        result.factory = emit_factory(schema, self.config)
        result.imports = [ast.fix_missing_locations(runtime_import())]

        logger.info(
            f"Expanded {schema.name} into {result.builder.name} "
            f"({len(schema.required_fields)} required, "
            f"{len(schema.optional_fields)} optional)"
        )
        return result


def expand_class(node: ast.AST, config: Optional[GeneratorConfig] = None) -> ExpansionResult:
    """
    Convenience function to expand a single declaration.

    Args:
        node: Class definition to expand
        config: Generator settings (defaults apply when omitted)

    Returns:
        ExpansionResult for the declaration
    """
    return BuilderExpander(config).expand(node)

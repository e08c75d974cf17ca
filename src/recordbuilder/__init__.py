"""
Record Builder - Fluent builders generated from record declarations.

This package reads class declarations with annotated fields and generates
a companion builder class with one setter per field and a finalizer that
checks every required field was set.
"""

__version__ = "0.1.0"

from recordbuilder.config import GeneratorConfig
from recordbuilder.decorator import derive_builder
from recordbuilder.diagnostics import Diagnostic
from recordbuilder.errors import DeriveError, GenerationError, ShapeError
from recordbuilder.models import BuilderSchema, Classification, FieldKind, FieldSchema, RecordSchema
from recordbuilder.parsers import classify, extract_schema
from recordbuilder.runtime import MISSING, MissingFieldError
from recordbuilder.tools import render_file, transform_module
from recordbuilder.workflow import BuilderExpander, ExpansionResult, expand_class

__all__ = [
    # Configuration
    "GeneratorConfig",
    # Hosts
    "derive_builder",
    "transform_module",
    "render_file",
    # Pipeline
    "BuilderExpander",
    "ExpansionResult",
    "expand_class",
    "extract_schema",
    "classify",
    # Schema
    "RecordSchema",
    "FieldSchema",
    "Classification",
    "BuilderSchema",
    "FieldKind",
    # Errors and diagnostics
    "Diagnostic",
    "ShapeError",
    "DeriveError",
    "GenerationError",
    # Runtime
    "MISSING",
    "MissingFieldError",
]

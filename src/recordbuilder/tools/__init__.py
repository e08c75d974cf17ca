"""
Tools for applying the generator to source modules.

Module structure:
- detection.py: Finding classes that carry the activation decorator
- splice.py: Module transformation, rendering and digests
"""

from .detection import (
    AnnotatedClass,
    config_with_overrides,
    decorator_overrides,
    find_annotated_classes,
    is_activation_decorator,
)
from .splice import (
    DIGEST_PATTERN,
    GENERATOR_VERSION,
    TransformResult,
    compute_digest,
    expand_annotated,
    expand_module,
    extract_existing_digest,
    render_file,
    transform_module,
)

__all__ = [
    # Detection
    "AnnotatedClass",
    "find_annotated_classes",
    "is_activation_decorator",
    "decorator_overrides",
    "config_with_overrides",
    # Transformation
    "TransformResult",
    "transform_module",
    "expand_module",
    "expand_annotated",
    "render_file",
    "compute_digest",
    "extract_existing_digest",
    "DIGEST_PATTERN",
    "GENERATOR_VERSION",
]

"""
Classifier for field type annotations.

Recognition of the optional wrapper is purely structural: the annotation
must be written as ``Optional[X]``, with the wrapper name unqualified and
exactly one type argument. ``typing.Optional[X]``, ``X | None``,
``Union[X, None]`` and aliases of the wrapper are all treated as required
types. Resolving those would need the module's imports and type aliases,
which the generator never sees.
"""

import ast
import copy
import logging

from recordbuilder.enums import FieldKind
from recordbuilder.models import Classification, RecordSchema

logger = logging.getLogger(__name__)

DEFAULT_WRAPPER = "Optional"


def optional_inner_type(annotation: ast.expr, wrapper_name: str = DEFAULT_WRAPPER):
    """
    Return the argument of a single-argument optional wrapper.

    Args:
        annotation: Field annotation as written
        wrapper_name: Unqualified name of the wrapper

    Returns:
        The wrapped type expression, or None if the annotation is not
        the wrapper applied to exactly one argument
    """
    if not isinstance(annotation, ast.Subscript):
        return None
    if not isinstance(annotation.value, ast.Name) or annotation.value.id != wrapper_name:
        return None

    argument = annotation.slice
    if isinstance(argument, (ast.Tuple, ast.Slice)):
        return None
    return argument


def classify(annotation: ast.expr, wrapper_name: str = DEFAULT_WRAPPER) -> Classification:
    """
    Classify a field annotation as required or optional.

    The inner type of an optional field is taken verbatim, without further
    unwrapping: ``Optional[Optional[int]]`` is optional with inner type
    ``Optional[int]``.
    """
    inner = optional_inner_type(annotation, wrapper_name)
    if inner is None:
        return Classification(kind=FieldKind.REQUIRED, effective_type=copy.deepcopy(annotation))
    return Classification(kind=FieldKind.OPTIONAL, effective_type=copy.deepcopy(inner))


def classify_schema(schema: RecordSchema, wrapper_name: str = DEFAULT_WRAPPER) -> RecordSchema:
    """Return a copy of a record schema with every field classified."""
    fields = []
    for f in schema.fields:
        classification = classify(f.declared_type, wrapper_name)
        logger.debug(
            f"{schema.name}.{f.name}: {classification.kind.value} "
            f"{ast.unparse(classification.effective_type)}"
        )
        fields.append(f.classified(classification))
    return schema.model_copy(update={"fields": tuple(fields)})

"""
Import-time host for the builder generator.

``derive_builder`` runs the same pipeline as the source tool, but on the
source of an already defined class, and attaches the generated builder
to the running program instead of writing it out.
"""

import __future__
import ast
import inspect
import logging
import sys
import textwrap
from typing import Any, Optional

from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.errors import DeriveError, ShapeError
from recordbuilder.tools.detection import config_with_overrides
from recordbuilder.workflow import BuilderExpander

logger = logging.getLogger(__name__)


def _class_node(cls: type) -> tuple[ast.ClassDef, int, int, str]:
    """Parse the source of a class; returns node, first line, indent and filename."""
    try:
        lines, first_line = inspect.getsourcelines(cls)
        filename = inspect.getsourcefile(cls) or "<unknown>"
    except (OSError, TypeError) as e:
        raise DeriveError(f"cannot derive builder for {cls.__qualname__}: source not available") from e

    indent = len(lines[0]) - len(lines[0].lstrip())
    module = ast.parse(textwrap.dedent("".join(lines)))
    for node in module.body:
        if isinstance(node, ast.ClassDef) and node.name == cls.__name__:
            return node, first_line, indent, filename
    raise DeriveError(f"cannot derive builder for {cls.__qualname__}: class definition not found")


def _namespace(cls: type) -> dict[str, Any]:
    """Globals for the generated code: the defining module plus the record itself."""
    module = sys.modules.get(cls.__module__)
    namespace = dict(vars(module)) if module is not None else {"__name__": cls.__module__}
    namespace[cls.__name__] = cls
    return namespace


def _derive(cls: type, config: GeneratorConfig) -> type:
    node, first_line, indent, filename = _class_node(cls)
    result = BuilderExpander(config).expand(node)

    if result.has_errors:
        diagnostic = result.diagnostics[0].shifted(first_line - 1, indent)
        raise DeriveError(diagnostic.render(filename), diagnostic)

    module = ast.Module(body=[*result.declarations, result.factory], type_ignores=[])
    ast.fix_missing_locations(module)
    code = compile(
        module,
        filename,
        "exec",
        flags=__future__.annotations.compiler_flag,
        dont_inherit=True,
    )
    namespace = _namespace(cls)
    exec(code, namespace)

    builder_cls = namespace[result.builder.name]
    builder_cls.__module__ = cls.__module__
    parent = cls.__qualname__.rpartition(".")[0]
    builder_cls.__qualname__ = f"{parent}.{builder_cls.__name__}" if parent else builder_cls.__name__

    setattr(cls, config.factory_name, namespace[config.factory_name])

    defining_module = sys.modules.get(cls.__module__)
    if defining_module is not None and not parent:
        setattr(defining_module, builder_cls.__name__, builder_cls)

    logger.debug(f"Derived {builder_cls.__qualname__} for {cls.__qualname__}")
    return cls


def derive_builder(cls: Optional[type] = None, /, *, config: Optional[GeneratorConfig] = None, **overrides: Any):
    """
    Class decorator that generates a builder for a record class.

    Usable bare or with keyword arguments::

        @derive_builder
        @dataclass
        class Person:
            name: str
            nickname: Optional[str] = None

        @derive_builder(collect_missing=True)
        @dataclass
        class Command:
            executable: str
            args: list[str]

    The builder class is published in the record's module as
    ``<Name>Builder`` and reachable from ``<Name>.builder()``.

    Args:
        cls: The record class (when used bare)
        config: Base generator settings
        **overrides: Individual GeneratorConfig fields to override

    Raises:
        DeriveError: If the class is not a supported record or its source
            cannot be read
    """
    base = config or DEFAULT_CONFIG
    try:
        effective = config_with_overrides(base, overrides)
    except ShapeError as e:
        raise DeriveError(str(e)) from e

    if cls is None:
        return lambda record: _derive(record, effective)
    return _derive(cls, effective)

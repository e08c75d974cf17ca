"""
Detection of declarations that request a builder.

A class requests a builder by carrying the activation decorator, written
as ``@derive_builder``, ``@module.derive_builder`` or with keyword
arguments, ``@derive_builder(collect_missing=True)``.
"""

import ast
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from recordbuilder.config import DEFAULT_CONFIG, GeneratorConfig
from recordbuilder.errors import ShapeError

DECORATED = (ast.ClassDef, ast.FunctionDef, ast.AsyncFunctionDef)


@dataclass
class AnnotatedClass:
    """
    A declaration found with the activation decorator.

    Functions carrying the decorator are collected too, so that the
    expander can report them instead of silently skipping them.

    Attributes:
        node: The decorated class (or function) definition
        decorator: The activation decorator expression
        top_level: Whether the class is declared directly in the module
    """

    node: ast.stmt
    decorator: ast.expr
    top_level: bool = True

    @property
    def name(self) -> str:
        return self.node.name


def is_activation_decorator(decorator: ast.expr, activation_name: str) -> bool:
    """Check whether a decorator expression is the activation decorator."""
    target = decorator.func if isinstance(decorator, ast.Call) else decorator
    if isinstance(target, ast.Name):
        return target.id == activation_name
    if isinstance(target, ast.Attribute):
        return target.attr == activation_name
    return False


def find_activation_decorator(node: ast.stmt, activation_name: str) -> Optional[ast.expr]:
    for decorator in node.decorator_list:
        if is_activation_decorator(decorator, activation_name):
            return decorator
    return None


def _literal_keywords(call: ast.Call, owner: str, skip: Optional[ast.expr] = None) -> dict[str, Any]:
    if call.args:
        raise ShapeError(f"{owner} takes keyword arguments only", call)

    values: dict[str, Any] = {}
    for kw in call.keywords:
        if skip is not None and kw.value is skip:
            continue
        if kw.arg is None:
            raise ShapeError(f"'**' arguments are not supported on {owner}", kw.value)
        try:
            values[kw.arg] = ast.literal_eval(kw.value)
        except ValueError:
            raise ShapeError(f"argument '{kw.arg}' of {owner} must be a literal", kw.value)
    return values


def _is_config_call(node: ast.expr) -> bool:
    if not isinstance(node, ast.Call):
        return False
    func = node.func
    name = func.id if isinstance(func, ast.Name) else getattr(func, "attr", None)
    return name == GeneratorConfig.__name__


def decorator_overrides(decorator: ast.expr) -> dict[str, Any]:
    """
    Read literal keyword arguments of the activation decorator.

    A ``config=GeneratorConfig(...)`` argument is read the same way and
    returned under the ``config`` key as a dict of its keyword arguments.

    Raises:
        ShapeError: For positional arguments or non-literal values
    """
    if not isinstance(decorator, ast.Call):
        return {}

    overrides: dict[str, Any] = {}
    config_call = None
    for kw in decorator.keywords:
        if kw.arg == "config" and _is_config_call(kw.value):
            config_call = kw.value
    if config_call is not None:
        overrides["config"] = _literal_keywords(config_call, GeneratorConfig.__name__)

    overrides.update(_literal_keywords(decorator, "the activation decorator", skip=config_call))
    return overrides


def config_with_overrides(
    config: GeneratorConfig,
    overrides: dict[str, Any],
    node: Optional[ast.AST] = None,
) -> GeneratorConfig:
    """
    Apply per-declaration overrides on top of a config.

    A ``config`` entry replaces the base config, as the ``config``
    argument of ``derive_builder`` does at import time.
    """
    if not overrides:
        return config
    overrides = dict(overrides)
    base = overrides.pop("config", None)
    unknown = set(overrides) - set(GeneratorConfig.model_fields)
    if unknown:
        raise ShapeError(f"unknown decorator argument(s): {', '.join(sorted(unknown))}", node)
    try:
        if base is not None:
            config = GeneratorConfig(**base)
        return GeneratorConfig(**{**config.model_dump(), **overrides})
    except ValidationError as e:
        raise ShapeError(f"invalid decorator arguments: {e}", node) from e


def find_annotated_classes(
    module: ast.Module,
    activation_name: str = DEFAULT_CONFIG.activation_name,
) -> list[AnnotatedClass]:
    """
    Find every declaration carrying the activation decorator.

    Args:
        module: Parsed module
        activation_name: Decorator name to look for

    Returns:
        Annotated classes in source order, nested ones flagged as such
    """
    top_level = {id(stmt) for stmt in module.body}
    found = []
    for node in ast.walk(module):
        if not isinstance(node, DECORATED):
            continue
        decorator = find_activation_decorator(node, activation_name)
        if decorator is None:
            continue
        found.append(
            AnnotatedClass(node=node, decorator=decorator, top_level=id(node) in top_level)
        )
    found.sort(key=lambda a: (a.node.lineno, a.node.col_offset))
    return found

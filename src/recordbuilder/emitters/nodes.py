"""
Small constructors for the ast nodes the emitters produce.
"""

import ast
from typing import Optional, Sequence

from recordbuilder.runtime import RUNTIME_MODULE

# Module alias the generated code reaches the runtime through
RUNTIME_ALIAS = "_builder_runtime"


def load(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Load())


def store(name: str) -> ast.Name:
    return ast.Name(id=name, ctx=ast.Store())


def runtime(name: str) -> ast.Attribute:
    """Reference to a name exported by the runtime module."""
    return ast.Attribute(value=load(RUNTIME_ALIAS), attr=name, ctx=ast.Load())


def self_attr(attribute: str, ctx: Optional[ast.expr_context] = None) -> ast.Attribute:
    return ast.Attribute(value=load("self"), attr=attribute, ctx=ctx or ast.Load())


def is_missing(expr: ast.expr) -> ast.Compare:
    """``<expr> is MISSING``"""
    return ast.Compare(left=expr, ops=[ast.Is()], comparators=[runtime("MISSING")])


def arguments(*names: str, annotations: Sequence[Optional[ast.expr]] = ()) -> ast.arguments:
    annotations = list(annotations) + [None] * (len(names) - len(annotations))
    return ast.arguments(
        posonlyargs=[],
        args=[ast.arg(arg=n, annotation=a) for n, a in zip(names, annotations)],
        vararg=None,
        kwonlyargs=[],
        kw_defaults=[],
        kwarg=None,
        defaults=[],
    )


def function(
    name: str,
    args: ast.arguments,
    body: list[ast.stmt],
    returns: Optional[ast.expr] = None,
    decorators: Sequence[ast.expr] = (),
) -> ast.FunctionDef:
    node = ast.FunctionDef(
        name=name,
        args=args,
        body=body,
        decorator_list=list(decorators),
        returns=returns,
    )
    if "type_params" in ast.FunctionDef._fields:
        node.type_params = []
    return node


def class_def(name: str, body: list[ast.stmt]) -> ast.ClassDef:
    node = ast.ClassDef(name=name, bases=[], keywords=[], body=body, decorator_list=[])
    if "type_params" in ast.ClassDef._fields:
        node.type_params = []
    return node


def docstring(text: str) -> ast.Expr:
    return ast.Expr(value=ast.Constant(value=text))


def runtime_import() -> ast.Import:
    """``import recordbuilder.runtime as _builder_runtime``"""
    return ast.Import(names=[ast.alias(name=RUNTIME_MODULE, asname=RUNTIME_ALIAS)])

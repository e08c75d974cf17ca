"""
Exceptions raised by the generator and its hosts.

ShapeError is internal to the pipeline and is always translated into a
Diagnostic before it reaches a host. DeriveError is what the decorator host
raises for an unsupported declaration.
"""

import ast
from typing import Optional


class ShapeError(Exception):
    """The declaration does not match the supported record shape."""

    def __init__(self, message: str, node: Optional[ast.AST] = None) -> None:
        super().__init__(message)
        self.message = message
        self.lineno = getattr(node, "lineno", 1)
        self.col_offset = getattr(node, "col_offset", 0)


class DeriveError(TypeError):
    """A builder could not be derived for a class at import time."""

    def __init__(self, message: str, diagnostic=None) -> None:
        super().__init__(message)
        self.diagnostic = diagnostic


class GenerationError(Exception):
    """A source module could not be transformed; carries its diagnostics."""

    def __init__(self, diagnostics) -> None:
        self.diagnostics = list(diagnostics)
        first = self.diagnostics[0].render() if self.diagnostics else "unknown error"
        super().__init__(first)

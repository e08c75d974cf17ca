"""
Diagnostics reported back to the host.

Shape errors raised anywhere in the pipeline are translated into located
Diagnostic values; hosts decide how to surface them.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from recordbuilder.enums import Severity
from recordbuilder.errors import ShapeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Diagnostic:
    """
    A located message about a declaration.

    Attributes:
        message: Human-readable description
        lineno: 1-based line of the offending node
        col_offset: 0-based column of the offending node
        severity: ERROR or WARNING
    """

    message: str
    lineno: int = 1
    col_offset: int = 0
    severity: Severity = Severity.ERROR

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def shifted(self, line_offset: int, col_offset: int = 0) -> "Diagnostic":
        """Move the diagnostic by a number of lines and columns."""
        return Diagnostic(
            message=self.message,
            lineno=self.lineno + line_offset,
            col_offset=self.col_offset + col_offset,
            severity=self.severity,
        )

    def render(self, path: Optional[str | Path] = None) -> str:
        """Format as ``path:line:col: severity: message``."""
        location = f"{self.lineno}:{self.col_offset + 1}"
        prefix = f"{path}:{location}" if path is not None else location
        return f"{prefix}: {self.severity.value}: {self.message}"


def translate(error: ShapeError) -> Diagnostic:
    """Convert a shape error into an error diagnostic."""
    diagnostic = Diagnostic(
        message=error.message,
        lineno=error.lineno,
        col_offset=error.col_offset,
        severity=Severity.ERROR,
    )
    logger.debug(f"Shape error translated: {diagnostic.render()}")
    return diagnostic


def from_syntax_error(error: SyntaxError) -> Diagnostic:
    """Convert a parse failure of the input module into a diagnostic."""
    return Diagnostic(
        message=f"invalid syntax: {error.msg}",
        lineno=error.lineno or 1,
        col_offset=max((error.offset or 1) - 1, 0),
    )

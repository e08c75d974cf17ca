"""
Enums for field classification and diagnostics.

These enums define the valid values for schema and diagnostic attributes.
"""

from enum import Enum


class FieldKind(str, Enum):
    """How a record field behaves at finalization."""

    REQUIRED = "required"
    OPTIONAL = "optional"


class Severity(str, Enum):
    """Diagnostic severities reported to the host."""

    ERROR = "error"
    WARNING = "warning"

"""
Expansion result dataclass.

Holds the output of expanding one record declaration.
"""

import ast
from dataclasses import dataclass, field
from typing import Optional

from recordbuilder.diagnostics import Diagnostic
from recordbuilder.models import RecordSchema


@dataclass
class ExpansionResult:
    """
    Result of expanding a single declaration.

    Either the generated declarations are all present, or there is at
    least one error diagnostic and nothing was generated.

    Attributes:
        record_name: Name of the declaration (None if it has no name)
        schema: The classified record schema
        builder: Generated builder class
        factory: Generated factory, to be placed in the record class body
        imports: Statements the generated code needs at module level
        diagnostics: Problems found while expanding
    """

    record_name: Optional[str] = None
    schema: Optional[RecordSchema] = None
    builder: Optional[ast.ClassDef] = None
    factory: Optional[ast.FunctionDef] = None
    imports: list[ast.stmt] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """Check if the builder and factory were both generated."""
        return self.builder is not None and self.factory is not None

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    @property
    def declarations(self) -> list[ast.stmt]:
        """Module-level statements to splice after the record."""
        if not self.is_complete:
            return []
        return [*self.imports, self.builder]

    def summary(self) -> str:
        """Generate a human-readable summary."""
        lines = [f"Expansion of {self.record_name or '<unnamed>'}:"]

        if self.is_complete and self.schema is not None:
            lines.append(f"  Builder: {self.builder.name}")
            for f in self.schema.fields:
                kind = f.classification.kind.value if f.classification else "?"
                lines.append(f"    {f.name}: {f.type_source} ({kind})")
        else:
            lines.append("  Builder: Not generated")

        if self.diagnostics:
            lines.append(f"\nDiagnostics ({len(self.diagnostics)}):")
            for d in self.diagnostics:
                lines.append(f"  - {d.render()}")

        return "\n".join(lines)

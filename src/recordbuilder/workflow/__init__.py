"""
Workflow module for builder expansion.

Module structure:
- result.py: ExpansionResult dataclass
- expander.py: BuilderExpander orchestrator class
"""

from .expander import BuilderExpander, expand_class
from .result import ExpansionResult

__all__ = [
    "BuilderExpander",
    "ExpansionResult",
    "expand_class",
]

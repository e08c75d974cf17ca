"""
Base model for generator schema entities.
"""

from pydantic import BaseModel, ConfigDict


class SchemaModel(BaseModel):
    """
    Base model for schema objects produced during one expansion.

    Provides:
    - Immutability once built
    - Support for ast node attributes
    """

    model_config = ConfigDict(
        # ast.expr nodes are stored verbatim
        arbitrary_types_allowed=True,
        frozen=True,
    )

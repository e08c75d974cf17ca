"""
Runtime support imported by generated builder code.

Generated modules reach MISSING, MissingFieldError and Slot through this
module, so it must not import from the rest of the package.
"""

from typing import TypeVar, Union

T = TypeVar("T")

RUNTIME_MODULE = __name__


class _Missing:
    """Marker for a builder slot that was never set."""

    _instance = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return (_Missing, ())


MISSING = _Missing()

# Storage type of a builder slot: either a value or MISSING.
Slot = Union[T, _Missing]


class MissingFieldError(ValueError):
    """
    Raised by a generated ``build()`` when required fields were never set.

    Attributes:
        field_names: Names of the missing fields, in declaration order
    """

    def __init__(self, *field_names: str) -> None:
        if not field_names:
            raise TypeError("MissingFieldError needs at least one field name")
        self.field_names = tuple(field_names)
        if len(field_names) == 1:
            message = f"missing required field: {field_names[0]}"
        else:
            message = f"missing required fields: {', '.join(field_names)}"
        super().__init__(message)

    @property
    def field_name(self) -> str:
        """The first missing field."""
        return self.field_names[0]

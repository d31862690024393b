"""
Data Types - Port data types that flow along graph edges.

This module defines:
- DataType: Enum of all supported port data types

The enum values match the lowercase names used in graph snapshots
handed over by the editor store.
"""

from __future__ import annotations

from enum import Enum


class DataType(Enum):
    """
    Enumeration of data types that can flow through node connections.

    Each input/output port has a DataType that determines what
    kinds of connections are valid and which colour the port is drawn in.
    """
    # Primitive types
    STRING = "string"       # Text
    NUMBER = "number"       # Float or integer
    BOOLEAN = "boolean"     # True/False

    # Structured types
    ARRAY = "array"         # Ordered list of values
    OBJECT = "object"       # Key/value mapping
    IMAGE = "image"         # Image payload

    # Special types
    ANY = "any"             # Accepts any type (for utility nodes)

    def is_compatible_with(self, other: DataType) -> bool:
        """Check if this type can connect to another type."""
        if self == DataType.ANY or other == DataType.ANY:
            return True
        return self == other

    @classmethod
    def parse(cls, value: DataType | str | None) -> DataType:
        """
        Convert a snapshot value to a DataType.

        Unknown or missing names fall back to ANY, the same way the
        renderer falls back to the neutral port colour.
        """
        if isinstance(value, DataType):
            return value
        if not value:
            return cls.ANY
        try:
            return cls(str(value).lower())
        except ValueError:
            return cls.ANY

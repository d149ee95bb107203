"""Closed typed value carried by every output field."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class ValueKind(str, Enum):
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    TIMESTAMP = "timestamp"
    JSON = "json"


_PYTHON_TYPES = {
    ValueKind.STRING: (str,),
    ValueKind.INT: (int,),
    ValueKind.FLOAT: (float,),
    ValueKind.BOOL: (bool,),
    ValueKind.TIMESTAMP: (datetime,),
}


@dataclass(frozen=True)
class FieldValue:
    """A value tagged with its kind.

    JSON values are whatever the JSON decoder produced (dict, list, str,
    int, float, bool or None) and are not type-checked.
    """
    kind: ValueKind
    value: Any

    def __post_init__(self):
        expected = _PYTHON_TYPES.get(self.kind)
        if expected is None:
            return
        # bool is a subclass of int; keep INT values honest
        if self.kind is ValueKind.INT and isinstance(self.value, bool):
            raise TypeError("INT value must not be a bool")
        if not isinstance(self.value, expected):
            raise TypeError(
                f"{self.kind.value} value must be {expected[0].__name__}, "
                f"got {type(self.value).__name__}"
            )

    @classmethod
    def string(cls, value: str) -> "FieldValue":
        return cls(ValueKind.STRING, value)

    @classmethod
    def integer(cls, value: int) -> "FieldValue":
        return cls(ValueKind.INT, value)

    @classmethod
    def floating(cls, value: float) -> "FieldValue":
        return cls(ValueKind.FLOAT, value)

    @classmethod
    def boolean(cls, value: bool) -> "FieldValue":
        return cls(ValueKind.BOOL, value)

    @classmethod
    def timestamp(cls, value: datetime) -> "FieldValue":
        return cls(ValueKind.TIMESTAMP, value)

    @classmethod
    def json(cls, value: Any) -> "FieldValue":
        return cls(ValueKind.JSON, value)

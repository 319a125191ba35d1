"""
Core data types: stored values and column definitions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class Value(ABC):
    """A typed unit of stored data: Integer, Text or Null.

    Subclasses are frozen dataclasses, so equality and hashing are
    structural and never consider two different variants equal.
    """

    @abstractmethod
    def to_python(self) -> Any:
        """The plain Python payload: int, str or None."""


@dataclass(frozen=True)
class Integer(Value):
    """A 32-bit signed integer."""
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"Integer expects an int, got {type(self.value).__name__}")
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"Integer out of 32-bit range: {self.value}")

    def to_python(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Text(Value):
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise TypeError(f"Text expects a str, got {type(self.value).__name__}")

    def to_python(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null(Value):
    def to_python(self) -> None:
        return None

    def __str__(self) -> str:
        return "NULL"


NULL = Null()


@dataclass
class Column:
    """Represents a table column definition."""
    name: str
    data_type: str
    is_primary: bool = False
    is_unique: bool = False

    @property
    def is_indexed(self) -> bool:
        """Primary and unique columns carry a uniqueness index."""
        return self.is_primary or self.is_unique

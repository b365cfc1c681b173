"""Fact models for times_drill.

A fact is one multiplication pair. Facts are canonicalized with the
smaller operand first, so 3x7 and 7x3 share a single identity.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

__all__ = [
    "FactDTO",
    "fact_key",
    "make_fact",
    "parse_fact_key",
]


def fact_key(a: int, b: int) -> str:
    """Build the canonical identity key for a pair of operands.

    Args:
        a: First operand
        b: Second operand

    Returns:
        Key of the form "{smaller}x{larger}", e.g. "2x3"
    """
    lo, hi = (a, b) if a <= b else (b, a)
    return f"{lo}x{hi}"


class FactDTO(BaseModel, frozen=True):
    """Canonical multiplication fact.

    Operands are swapped on construction when needed so that a <= b.
    Two facts are equal iff their canonical operands are equal.

    Attributes:
        a: Smaller operand
        b: Larger operand
    """

    a: int = Field(ge=0, description="Smaller operand")
    b: int = Field(ge=0, description="Larger operand")

    @model_validator(mode="before")
    @classmethod
    def _canonicalize(cls, data: Any) -> Any:
        if isinstance(data, dict) and "a" in data and "b" in data:
            a, b = data["a"], data["b"]
            if isinstance(a, int) and isinstance(b, int) and a > b:
                return {**data, "a": b, "b": a}
        return data

    @property
    def answer(self) -> int:
        """Product of the two operands."""
        return self.a * self.b

    @property
    def key(self) -> str:
        """Canonical identity key."""
        return fact_key(self.a, self.b)

    def __str__(self) -> str:
        return f"{self.a} × {self.b}"


def make_fact(a: int, b: int) -> FactDTO:
    """Create a canonical fact from two operands in any order."""
    return FactDTO(a=a, b=b)


def parse_fact_key(key: str) -> FactDTO:
    """Rebuild a fact from its identity key.

    Args:
        key: Key of the form "AxB"

    Returns:
        Canonical FactDTO

    Raises:
        ValueError: If the key is not two non-negative integers joined by "x"
    """
    a_str, sep, b_str = key.partition("x")
    if not sep or not a_str.isdigit() or not b_str.isdigit():
        raise ValueError(f"Invalid fact key: {key!r}")
    return make_fact(int(a_str), int(b_str))

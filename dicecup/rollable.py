"""The Rollable interface shared by dice, cups and modifiers."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from dicecup.toss import Toss


@runtime_checkable
class Rollable(Protocol):
    """Anything that can be rolled and knows its own bounds."""

    def minimum(self) -> int:
        """Return the lowest value roll() can produce."""
        ...

    def maximum(self) -> int:
        """Return the highest value roll() can produce."""
        ...

    def roll(self) -> Toss:
        """Evaluate once and return the result."""
        ...

    def notation(self) -> str:
        """Return the canonical dice notation for this node."""
        ...


def enclose(notation: str) -> str:
    """Wrap a notation in parentheses when it contains a ``+``."""
    if "+" in notation:
        return f"({notation})"
    return notation


def has_top_level_plus(notation: str) -> bool:
    """Return True if notation contains a ``+`` outside any parentheses."""
    depth = 0
    for char in notation:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "+" and depth == 0:
            return True
    return False


def format_values(values: Iterable[int]) -> str:
    """Render values as a sum, e.g. ``3 + (-1) + 4``."""
    return " + ".join(f"({value})" if value < 0 else str(value) for value in values)

"""Exceptions raised while building a dice tree.

Every failure happens at parse or construction time; evaluating a tree
that was built successfully never raises.
"""

from __future__ import annotations


class DiceError(ValueError):
    """Base class for every dicecup error."""


class DiceSyntaxError(DiceError):
    """Raised when a notation, die or modifier definition is malformed."""

    @classmethod
    def due_to_invalid_notation(cls, notation: str) -> DiceSyntaxError:
        return cls(f"The dice notation {notation!r} is invalid or not supported")

    @classmethod
    def due_to_invalid_modifier(cls, modifier: str) -> DiceSyntaxError:
        return cls(f"The modifier {modifier!r} is invalid or not supported")

    @classmethod
    def due_to_too_few_sides(cls, size: int) -> DiceSyntaxError:
        return cls(f"A die must have at least 2 sides, got {size}")


class UnknownAlgorithm(DiceError):
    """Raised when a modifier, comparator or operator token is not supported."""


class IllegalValue(DiceError):
    """Raised when a value would put a node in an unusable state."""

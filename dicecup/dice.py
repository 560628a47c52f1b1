"""Leaf dice: the only nodes that consume randomness.

Each die is fixed-shape and stateless apart from its construction
parameters. Randomness comes from an injected RandomSource so rolls can be
made deterministic in tests.
"""

from __future__ import annotations

import abc
import re
from collections.abc import Sequence

from dicecup.errors import DiceSyntaxError
from dicecup.random_source import RandomSource, get_random_source
from dicecup.toss import Context, Toss
from dicecup.tracing import NullTracer, Tracer

_SIDED_RE = re.compile(r"^d(?P<sides>\d+)$", re.IGNORECASE)
_CUSTOM_RE = re.compile(r"^d\[(?P<definition>\s*-?\d+\s*(?:,\s*-?\d+\s*)*)\]$", re.IGNORECASE)


class Die(abc.ABC):
    """Shared evaluation logic for every die.

    Subclasses provide the notation, the face count and the three raw
    values; this class wraps them in tosses and reports them to the tracer.
    """

    def __init__(self, random_source: RandomSource | None = None, tracer: Tracer | None = None) -> None:
        self._random_source = random_source if random_source is not None else get_random_source()
        self._tracer = tracer if tracer is not None else NullTracer()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.notation()}>"

    @abc.abstractmethod
    def notation(self) -> str: ...

    @abc.abstractmethod
    def size(self) -> int:
        """Return the number of faces."""

    @abc.abstractmethod
    def _lowest(self) -> int: ...

    @abc.abstractmethod
    def _highest(self) -> int: ...

    @abc.abstractmethod
    def _generate(self) -> int:
        """Draw one face value from the random source."""

    def minimum(self) -> int:
        return self._record(self._lowest(), "minimum").value

    def maximum(self) -> int:
        return self._record(self._highest(), "maximum").value

    def roll(self) -> Toss:
        return self._record(self._generate(), "roll")

    def _record(self, value: int, method: str) -> Toss:
        toss = Toss(value, str(value), Context(type(self).__name__, method, self.notation()))
        self._tracer.append(toss)
        return toss


class SidedDie(Die):
    """Classic die numbered 1 to sides.

    Raises:
        DiceSyntaxError: If sides is lower than 2.
    """

    def __init__(
        self,
        sides: int,
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        if sides < 2:
            raise DiceSyntaxError.due_to_too_few_sides(sides)
        super().__init__(random_source, tracer)
        self._sides = sides

    @classmethod
    def from_notation(
        cls,
        notation: str,
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> SidedDie:
        """Build a die from notation such as ``D6``.

        Raises:
            DiceSyntaxError: If the notation is not a sided die.
        """
        m = _SIDED_RE.match(notation.strip())
        if not m:
            raise DiceSyntaxError.due_to_invalid_notation(notation)
        return cls(int(m.group("sides")), random_source, tracer)

    @property
    def sides(self) -> int:
        return self._sides

    def notation(self) -> str:
        return f"D{self._sides}"

    def size(self) -> int:
        return self._sides

    def _lowest(self) -> int:
        return 1

    def _highest(self) -> int:
        return self._sides

    def _generate(self) -> int:
        return self._random_source.generate_int(1, self._sides)


class FudgeDie(Die):
    """Fate/Fudge die with faces -1, 0 and 1."""

    @classmethod
    def from_notation(
        cls,
        notation: str,
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> FudgeDie:
        if notation.strip().upper() != "DF":
            raise DiceSyntaxError.due_to_invalid_notation(notation)
        return cls(random_source, tracer)

    def notation(self) -> str:
        return "DF"

    def size(self) -> int:
        return 3

    def _lowest(self) -> int:
        return -1

    def _highest(self) -> int:
        return 1

    def _generate(self) -> int:
        return self._random_source.generate_int(-1, 1)


class PercentileDie(Die):
    """Die numbered 1 to 100."""

    @classmethod
    def from_notation(
        cls,
        notation: str,
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> PercentileDie:
        if notation.strip().upper() != "D%":
            raise DiceSyntaxError.due_to_invalid_notation(notation)
        return cls(random_source, tracer)

    def notation(self) -> str:
        return "D%"

    def size(self) -> int:
        return 100

    def _lowest(self) -> int:
        return 1

    def _highest(self) -> int:
        return 100

    def _generate(self) -> int:
        return self._random_source.generate_int(1, 100)


class CustomDie(Die):
    """Die whose faces carry arbitrary integers, e.g. ``D[1,1,2,3,5]``.

    Faces may repeat and may be negative.

    Raises:
        DiceSyntaxError: If fewer than 2 faces are given.
    """

    def __init__(
        self,
        values: Sequence[int],
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        if len(values) < 2:
            raise DiceSyntaxError.due_to_too_few_sides(len(values))
        super().__init__(random_source, tracer)
        self._values = tuple(values)

    @classmethod
    def from_notation(
        cls,
        notation: str,
        random_source: RandomSource | None = None,
        tracer: Tracer | None = None,
    ) -> CustomDie:
        """Build a die from notation such as ``D[1,2,3]``.

        Raises:
            DiceSyntaxError: If the notation is not a custom die or lists fewer than 2 faces.
        """
        m = _CUSTOM_RE.match(notation.strip())
        if not m:
            raise DiceSyntaxError.due_to_invalid_notation(notation)
        values = [int(value) for value in m.group("definition").split(",")]
        return cls(values, random_source, tracer)

    @property
    def values(self) -> tuple[int, ...]:
        return self._values

    def notation(self) -> str:
        return "D[" + ",".join(str(value) for value in self._values) + "]"

    def size(self) -> int:
        return len(self._values)

    def _lowest(self) -> int:
        return min(self._values)

    def _highest(self) -> int:
        return max(self._values)

    def _generate(self) -> int:
        return self._values[self._random_source.generate_int(0, len(self._values) - 1)]

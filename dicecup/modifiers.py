"""Modifiers: rollables that wrap another rollable and transform its result.

Arithmetic
    Applies one integer operation to the wrapped result.
DropKeep
    Evaluates every child of a pool, ranks the values and sums a slice.
Explode
    Re-rolls each child of a pool while a comparison holds and sums
    everything rolled.

Operator tokens are resolved once, at construction, into closed enums.
Every validation happens in the constructor so evaluation never fails.
"""

from __future__ import annotations

import enum
import sys
from typing import TypeVar

from dicecup.cup import Cup
from dicecup.errors import DiceSyntaxError, IllegalValue, UnknownAlgorithm
from dicecup.rollable import Rollable, enclose, format_values
from dicecup.toss import Context, Toss
from dicecup.tracing import NullTracer, Tracer

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Operator(str, enum.Enum):
    """Arithmetic operator applied by :class:`Arithmetic`."""

    addition = "+"
    subtraction = "-"
    multiplication = "*"
    division = "/"
    exponentiation = "^"


class Algorithm(str, enum.Enum):
    """Selection rule applied by :class:`DropKeep`."""

    drop_highest = "DH"
    drop_lowest = "DL"
    keep_highest = "KH"
    keep_lowest = "KL"


class Comparator(str, enum.Enum):
    """Comparison that triggers another roll in :class:`Explode`."""

    equals = "="
    greater_than = ">"
    lesser_than = "<"


E = TypeVar("E", Operator, Algorithm, Comparator)

# Arithmetic results saturate to this range, the same bounds Explode reports.
LOWEST_RESULT = -sys.maxsize - 1
HIGHEST_RESULT = sys.maxsize


def _clamp(value: int) -> int:
    return max(LOWEST_RESULT, min(HIGHEST_RESULT, value))


def _coerce(enum_cls: type[E], token: E | str, label: str) -> E:
    """Resolve a token to its enum member (case-insensitive).

    Raises:
        UnknownAlgorithm: If the token is not a member value.
    """
    if isinstance(token, enum_cls):
        return token
    try:
        return enum_cls(str(token).upper())
    except ValueError as exc:
        raise UnknownAlgorithm(f"Unknown or unsupported {label} {token!r}") from exc


def _as_cup(rollable: Rollable) -> Cup:
    if isinstance(rollable, Cup):
        return rollable
    return Cup(rollable)


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


class Arithmetic:
    """Applies ``<inner> <operator> <value>`` to every evaluation.

    Division truncates toward zero. Exponentiation keeps the sign of the
    inner value: ``-3 ^ 2`` is ``-9``. Results saturate at
    ``-sys.maxsize - 1`` and ``sys.maxsize``, so ``D6^6000`` has a maximum
    of ``sys.maxsize``.

    Args:
        rollable: The wrapped node.
        operator: An :class:`Operator` or its symbol.
        value: Operand between 0 and ``sys.maxsize``; must not be 0 for division.
        tracer: Receives every toss this node produces.

    Raises:
        UnknownAlgorithm: If operator is not supported.
        DiceSyntaxError: If value is out of range, or 0 with division.
    """

    def __init__(
        self,
        rollable: Rollable,
        operator: Operator | str,
        value: int,
        tracer: Tracer | None = None,
    ) -> None:
        self._operator = _coerce(Operator, operator, "operator")
        if not 0 <= value <= HIGHEST_RESULT or (value == 0 and self._operator is Operator.division):
            raise DiceSyntaxError(
                f"The value {value} is invalid for the {self._operator.value!r} operator"
            )
        self._rollable = rollable
        self._value = value
        self._tracer = tracer if tracer is not None else NullTracer()

    @property
    def inner_rollable(self) -> Rollable:
        return self._rollable

    @property
    def operator(self) -> Operator:
        return self._operator

    @property
    def value(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"<Arithmetic {self.notation()}>"

    def notation(self) -> str:
        return f"{enclose(self._rollable.notation())}{self._operator.value}{self._value}"

    def minimum(self) -> int:
        return self._record(self._rollable.minimum(), "minimum").value

    def maximum(self) -> int:
        return self._record(self._rollable.maximum(), "maximum").value

    def roll(self) -> Toss:
        return self._record(self._rollable.roll().value, "roll")

    def _calculate(self, value: int) -> int:
        operator = self._operator
        if operator is Operator.addition:
            return _clamp(value + self._value)
        if operator is Operator.subtraction:
            return _clamp(value - self._value)
        if operator is Operator.multiplication:
            return _clamp(value * self._value)
        if operator is Operator.division:
            quotient = abs(value) // self._value
            return _clamp(quotient if value >= 0 else -quotient)
        return _clamp(self._power(abs(value)) if value >= 0 else -self._power(abs(value)))

    def _power(self, base: int) -> int:
        # base ** value would be at least 2 ** 63: saturate without computing it.
        if base > 1 and (base.bit_length() - 1) * self._value >= HIGHEST_RESULT.bit_length():
            return HIGHEST_RESULT + 1
        return base**self._value

    def _record(self, inner: int, method: str) -> Toss:
        toss = Toss(
            self._calculate(inner),
            f"{inner} {self._operator.value} {self._value}",
            Context("Arithmetic", method, self.notation()),
        )
        self._tracer.append(toss)
        return toss


# ---------------------------------------------------------------------------
# DropKeep
# ---------------------------------------------------------------------------


class DropKeep:
    """Sums the best or worst results of a pool.

    Each child is evaluated once, the values are sorted ascending (stable,
    so equal values keep pool order) and a contiguous slice is summed:

    - ``DH``: drop the ``threshold`` highest values
    - ``DL``: drop the ``threshold`` lowest values
    - ``KH``: keep the ``threshold`` highest values
    - ``KL``: keep the ``threshold`` lowest values

    A rollable that is not a :class:`Cup` is wrapped in one.

    Raises:
        UnknownAlgorithm: If algorithm is not supported.
        DiceSyntaxError: If threshold is negative or larger than the pool.
    """

    def __init__(
        self,
        rollable: Rollable,
        algorithm: Algorithm | str,
        threshold: int,
        tracer: Tracer | None = None,
    ) -> None:
        self._algorithm = _coerce(Algorithm, algorithm, "sorting algorithm")
        pool = _as_cup(rollable)
        if not 0 <= threshold <= len(pool):
            raise DiceSyntaxError(
                f"The threshold {threshold} must be between 0 and the number "
                f"of rollable objects ({len(pool)})"
            )
        self._rollable = rollable
        self._pool = pool
        self._threshold = threshold
        self._tracer = tracer if tracer is not None else NullTracer()

    @property
    def inner_rollable(self) -> Rollable:
        return self._rollable

    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @property
    def threshold(self) -> int:
        return self._threshold

    def __repr__(self) -> str:
        return f"<DropKeep {self.notation()}>"

    def notation(self) -> str:
        return f"{enclose(self._pool.notation())}{self._algorithm.value}{self._threshold}"

    def minimum(self) -> int:
        return self._record([item.minimum() for item in self._pool], "minimum").value

    def maximum(self) -> int:
        return self._record([item.maximum() for item in self._pool], "maximum").value

    def roll(self) -> Toss:
        return self._record([item.roll().value for item in self._pool], "roll")

    def _select(self, values: list[int]) -> list[int]:
        ordered = sorted(values)
        count = len(ordered)
        threshold = self._threshold
        algorithm = self._algorithm
        if algorithm is Algorithm.drop_highest:
            return ordered[: count - threshold]
        if algorithm is Algorithm.drop_lowest:
            return ordered[threshold:]
        if algorithm is Algorithm.keep_highest:
            return ordered[count - threshold :]
        return ordered[:threshold]

    def _record(self, values: list[int], method: str) -> Toss:
        toss = Toss(
            sum(self._select(values)),
            format_values(values) or "0",
            Context("DropKeep", method, self.notation()),
        )
        self._tracer.append(toss)
        return toss


# ---------------------------------------------------------------------------
# Explode
# ---------------------------------------------------------------------------


class Explode:
    """Re-rolls each child of a pool while a comparison holds.

    For every child: roll, add the value, and roll again as long as
    ``value <comparator> threshold``. The threshold defaults to the child's
    own maximum for ``=`` and is required for ``>`` and ``<``.

    The maximum is unbounded in principle and is reported as
    ``sys.maxsize``. The minimum is the pool minimum, unless a negative
    result can trigger a re-roll; it is then ``-sys.maxsize - 1``.

    Raises:
        UnknownAlgorithm: If comparator is not supported.
        DiceSyntaxError: If ``>`` or ``<`` is given without a threshold.
        IllegalValue: If some child could explode forever, or the pool is empty.
    """

    def __init__(
        self,
        rollable: Rollable,
        comparator: Comparator | str,
        threshold: int | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self._comparator = _coerce(Comparator, comparator, "comparator")
        if threshold is None and self._comparator is not Comparator.equals:
            raise DiceSyntaxError(
                f"The {self._comparator.value!r} comparator requires a threshold"
            )
        self._threshold = threshold
        pool = _as_cup(rollable)
        if pool.is_empty():
            raise IllegalValue("An empty pool can not explode")
        self._thresholds = tuple(self._child_threshold(item, pool) for item in pool)
        self._unbounded_below = any(
            self._can_sink(item, threshold) for item, threshold in zip(pool, self._thresholds)
        )
        self._rollable = rollable
        self._pool = pool
        self._tracer = tracer if tracer is not None else NullTracer()

    def _child_threshold(self, rollable: Rollable, pool: Cup) -> int:
        """Return the threshold to use for rollable, refusing endless loops."""
        lowest = rollable.minimum()
        highest = rollable.maximum()
        threshold = self._threshold if self._threshold is not None else highest
        if self._comparator is Comparator.greater_than:
            terminates = threshold > lowest
        elif self._comparator is Comparator.lesser_than:
            terminates = threshold < highest
        else:
            terminates = lowest != highest or threshold != highest
        if not terminates:
            raise IllegalValue(f"The pool {pool.notation()} would generate an infinite loop")
        return threshold

    def _can_sink(self, rollable: Rollable, threshold: int) -> bool:
        """Return True if a negative result may trigger another roll.

        Such a child can accumulate without a lower bound, which makes the
        minimum of the whole node unbounded as well.
        """
        lowest = rollable.minimum()
        if lowest >= 0:
            return False
        top = min(rollable.maximum(), -1)
        if self._comparator is Comparator.greater_than:
            return threshold < top
        if self._comparator is Comparator.lesser_than:
            return threshold > lowest
        return lowest <= threshold <= top

    @property
    def inner_rollable(self) -> Rollable:
        return self._rollable

    @property
    def comparator(self) -> Comparator:
        return self._comparator

    @property
    def threshold(self) -> int | None:
        return self._threshold

    def __repr__(self) -> str:
        return f"<Explode {self.notation()}>"

    def notation(self) -> str:
        suffix = ""
        if self._comparator is not Comparator.equals or self._threshold is not None:
            suffix = f"{self._comparator.value}{self._threshold}"
        return f"{enclose(self._pool.notation())}!{suffix}"

    def minimum(self) -> int:
        value = -sys.maxsize - 1 if self._unbounded_below else self._pool.minimum()
        toss = Toss(value, str(value), Context("Explode", "minimum", self.notation()))
        self._tracer.append(toss)
        return value

    def maximum(self) -> int:
        toss = Toss(sys.maxsize, str(sys.maxsize), Context("Explode", "maximum", self.notation()))
        self._tracer.append(toss)
        return sys.maxsize

    def roll(self) -> Toss:
        values: list[int] = []
        for item, threshold in zip(self._pool, self._thresholds):
            value = item.roll().value
            values.append(value)
            while self._compare(value, threshold):
                value = item.roll().value
                values.append(value)

        toss = Toss(
            sum(values),
            format_values(values),
            Context("Explode", "roll", self.notation(), {"total_rolls_count": len(values)}),
        )
        self._tracer.append(toss)
        return toss

    def _compare(self, value: int, threshold: int) -> bool:
        if self._comparator is Comparator.greater_than:
            return value > threshold
        if self._comparator is Comparator.lesser_than:
            return value < threshold
        return value == threshold

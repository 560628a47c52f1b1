"""Cup: an ordered pool of rollables whose results are summed."""

from __future__ import annotations

import copy
from collections.abc import Iterator

from dicecup.dice import Die
from dicecup.errors import IllegalValue
from dicecup.rollable import Rollable, format_values, has_top_level_plus
from dicecup.toss import Context, Toss
from dicecup.tracing import NullTracer, Tracer


def _is_kept(rollable: Rollable) -> bool:
    """Empty cups never become children; they would only add noise."""
    return not (isinstance(rollable, Cup) and rollable.is_empty())


class Cup:
    """Ordered collection of rollables.

    Child order only matters for notation rendering. Empty cups passed as
    children are dropped, so a cup made only of empty cups is itself empty.
    """

    def __init__(self, *items: Rollable, tracer: Tracer | None = None) -> None:
        self._items: tuple[Rollable, ...] = tuple(item for item in items if _is_kept(item))
        self._tracer = tracer if tracer is not None else NullTracer()

    @classmethod
    def from_rollable(cls, rollable: Rollable, quantity: int = 1, tracer: Tracer | None = None) -> Cup:
        """Create a cup holding quantity independent copies of rollable.

        Raises:
            IllegalValue: If quantity is lower than 1.
        """
        if quantity < 1:
            raise IllegalValue(f"The quantity of dice {quantity} is not valid")
        if not _is_kept(rollable):
            return cls(tracer=tracer)
        items = [rollable, *(copy.copy(rollable) for _ in range(quantity - 1))]
        return cls(*items, tracer=tracer)

    def with_added_rollable(self, *items: Rollable) -> Cup:
        """Return a new cup with items appended; self is left untouched."""
        kept = [item for item in items if _is_kept(item)]
        if not kept:
            return self
        return Cup(*self._items, *kept, tracer=self._tracer)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Rollable]:
        return iter(self._items)

    def __repr__(self) -> str:
        return f"<Cup {self.notation()}>"

    def is_empty(self) -> bool:
        return not self._items

    def notation(self) -> str:
        if not self._items:
            return "0"

        # [notation, count] in first-occurrence order; only dice are grouped.
        parts: list[list] = []
        dice_index: dict[str, int] = {}
        for item in self._items:
            notation = item.notation()
            if isinstance(item, Die):
                if notation in dice_index:
                    parts[dice_index[notation]][1] += 1
                    continue
                dice_index[notation] = len(parts)
            elif has_top_level_plus(notation):
                notation = f"({notation})"
            parts.append([notation, 1])

        return "+".join(f"{count}{notation}" if count > 1 else notation for notation, count in parts)

    def minimum(self) -> int:
        values = [item.minimum() for item in self._items]
        return self._record(values, "minimum").value

    def maximum(self) -> int:
        values = [item.maximum() for item in self._items]
        return self._record(values, "maximum").value

    def roll(self) -> Toss:
        values = [item.roll().value for item in self._items]
        return self._record(values, "roll")

    def _record(self, values: list[int], method: str) -> Toss:
        toss = Toss(sum(values), format_values(values) or "0", Context("Cup", method, self.notation()))
        self._tracer.append(toss)
        return toss

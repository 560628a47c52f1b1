"""Unit tests for Cup."""

import pytest

from dicecup.cup import Cup
from dicecup.dice import CustomDie, FudgeDie, SidedDie
from dicecup.errors import IllegalValue
from dicecup.modifiers import Arithmetic
from dicecup.tracing import MemoryTracer
from tests.fakes import SequenceRandomSource


class TestCupConstruction:
    def test_empty_cup(self) -> None:
        cup = Cup()
        assert cup.is_empty()
        assert len(cup) == 0
        assert cup.notation() == "0"

    def test_empty_cup_bounds_and_roll(self) -> None:
        cup = Cup()
        assert cup.minimum() == 0
        assert cup.maximum() == 0
        toss = cup.roll()
        assert toss.value == 0
        assert toss.operation == "0"

    def test_empty_children_are_dropped(self) -> None:
        cup = Cup(Cup(), SidedDie(6), Cup(Cup()))
        assert len(cup) == 1

    def test_cup_of_empty_cups_is_empty(self) -> None:
        assert Cup(Cup(), Cup()).is_empty()

    def test_from_rollable(self) -> None:
        cup = Cup.from_rollable(SidedDie(6), 3)
        assert len(cup) == 3
        assert cup.notation() == "3D6"

    def test_from_rollable_makes_independent_copies(self) -> None:
        die = SidedDie(6)
        items = list(Cup.from_rollable(die, 3))
        assert items[0] is die
        assert len({id(item) for item in items}) == 3

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_from_rollable_rejects_bad_quantity(self, quantity: int) -> None:
        with pytest.raises(IllegalValue):
            Cup.from_rollable(SidedDie(6), quantity)

    def test_with_added_rollable_is_non_destructive(self) -> None:
        cup = Cup(SidedDie(6))
        bigger = cup.with_added_rollable(SidedDie(4))
        assert bigger is not cup
        assert len(cup) == 1
        assert len(bigger) == 2

    def test_with_added_empty_cup_returns_self(self) -> None:
        cup = Cup(SidedDie(6))
        assert cup.with_added_rollable(Cup()) is cup

    def test_iteration_order(self) -> None:
        d6, d4 = SidedDie(6), SidedDie(4)
        assert list(Cup(d6, d4)) == [d6, d4]


class TestCupNotation:
    def test_groups_identical_dice(self) -> None:
        cup = Cup(SidedDie(3), SidedDie(4), SidedDie(3))
        assert cup.notation() == "2D3+D4"

    def test_keeps_first_occurrence_order(self) -> None:
        cup = Cup(FudgeDie(), SidedDie(6), FudgeDie())
        assert cup.notation() == "2DF+D6"

    def test_custom_die_grouping(self) -> None:
        cup = Cup(CustomDie([1, 2]), CustomDie([1, 2]))
        assert cup.notation() == "2D[1,2]"

    def test_nested_cup_is_not_grouped(self) -> None:
        cup = Cup(Cup.from_rollable(SidedDie(6), 2), SidedDie(4))
        assert cup.notation() == "2D6+D4"

    def test_modifier_with_top_level_plus_is_wrapped(self) -> None:
        cup = Cup(Arithmetic(Cup.from_rollable(SidedDie(3), 2), "+", 4), SidedDie(6))
        assert cup.notation() == "(2D3+4)+D6"

    def test_modifier_without_top_level_plus_is_not_wrapped(self) -> None:
        cup = Cup(Arithmetic(SidedDie(6), "*", 2), SidedDie(4))
        assert cup.notation() == "D6*2+D4"


class TestCupEvaluation:
    def test_bounds_are_sums(self) -> None:
        cup = Cup(SidedDie(6), FudgeDie(), CustomDie([-5, 10]))
        assert cup.minimum() == 1 - 1 - 5
        assert cup.maximum() == 6 + 1 + 10

    def test_roll_sums_children(self) -> None:
        source = SequenceRandomSource([4, -1])
        toss = Cup(SidedDie(6, source), FudgeDie(source)).roll()
        assert toss.value == 3
        assert toss.operation == "4 + (-1)"

    def test_roll_is_traced(self) -> None:
        tracer = MemoryTracer()
        source = SequenceRandomSource([2, 5])
        cup = Cup(SidedDie(6, source), SidedDie(6, source), tracer=tracer)
        cup.roll()
        assert len(tracer) == 1
        toss = tracer.get(0)
        assert toss.value == 7
        assert toss.context is not None
        assert toss.context.source == "Cup"
        assert toss.context.method == "roll"
        assert toss.context.notation == "2D6"

    def test_roll_within_bounds(self) -> None:
        cup = Cup.from_rollable(SidedDie(6), 4)
        for _ in range(200):
            assert 4 <= cup.roll().value <= 24

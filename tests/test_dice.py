"""Unit tests for the leaf dice."""

import pytest

from dicecup.dice import CustomDie, Die, FudgeDie, PercentileDie, SidedDie
from dicecup.errors import DiceSyntaxError
from tests.fakes import FixedRandomSource, SequenceRandomSource


class TestSidedDie:
    def test_bounds(self) -> None:
        die = SidedDie(8)
        assert die.minimum() == 1
        assert die.maximum() == 8
        assert die.size() == 8

    def test_notation(self) -> None:
        assert SidedDie(20).notation() == "D20"

    def test_roll_uses_random_source(self) -> None:
        source = SequenceRandomSource([3])
        toss = SidedDie(6, source).roll()
        assert toss.value == 3
        assert toss.operation == "3"
        assert source.calls == [(1, 6)]

    def test_roll_in_range(self) -> None:
        die = SidedDie(6)
        for _ in range(100):
            assert 1 <= die.roll().value <= 6

    @pytest.mark.parametrize("sides", [1, 0, -4])
    def test_too_few_sides(self, sides: int) -> None:
        with pytest.raises(DiceSyntaxError, match="at least 2 sides"):
            SidedDie(sides)

    def test_from_notation(self) -> None:
        die = SidedDie.from_notation("d12")
        assert die.sides == 12

    @pytest.mark.parametrize("notation", ["12", "dF", "D[1,2]", "d1"])
    def test_from_invalid_notation(self, notation: str) -> None:
        with pytest.raises(DiceSyntaxError):
            SidedDie.from_notation(notation)

    def test_roll_context(self) -> None:
        context = SidedDie(4, FixedRandomSource(2)).roll().context
        assert context is not None
        assert context.source == "SidedDie"
        assert context.method == "roll"
        assert context.notation == "D4"


class TestFudgeDie:
    def test_bounds(self) -> None:
        die = FudgeDie()
        assert die.minimum() == -1
        assert die.maximum() == 1
        assert die.size() == 3
        assert die.notation() == "DF"

    def test_roll_range_requested(self) -> None:
        source = SequenceRandomSource([-1])
        assert FudgeDie(source).roll().value == -1
        assert source.calls == [(-1, 1)]

    def test_from_notation(self) -> None:
        assert FudgeDie.from_notation("df").notation() == "DF"
        with pytest.raises(DiceSyntaxError):
            FudgeDie.from_notation("d6")


class TestPercentileDie:
    def test_bounds(self) -> None:
        die = PercentileDie()
        assert die.minimum() == 1
        assert die.maximum() == 100
        assert die.size() == 100
        assert die.notation() == "D%"

    def test_roll(self) -> None:
        source = SequenceRandomSource([42])
        assert PercentileDie(source).roll().value == 42
        assert source.calls == [(1, 100)]

    def test_from_notation(self) -> None:
        assert PercentileDie.from_notation("d%").size() == 100
        with pytest.raises(DiceSyntaxError):
            PercentileDie.from_notation("d100")


class TestCustomDie:
    def test_bounds(self) -> None:
        die = CustomDie([1, 2, 34])
        assert die.minimum() == 1
        assert die.maximum() == 34
        assert die.size() == 3

    def test_negative_faces(self) -> None:
        die = CustomDie([-3, 0, 2, 2])
        assert die.minimum() == -3
        assert die.maximum() == 2
        assert die.notation() == "D[-3,0,2,2]"

    def test_roll_picks_face_by_index(self) -> None:
        source = SequenceRandomSource([2])
        assert CustomDie([5, 7, 11], source).roll().value == 11
        assert source.calls == [(0, 2)]

    @pytest.mark.parametrize("values", [[], [4]])
    def test_too_few_faces(self, values: list[int]) -> None:
        with pytest.raises(DiceSyntaxError, match="at least 2 sides"):
            CustomDie(values)

    def test_from_notation_tolerates_spaces(self) -> None:
        die = CustomDie.from_notation("d[ 1, -2 ,3 ]")
        assert die.values == (1, -2, 3)

    @pytest.mark.parametrize("notation", ["d[]", "d[3]", "d[1,a]", "d[1,2"])
    def test_from_invalid_notation(self, notation: str) -> None:
        with pytest.raises(DiceSyntaxError):
            CustomDie.from_notation(notation)


class TestExtremeRolls:
    @pytest.mark.parametrize(
        "make_die,low,high",
        [
            (lambda source: SidedDie(6, source), 1, 6),
            (FudgeDie, -1, 1),
            (PercentileDie, 1, 100),
        ],
    )
    def test_roll_hits_bounds(self, make_die, low: int, high: int, lowest, highest) -> None:
        low_die, high_die = make_die(lowest), make_die(highest)
        assert low_die.roll().value == low == low_die.minimum()
        assert high_die.roll().value == high == high_die.maximum()


class TestDieContract:
    def test_base_die_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            Die()

    def test_incomplete_die_fails_at_construction(self) -> None:
        class HalfDie(Die):
            def notation(self) -> str:
                return "DH"

            def size(self) -> int:
                return 2

        with pytest.raises(TypeError, match="abstract"):
            HalfDie()

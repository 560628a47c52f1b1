"""Builds rollable trees from dice notation."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Union

from dicecup.config import settings
from dicecup.cup import Cup
from dicecup.dice import CustomDie, Die, FudgeDie, PercentileDie, SidedDie
from dicecup.errors import DiceSyntaxError, UnknownAlgorithm
from dicecup.modifiers import Arithmetic, DropKeep, Explode
from dicecup.notation import (
    CompositePool,
    ModifierDefinition,
    ModifierKind,
    NotationParser,
    Parser,
    PoolDefinition,
    SimplePool,
)
from dicecup.random_source import RandomSource, get_random_source
from dicecup.tracing import Tracer, get_tracer

logger = logging.getLogger(__name__)

# The closed set of node types a tree can contain.
RollableNode = Union[SidedDie, FudgeDie, PercentileDie, CustomDie, Cup, Arithmetic, DropKeep, Explode]


def _flatten(rollable: RollableNode) -> RollableNode:
    """Replace a cup holding a single rollable by that rollable."""
    if isinstance(rollable, Cup) and len(rollable) == 1:
        return next(iter(rollable))
    return rollable


class Factory:
    """Turns notation into a tree of dice, cups and modifiers.

    Every node built by a factory shares its tracer, and every die shares
    its random source.

    Args:
        parser: Produces pool definitions from notation (default NotationParser).
        tracer: Receives every toss of every node (default from get_tracer()).
        random_source: Integer generator for the dice.
        max_quantity: Largest allowed quantity (default settings.max_quantity).
        max_sides: Largest allowed sided die (default settings.max_sides).
    """

    def __init__(
        self,
        parser: Parser | None = None,
        tracer: Tracer | None = None,
        random_source: RandomSource | None = None,
        max_quantity: int | None = None,
        max_sides: int | None = None,
    ) -> None:
        self._parser = parser if parser is not None else NotationParser()
        self._tracer = tracer if tracer is not None else get_tracer()
        self._random_source = random_source if random_source is not None else get_random_source()
        self._max_quantity = max_quantity if max_quantity is not None else settings.max_quantity
        self._max_sides = max_sides if max_sides is not None else settings.max_sides

    def new_instance(self, notation: str) -> RollableNode:
        """Return the rollable described by notation.

        Raises:
            DiceSyntaxError: If the notation is malformed or out of range.
            UnknownAlgorithm: If a modifier token is not supported.
            IllegalValue: If an exploding modifier could never stop.
        """
        rollable = self._create(self._parser.parse(notation))
        logger.debug("Parsed %r as %s", notation, rollable.notation())
        return rollable

    def _create(self, definitions: Iterable[PoolDefinition]) -> RollableNode:
        items = [self._create_rollable(definition) for definition in definitions]
        return _flatten(Cup(*items, tracer=self._tracer))

    def _create_rollable(self, definition: PoolDefinition) -> RollableNode:
        rollable = self._create_pool(definition.pool)
        for modifier in definition.modifiers:
            rollable = self._decorate(rollable, modifier)
        return _flatten(rollable)

    def _create_pool(self, pool: SimplePool | CompositePool) -> RollableNode:
        if isinstance(pool, CompositePool):
            return self._create(pool.definitions)

        if pool.quantity > self._max_quantity:
            raise DiceSyntaxError(f"Too many dice: {pool.quantity} (max {self._max_quantity})")
        die = self._create_die(pool.size)
        if pool.quantity == 1:
            return die
        return Cup.from_rollable(die, pool.quantity, tracer=self._tracer)

    def _create_die(self, size: str) -> Die:
        notation = size.upper()
        if notation == "DF":
            return FudgeDie(self._random_source, self._tracer)
        if notation == "D%":
            return PercentileDie(self._random_source, self._tracer)
        if notation.startswith("D["):
            return CustomDie.from_notation(notation, self._random_source, self._tracer)

        die = SidedDie.from_notation(notation, self._random_source, self._tracer)
        if die.sides > self._max_sides:
            raise DiceSyntaxError(f"Too many sides: {die.sides} (max {self._max_sides})")
        return die

    def _decorate(self, rollable: RollableNode, modifier: ModifierDefinition) -> RollableNode:
        if modifier.kind == ModifierKind.explode:
            return Explode(rollable, modifier.operator, modifier.value, self._tracer)

        if modifier.value is None:
            raise DiceSyntaxError(f"The modifier {modifier.operator!r} needs a value")
        if modifier.kind == ModifierKind.arithmetic:
            return Arithmetic(rollable, modifier.operator, modifier.value, self._tracer)
        if modifier.kind == ModifierKind.dropkeep:
            return DropKeep(rollable, modifier.operator, modifier.value, self._tracer)
        raise UnknownAlgorithm(f"Unknown or unsupported modifier {modifier.kind!r}")


def parse(
    notation: str,
    tracer: Tracer | None = None,
    random_source: RandomSource | None = None,
) -> RollableNode:
    """Parse notation with a default factory.

    Args:
        notation: Dice notation, e.g. "4d6dl1+2".
        tracer: Optional tracer for every node of the tree.
        random_source: Optional integer generator for the dice.

    Returns:
        The root of the rollable tree.

    Raises:
        DiceSyntaxError: If the notation is malformed or out of range.
        UnknownAlgorithm: If a modifier token is not supported.
        IllegalValue: If an exploding modifier could never stop.
    """
    return Factory(tracer=tracer, random_source=random_source).new_instance(notation)

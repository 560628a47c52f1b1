"""Dice notation compiler and evaluator.

    >>> import dicecup
    >>> pool = dicecup.parse("4d6dl1")
    >>> pool.notation()
    '4D6DL1'
    >>> pool.minimum(), pool.maximum()
    (3, 18)
"""

from __future__ import annotations

from dicecup.cup import Cup
from dicecup.dice import CustomDie, Die, FudgeDie, PercentileDie, SidedDie
from dicecup.errors import DiceError, DiceSyntaxError, IllegalValue, UnknownAlgorithm
from dicecup.factory import Factory, RollableNode, parse
from dicecup.modifiers import Algorithm, Arithmetic, Comparator, DropKeep, Explode, Operator
from dicecup.notation import NotationParser
from dicecup.random_source import RandomSource, SystemRandomSource
from dicecup.rollable import Rollable
from dicecup.toss import Context, Toss
from dicecup.tracing import LogTracer, MemoryTracer, NullTracer, Tracer, get_tracer

__all__ = [
    "Algorithm",
    "Arithmetic",
    "Comparator",
    "Context",
    "Cup",
    "CustomDie",
    "DiceError",
    "DiceSyntaxError",
    "Die",
    "DropKeep",
    "Explode",
    "Factory",
    "FudgeDie",
    "IllegalValue",
    "LogTracer",
    "MemoryTracer",
    "NotationParser",
    "NullTracer",
    "Operator",
    "PercentileDie",
    "RandomSource",
    "Rollable",
    "RollableNode",
    "SidedDie",
    "SystemRandomSource",
    "Toss",
    "Tracer",
    "UnknownAlgorithm",
    "get_tracer",
    "parse",
]

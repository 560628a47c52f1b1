"""Dice notation parser.

Turns notation text into a list of pool definitions; building the actual
rollable tree is the factory's job. Supported notation:

    expression   := segment ('+' segment)*
    segment      := simple | complex
    simple       := quantity? 'd' size? modifiers?
    complex      := '(' expression ')' modifiers?
    size         := integer | 'f' | '%' | '[' integer (',' integer)+ ']'
    modifiers    := (sortmod | explodemod)? arith? arith?
    sortmod      := ('dh'|'dl'|'kh'|'kl') integer?
    explodemod   := '!' ('>'|'<'|'=')? integer?
    arith        := ('+'|'-'|'*'|'/'|'^') integer

Examples: 2d6, d20+5, 4d6dl1, 3dF!>0, (2d6+d4)*2, 2d[1,1,2,3].
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Protocol

from dicecup.errors import DiceSyntaxError

_POOL_RE = re.compile(
    r"""
    (?:
        (?P<simple>(?P<quantity>\d*)d(?P<size>\d+|f|%|\[.*?\])?)  # simple pool: 3d6, dF, d[1,2]
        |
        \((?P<mixed>.+)\)                                        # complex pool: (2d6+d4)
    )
    (?P<modifier>.*)
    """,
    re.IGNORECASE | re.VERBOSE,
)

_MODIFIER_RE = re.compile(
    r"""
    (?P<algo>
        (?P<type>!>|!<|!=|!|dh|dl|kh|kl)?   # exploding or sorting token
        (?P<threshold>\d+)?                 # its threshold
    )
    (?:(?P<operator1>[-+*/^])(?P<value1>\d+))?
    (?:(?P<operator2>[-+*/^])(?P<value2>\d+))?
    """,
    re.IGNORECASE | re.VERBOSE,
)

_DEFAULT_SIZE = "6"
_DEFAULT_DROPKEEP_THRESHOLD = 1


class ModifierKind(str, enum.Enum):
    """Which modifier a definition describes."""

    arithmetic = "arithmetic"
    dropkeep = "dropkeep"
    explode = "explode"


@dataclass(frozen=True)
class ModifierDefinition:
    """One modifier as written in the notation.

    Attributes:
        kind: The modifier to build.
        operator: Operator, sorting algorithm or comparator token.
        value: Operand or threshold; None when the notation omits it.
    """

    kind: ModifierKind | str
    operator: str
    value: int | None


@dataclass(frozen=True)
class SimplePool:
    """``quantity`` dice of one kind; size is the die notation, e.g. ``D6``."""

    size: str
    quantity: int = 1


@dataclass(frozen=True)
class CompositePool:
    """A parenthesized sub-expression."""

    definitions: tuple[PoolDefinition, ...]


@dataclass(frozen=True)
class PoolDefinition:
    pool: SimplePool | CompositePool
    modifiers: tuple[ModifierDefinition, ...] = ()


class Parser(Protocol):
    """Interface for notation parsers consumed by the factory."""

    def parse(self, notation: str) -> list[PoolDefinition]:
        """Return the pool definitions described by notation.

        Raises:
            DiceSyntaxError: If the notation is malformed.
        """
        ...


def split_segments(notation: str) -> list[str]:
    """Split notation on the ``+`` signs that separate pools.

    A ``+`` inside parentheses never splits. A ``+`` whose right-hand
    fragment has no die marker is an arithmetic suffix of the previous
    segment: ``2d3+4+d6`` gives ``["2d3+4", "d6"]``.
    """
    fragments: list[str] = []
    depth = 0
    start = 0
    for index, char in enumerate(notation):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "+" and depth == 0:
            fragments.append(notation[start:index])
            start = index + 1
    fragments.append(notation[start:])

    segments = [fragments[0]]
    for fragment in fragments[1:]:
        if "d" in fragment.lower():
            segments.append(fragment)
        else:
            segments[-1] += "+" + fragment
    return segments


class NotationParser:
    """Regex-driven recursive descent parser for dice notation."""

    def parse(self, notation: str) -> list[PoolDefinition]:
        """Parse notation into pool definitions.

        The empty string is the empty expression and yields no definitions.

        Args:
            notation: Dice notation, e.g. "2d6+1d4kh1". Case-insensitive.

        Returns:
            One definition per pool segment, in notation order.

        Raises:
            DiceSyntaxError: If any segment or modifier is malformed.
        """
        notation = notation.strip()
        if notation == "":
            return []
        return [self._parse_segment(segment) for segment in split_segments(notation)]

    def _parse_segment(self, segment: str) -> PoolDefinition:
        m = _POOL_RE.fullmatch(segment)
        if not m:
            raise DiceSyntaxError.due_to_invalid_notation(segment)

        modifier = m.group("modifier")
        modifier_match = _MODIFIER_RE.fullmatch(modifier)
        if not modifier_match:
            raise DiceSyntaxError.due_to_invalid_modifier(modifier)

        return PoolDefinition(
            pool=self._pool_definition(m),
            modifiers=self._modifier_definitions(modifier_match),
        )

    def _pool_definition(self, m: re.Match[str]) -> SimplePool | CompositePool:
        if m.group("mixed") is not None:
            return CompositePool(tuple(self.parse(m.group("mixed"))))

        # 0d6 is read as 1d6.
        quantity = int(m.group("quantity") or 1) or 1
        size = m.group("size") or _DEFAULT_SIZE
        return SimplePool(size=f"D{size.upper()}", quantity=quantity)

    def _modifier_definitions(self, m: re.Match[str]) -> tuple[ModifierDefinition, ...]:
        modifiers: list[ModifierDefinition] = []
        if m.group("algo"):
            modifiers.append(self._algorithm_definition(m.group("type") or "", m.group("threshold")))

        for operator_group, value_group in (("operator1", "value1"), ("operator2", "value2")):
            if m.group(operator_group) is not None:
                modifiers.append(
                    ModifierDefinition(
                        kind=ModifierKind.arithmetic,
                        operator=m.group(operator_group),
                        value=int(m.group(value_group)),
                    )
                )
        return tuple(modifiers)

    def _algorithm_definition(self, token: str, threshold: str | None) -> ModifierDefinition:
        value = int(threshold) if threshold is not None else None
        if token.startswith("!"):
            return ModifierDefinition(kind=ModifierKind.explode, operator=token[1:] or "=", value=value)

        if value is None:
            value = _DEFAULT_DROPKEEP_THRESHOLD
        return ModifierDefinition(kind=ModifierKind.dropkeep, operator=token.upper(), value=value)

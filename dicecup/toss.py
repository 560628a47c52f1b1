"""Result value objects produced by every evaluation."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

_RESERVED_KEYS = frozenset({"source", "method", "notation", "operation", "value"})


@dataclass(frozen=True)
class Context:
    """Where a Toss came from.

    Attributes:
        source: Class name of the node that produced the toss.
        method: Evaluation method: "roll", "minimum" or "maximum".
        notation: Canonical notation of the producing node.
        extensions: Extra key/values; reserved keys are dropped.
    """

    source: str
    method: str
    notation: str
    extensions: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        cleaned = {k: v for k, v in self.extensions.items() if k not in _RESERVED_KEYS}
        object.__setattr__(self, "extensions", MappingProxyType(cleaned))

    def as_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "method": self.method,
            "notation": self.notation,
            **self.extensions,
        }


@dataclass(frozen=True)
class Toss:
    """One evaluation result.

    Attributes:
        value: The computed integer.
        operation: Human-readable formula that produced the value, e.g. "3 + 4".
        context: Provenance of the result, if known.
    """

    value: int
    operation: str
    context: Context | None = None

    def __str__(self) -> str:
        return str(self.value)

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"operation": self.operation, "value": self.value}
        if self.context is None:
            return data
        return {**data, **self.context.as_dict()}

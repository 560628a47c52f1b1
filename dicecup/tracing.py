"""Tracer abstraction for observing individual evaluation steps.

Every node hands each :class:`~dicecup.toss.Toss` it produces to its tracer
right after computing it. When ``settings.trace_enabled`` is ``False`` (the
default) :func:`get_tracer` returns a no-op tracer, so nodes never need to
check whether tracing is on.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any, Protocol

from dicecup.config import DEFAULT_LOG_FORMAT, settings
from dicecup.toss import Toss

logger = logging.getLogger(__name__)

# Keys always available to a log format; extensions may add more.
_LOG_FIELDS = ("source", "method", "notation", "operation", "value")


class Tracer(Protocol):
    """Interface for evaluation observers."""

    def append(self, toss: Toss) -> None:
        """Record a single evaluation result.

        Implementations must not raise.

        Args:
            toss: The result just produced by a node.
        """
        ...


class NullTracer:
    """No-op tracer used when tracing is disabled."""

    def append(self, toss: Toss) -> None:
        """Discard the toss."""


class MemoryTracer:
    """Keeps every toss in evaluation order."""

    def __init__(self) -> None:
        self._tosses: list[Toss] = []

    def append(self, toss: Toss) -> None:
        self._tosses.append(toss)

    def __len__(self) -> int:
        return len(self._tosses)

    def __iter__(self) -> Iterator[Toss]:
        return iter(self._tosses)

    def is_empty(self) -> bool:
        return not self._tosses

    def clear(self) -> None:
        self._tosses.clear()

    def get(self, offset: int) -> Toss:
        """Return the toss recorded at offset; negative offsets count from the end.

        Raises:
            IndexError: If no toss is recorded at that offset.
        """
        count = len(self._tosses)
        if not -count <= offset < count:
            raise IndexError(f"{offset} is an invalid offset for {count} recorded tosses")
        return self._tosses[offset]

    def as_list(self) -> list[dict[str, Any]]:
        return [toss.as_dict() for toss in self._tosses]


class LogTracer:
    """Forwards every toss to a standard library logger.

    Args:
        logger: Logger receiving the records (defaults to this module's logger).
        level: Logging level used for every record.
        log_format: ``str.format`` template filled from ``Toss.as_dict()``.

    Raises:
        ValueError: If log_format references anything but the standard fields.
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.DEBUG,
        log_format: str = DEFAULT_LOG_FORMAT,
    ) -> None:
        try:
            log_format.format_map(dict.fromkeys(_LOG_FIELDS, ""))
        except (KeyError, IndexError, ValueError) as exc:
            raise ValueError(f"Invalid trace log format {log_format!r}") from exc
        self._logger = logger or logging.getLogger(__name__)
        self._level = level
        self._log_format = log_format

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def level(self) -> int:
        return self._level

    @property
    def log_format(self) -> str:
        return self._log_format

    def append(self, toss: Toss) -> None:
        if not self._logger.isEnabledFor(self._level):
            return
        fields = {**dict.fromkeys(_LOG_FIELDS, ""), **toss.as_dict()}
        self._logger.log(self._level, self._log_format.format_map(fields))


def get_tracer() -> NullTracer | LogTracer:
    """Return the configured tracer.

    Returns a :class:`NullTracer` when ``trace_enabled`` is ``False``,
    otherwise a :class:`LogTracer` using the level and format from config.
    """
    if not settings.trace_enabled:
        return NullTracer()
    level = logging.getLevelName(settings.trace_log_level.upper())
    if not isinstance(level, int):
        logger.warning("Unknown trace log level %r, using DEBUG", settings.trace_log_level)
        level = logging.DEBUG
    return LogTracer(level=level, log_format=settings.trace_log_format)

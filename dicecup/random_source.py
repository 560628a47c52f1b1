"""Injectable integer generators used by the dice."""

from __future__ import annotations

import random
from typing import Protocol


class RandomSource(Protocol):
    """Interface for uniform integer generation."""

    def generate_int(self, minimum: int, maximum: int) -> int:
        """Return a uniformly distributed integer in [minimum, maximum]."""
        ...


class SystemRandomSource:
    """Default source backed by the process-wide ``random`` module."""

    def generate_int(self, minimum: int, maximum: int) -> int:
        return random.randint(minimum, maximum)


_default_source = SystemRandomSource()


def get_random_source() -> SystemRandomSource:
    """Return the shared default random source."""
    return _default_source

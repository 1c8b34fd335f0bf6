from __future__ import annotations

import random
from collections.abc import Iterable
from typing import TypeVar

T = TypeVar("T")


def make_rng(seed: int | None = None) -> random.Random:
    return random.Random(seed)


def shuffled(items: Iterable[T], rng: random.Random) -> list[T]:
    """Return a new list holding ``items`` in a random order drawn from ``rng``."""
    result = list(items)
    rng.shuffle(result)
    return result

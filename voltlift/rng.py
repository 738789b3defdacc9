"""Shared seeded random number generator."""

from __future__ import annotations

import random
from typing import Any, MutableSequence

DEFAULT_SEED = 7

_rng = random.Random(DEFAULT_SEED)


def get_random_int(low: int, high: int) -> int:
    """Return a random integer in ``[low, high]``."""
    return _rng.randint(low, high)


def shuffle(items: MutableSequence[Any]) -> None:
    """Shuffle ``items`` in place."""
    _rng.shuffle(items)


def reset_with_seed(seed: int) -> None:
    """Reseed the shared generator."""
    _rng.seed(seed)
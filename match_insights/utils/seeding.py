"""
Seeded pseudo-random helpers.

Tie-breaking jitter is a pure function of a stable key (a match id or a
form string). Seeds come from zlib.crc32 because the built-in hash() of a
str changes between interpreter runs.
"""

import random
import zlib


def stable_seed(key: str) -> int:
    """32-bit seed derived from the UTF-8 bytes of key."""
    return zlib.crc32((key or "").encode('utf-8'))


def seeded_rng(key: str) -> random.Random:
    """Independent generator seeded from key."""
    return random.Random(stable_seed(key))


def seeded_uniform(key: str, low: float, high: float) -> float:
    """Float in [low, high] fixed by key."""
    return seeded_rng(key).uniform(low, high)


def seeded_randint(key: str, low: int, high: int) -> int:
    """Integer in [low, high] (both inclusive) fixed by key."""
    return seeded_rng(key).randint(low, high)

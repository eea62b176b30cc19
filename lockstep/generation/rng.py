"""Seeded string-keyed pseudo-random stream.

The seed string is hashed with xmur3 and the hash seeds a mulberry32
generator. All arithmetic is done on unsigned 32-bit values, so a given seed
string yields the same sequence on every platform.
"""

from __future__ import annotations

from collections.abc import MutableSequence
from typing import TypeVar

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296

T = TypeVar("T")


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


def _utf16_units(text: str) -> list[int]:
    raw = text.encode("utf-16-le")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def xmur3_seed(text: str) -> int:
    """Hash ``text`` to the first 32-bit seed of an xmur3 stream."""
    units = _utf16_units(text)
    h = (1779033703 ^ len(units)) & _MASK32
    for unit in units:
        h = _imul(h ^ unit, 3432918353)
        h = ((h << 13) | (h >> 19)) & _MASK32
    h = _imul(h ^ (h >> 16), 2246822507)
    h = _imul(h ^ (h >> 13), 3266489909)
    h ^= h >> 16
    return h & _MASK32


class SeededRandom:
    """mulberry32 stream seeded from a string."""

    def __init__(self, seed: str) -> None:
        self.seed = seed
        self._state = xmur3_seed(seed)

    def next_float(self) -> float:
        """Uniform float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        value = self._state
        t = _imul(value ^ (value >> 15), 1 | value)
        t ^= (t + _imul(t ^ (t >> 7), 61 | t)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in the inclusive range [low, high]."""
        if high < low:
            raise ValueError(f"Invalid int range: [{low}, {high}]")
        span = high - low + 1
        return low + int(self.next_float() * span)

    def coin(self, probability: float = 0.5) -> bool:
        return self.next_float() < probability

    def shuffle(self, items: MutableSequence[T]) -> None:
        """In-place Fisher-Yates shuffle."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]

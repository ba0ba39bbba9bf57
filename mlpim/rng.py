"""Reproduction of the C library's seeded rand() and weight initialisation."""

from __future__ import annotations

from collections import deque

import numpy as np

RAND_MAX = 2147483647

_STATE_WORDS = 34
_DISCARD = 310
_MODULUS = 2147483647


def _next_seed_word(word: int) -> int:
    """One step of the Lehmer generator, using truncating division."""
    hi = -((-word) // 127773) if word < 0 else word // 127773
    lo = word - hi * 127773
    word = 16807 * lo - 2836 * hi
    if word < 0:
        word += _MODULUS
    return word


class CRandom:
    """Additive feedback generator matching srand()/rand() of the C library."""

    def __init__(self, seed: int = 1) -> None:
        seed &= 0xFFFFFFFF
        if seed == 0:
            seed = 1
        word = seed - (1 << 32) if seed >= (1 << 31) else seed
        words = [word]
        for _ in range(30):
            word = _next_seed_word(word)
            words.append(word)
        words.extend(words[:3])
        self._state = deque((w & 0xFFFFFFFF for w in words), maxlen=_STATE_WORDS)
        for _ in range(_DISCARD):
            self._advance()

    def _advance(self) -> int:
        value = (self._state[-31] + self._state[-3]) & 0xFFFFFFFF
        self._state.append(value)
        return value

    def rand(self) -> int:
        """Next value in the range 0..RAND_MAX."""
        return self._advance() >> 1


def uniform_weights(rng: CRandom, count: int, scale: float = 0.1) -> np.ndarray:
    """Draw ``count`` float32 weights uniformly in [-scale, scale]."""
    if count < 0:
        raise ValueError("count must not be negative")
    values = [scale * (2.0 * rng.rand() / RAND_MAX - 1.0) for _ in range(count)]
    return np.array(values, dtype=np.float64).astype(np.float32)
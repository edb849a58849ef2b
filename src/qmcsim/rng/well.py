"""
Shared machinery for the WELL generators.

A WELL generator keeps its R words in a circular buffer of 32 entries and
moves its start index back by one at every step. Jumps ahead are done in
GF(2): the jumped state is the XOR of the states reached at the powers of
z whose coefficient is set in the jump polynomial (z^J mod P(z)).
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from typing import Sequence

from qmcsim.errors import InvalidSeedError
from qmcsim.rng.base import RandomStream, Seed, check_seed_length

logger = logging.getLogger(__name__)

BUFFER_SIZE = 32
BUFFER_MASK = 0x1F
WORD_BITS = 32
MASK32 = 0xFFFFFFFF
TWO32 = 0x100000000


class WellStream(RandomStream):
    """Base class for WELL streams; subclasses supply the recurrence and jump polynomials."""

    R: int = 0
    NORM: float = 0.0
    SUBSTREAM_POLY: Seed = ()
    STREAM_POLY: Seed = ()

    @staticmethod
    @abstractmethod
    def _step(state: list[int], i: int) -> int:
        """Apply one step to the buffer whose window starts at `i`; return the new start index."""
        ...

    @classmethod
    def advance_seed(cls, seed: Sequence[int], poly: Sequence[int]) -> list[int]:
        """
        Return `seed` jumped ahead by the polynomial `poly`.

        Bits of `poly` are read word by word, least significant bit first.
        Bit k selects the state reached after k steps.
        """
        r = cls.R
        state = list(seed[:r]) + [0] * (BUFFER_SIZE - r)
        i = 0
        x = [0] * r
        for word in poly:
            for _ in range(WORD_BITS):
                if word & 1:
                    for k in range(r):
                        x[k] ^= state[(i + k) & BUFFER_MASK]
                word >>= 1
                i = cls._step(state, i)
        return x

    @classmethod
    def check_word_range(cls, seed: Sequence[int]) -> Seed:
        seed = check_seed_length(seed, cls.R)
        for k, value in enumerate(seed):
            if not 0 <= value < TWO32:
                raise InvalidSeedError(f"Seed[{k}] = {value} is not a 32-bit unsigned value")
        return seed

    @classmethod
    def jump_stream(cls, seed: list[int]) -> list[int]:
        return cls.advance_seed(seed, cls.STREAM_POLY)

    def _jump_substream(self, seed: list[int]) -> list[int]:
        logger.debug("%s: jumping to next substream", self._label())
        return self.advance_seed(seed, self.SUBSTREAM_POLY)

    def reset_start_substream(self) -> None:
        self._state_i = 0
        self._state = list(self._substream) + [0] * (BUFFER_SIZE - self.R)

    @property
    def state(self) -> Seed:
        i = self._state_i
        return tuple(self._state[(i + k) & BUFFER_MASK] for k in range(self.R))

    def next_int32(self) -> int:
        """Advance one step and return the raw 32-bit output word."""
        self._state_i = self._step(self._state, self._state_i)
        return self._state[self._state_i]

    def _next_value(self) -> float:
        u = self.next_int32()
        # A zero word maps to 2^32 * NORM, just below 1.
        return (u if u else TWO32) * self.NORM

"""
MRG32k3a combined multiple recursive generator (L'Ecuyer 1999).

Two order-3 recurrences:

    x1[n] = (1403580 * x1[n-2] - 810728 * x1[n-3]) mod m1
    x2[n] = (527612 * x2[n-1] - 1370589 * x2[n-3]) mod m2

combined as (x1 - x2) mod m1, normalised to (0, 1). Period about 2^191,
split into streams of 2^127 values, each split into substreams of 2^76.
"""

from __future__ import annotations

from typing import Sequence

from qmcsim.errors import InvalidSeedError
from qmcsim.rng.base import RandomStream, Seed, check_seed_length
from qmcsim.util.arithmod import mat_vec_mod

M1 = 4294967087
M2 = 4294944443
A12 = 1403580
A13N = 810728
A21 = 527612
A23N = 1370589
NORM = 2.328306549295727688e-10

DEFAULT_SEED: Seed = (12345, 12345, 12345, 12345, 12345, 12345)

# One-step transition matrices
A1P0 = [[0, 1, 0], [0, 0, 1], [-A13N, A12, 0]]
A2P0 = [[0, 1, 0], [0, 0, 1], [-A23N, 0, A21]]

# A^(2^76): substream jump
A1P76 = [
    [82758667, 1871391091, 4127413238],
    [3672831523, 69195019, 1871391091],
    [3672091415, 3528743235, 69195019],
]
A2P76 = [
    [1511326704, 3759209742, 1610795712],
    [4292754251, 1511326704, 3889917532],
    [3859662829, 4292754251, 3708466080],
]

# A^(2^127): stream jump
A1P127 = [
    [2427906178, 3580155704, 949770784],
    [226153695, 1230515664, 3580155704],
    [1988835001, 986791581, 1230515664],
]
A2P127 = [
    [1464411153, 277697599, 1610723613],
    [32183930, 1464411153, 1022607788],
    [2824425944, 32183930, 2093834863],
]


def _jump(seed: Sequence[int], a1: Sequence[Sequence[int]], a2: Sequence[Sequence[int]]) -> list[int]:
    return mat_vec_mod(a1, seed[:3], M1) + mat_vec_mod(a2, seed[3:], M2)


class MRG32k3a(RandomStream):
    """
    MRG32k3a random stream.

    Each new instance starts 2^127 steps after the previous one created
    from the same seed sequence.
    """

    SEED_LENGTH = 6
    DEFAULT_SEED = DEFAULT_SEED

    @classmethod
    def validate_seed(cls, seed: Sequence[int]) -> None:
        seed = check_seed_length(seed, 6)
        for i, value in enumerate(seed[:3]):
            if not 0 <= value < M1:
                raise InvalidSeedError(f"Seed[{i}] >= {M1} or negative, Seed is not set.")
        for i, value in enumerate(seed[3:], start=3):
            if not 0 <= value < M2:
                raise InvalidSeedError(f"Seed[{i}] >= {M2} or negative, Seed is not set.")
        if seed[0] == 0 and seed[1] == 0 and seed[2] == 0:
            raise InvalidSeedError("First 3 seeds = 0.")
        if seed[3] == 0 and seed[4] == 0 and seed[5] == 0:
            raise InvalidSeedError("Last 3 seeds = 0.")

    @classmethod
    def jump_stream(cls, seed: list[int]) -> list[int]:
        return _jump(seed, A1P127, A2P127)

    def _jump_substream(self, seed: list[int]) -> list[int]:
        return _jump(seed, A1P76, A2P76)

    def reset_start_substream(self) -> None:
        self._state = list(self._substream)

    @property
    def state(self) -> Seed:
        return tuple(self._state)

    def _next_value(self) -> float:
        s = self._state

        p1 = (A12 * s[1] - A13N * s[0]) % M1
        s[0] = s[1]
        s[1] = s[2]
        s[2] = p1

        p2 = (A21 * s[5] - A23N * s[3]) % M2
        s[3] = s[4]
        s[4] = s[5]
        s[5] = p2

        if p1 > p2:
            return (p1 - p2) * NORM
        return (p1 - p2 + M1) * NORM

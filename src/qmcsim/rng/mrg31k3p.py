"""
MRG31k3p combined multiple recursive generator (L'Ecuyer and Touzin 2000).

Both components have modulus close to 2^31 and multipliers that are sums or
differences of powers of two. Period about 2^185, split into streams of
2^134 values and substreams of 2^72.

The state is kept newest first: (x11, x12, x13, x21, x22, x23).
"""

from __future__ import annotations

from typing import Sequence

from qmcsim.errors import InvalidSeedError
from qmcsim.rng.base import RandomStream, Seed, check_seed_length
from qmcsim.util.arithmod import mat_vec_mod

M1 = 2147483647  # 2^31 - 1
M2 = 2147462579  # 2^31 - 21069
NORM = 4.656612873077392578125e-10

DEFAULT_SEED: Seed = (12345, 12345, 12345, 12345, 12345, 12345)

# One-step transition matrices
A1P0 = [[0, 4194304, 129], [1, 0, 0], [0, 1, 0]]
A2P0 = [[32768, 0, 32769], [1, 0, 0], [0, 1, 0]]

# A^(2^72): substream jump
A1P72 = [
    [1516919229, 758510237, 499121365],
    [1884998244, 1516919229, 335398200],
    [601897748, 1884998244, 358115744],
]
A2P72 = [
    [1228857673, 1496414766, 954677935],
    [1133297478, 1407477216, 1496414766],
    [2002613992, 1639496704, 1407477216],
]

# A^(2^134): stream jump
A1P134 = [
    [1702500920, 1849582496, 1656874625],
    [828554832, 1702500920, 1512419905],
    [1143731069, 828554832, 102237247],
]
A2P134 = [
    [796789021, 1464208080, 607337906],
    [1241679051, 1431130166, 1464208080],
    [1401213391, 1178684362, 1431130166],
]


class MRG31k3p(RandomStream):
    """MRG31k3p random stream; a faster alternative to MRG32k3a."""

    SEED_LENGTH = 6
    DEFAULT_SEED = DEFAULT_SEED

    @classmethod
    def validate_seed(cls, seed: Sequence[int]) -> None:
        seed = check_seed_length(seed, 6)
        if seed[0] == 0 and seed[1] == 0 and seed[2] == 0:
            raise InvalidSeedError("The first 3 values must not be 0")
        if seed[3] == 0 and seed[4] == 0 and seed[5] == 0:
            raise InvalidSeedError("The last 3 values must not be 0")
        if any(not 0 <= v < M1 for v in seed[:3]):
            raise InvalidSeedError(f"The first 3 values must be in [0, {M1})")
        if any(not 0 <= v < M2 for v in seed[3:]):
            raise InvalidSeedError(f"The last 3 values must be in [0, {M2})")

    @classmethod
    def jump_stream(cls, seed: list[int]) -> list[int]:
        return mat_vec_mod(A1P134, seed[:3], M1) + mat_vec_mod(A2P134, seed[3:], M2)

    def _jump_substream(self, seed: list[int]) -> list[int]:
        return mat_vec_mod(A1P72, seed[:3], M1) + mat_vec_mod(A2P72, seed[3:], M2)

    def reset_start_substream(self) -> None:
        self._state = list(self._substream)

    @property
    def state(self) -> Seed:
        return tuple(self._state)

    def _next_value(self) -> float:
        s = self._state

        # x1[n] = (2^22 x1[n-2] + (2^7 + 1) x1[n-3]) mod M1
        y1 = (4194304 * s[1] + 129 * s[2]) % M1
        s[2] = s[1]
        s[1] = s[0]
        s[0] = y1

        # x2[n] = (2^15 x2[n-1] + (2^15 + 1) x2[n-3]) mod M2
        y2 = (32768 * s[3] + 32769 * s[5]) % M2
        s[5] = s[4]
        s[4] = s[3]
        s[3] = y2

        if y1 <= y2:
            return (y1 - y2 + M1) * NORM
        return (y1 - y2) * NORM

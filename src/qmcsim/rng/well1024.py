"""
WELL1024a generator (Panneton, L'Ecuyer and Matsumoto 2006).

32 words of state, period 2^1024 - 1, split into streams of 2^700 values
and substreams of 2^400.
"""

from __future__ import annotations

from typing import Sequence

from qmcsim.errors import InvalidSeedError
from qmcsim.rng.base import Seed
from qmcsim.rng.well import BUFFER_MASK, MASK32, WellStream

R = 32
M1 = 3
M2 = 24
M3 = 10
NORM = 1.0 / 0x100000001

DEFAULT_SEED: Seed = (
    0xDE410B75, 0x904FA5C7, 0x8BD4701E, 0x011EA361,
    0x6EB189E0, 0x7A2B0CE1, 0xE02631CA, 0x72EBA132,
    0x5189DA0F, 0x3EB72A2C, 0x51ABE513, 0x6D9EA57C,
    0x4D690BF1, 0x84217FCA, 0x7290DE1A, 0x429F5A48,
    0x6EC42EF3, 0x960AB315, 0x72C3A743, 0x48E13BF1,
    0x8917EAC8, 0x284AE026, 0x357BF240, 0x913B51AC,
    0x136AF195, 0x361ABC18, 0x731AB725, 0x63D3A7C9,
    0xE5F32A18, 0x91A8E164, 0x04EA61B5, 0xC72A6091,
)

# z^(2^400) mod P(z): substream jump
PW: Seed = (
    0xe44294e, 0xef237eff, 0x5e8b6bfb, 0xa724e67a,
    0x59994cfd, 0x6f7c3de1, 0x6735d50d, 0x4bfe199a,
    0x39c28e61, 0xfd075266, 0x96cc6d1f, 0x5dc1a685,
    0xd67fa444, 0xccc01b86, 0x8ff861c, 0xce113725,
    0x66707603, 0x38abb0fd, 0x7681f64, 0x104535c5,
    0xce4ae5f4, 0x50e37105, 0xd0c5f77f, 0x74c1ebf6,
    0x2ccf1505, 0xd1f21b86, 0x9a6c402e, 0xea34a31c,
    0x65e13d13, 0xde8f2f05, 0x89db804f, 0x8dc387f2,
)

# z^(2^700) mod P(z): stream jump
PZ: Seed = (
    0x7cab7da4, 0xef28b275, 0x18ffa66a, 0x2aa41e52,
    0x15b6bd86, 0x560d0d76, 0xcdeda011, 0x96231727,
    0xeec6a7f2, 0x99fd2be6, 0x92afa886, 0xcca777f0,
    0x972eff38, 0xa29f8e49, 0x22b4b9b6, 0x1089c898,
    0x6d569b25, 0x879044c2, 0x5e41b523, 0x33f19dd6,
    0x7c005fc5, 0x7f9a1907, 0x39bf9eed, 0x4bd86a74,
    0xe1e47e3, 0x96ead7ac, 0xc834f9ee, 0xd9ff4a4f,
    0x717f044c, 0xfd0e15e6, 0x6c18ef3, 0xbfdd2942,
)


class WELL1024(WellStream):
    """WELL1024a random stream with 32 bits of precision per draw."""

    SEED_LENGTH = R
    DEFAULT_SEED = DEFAULT_SEED
    R = R
    NORM = NORM
    SUBSTREAM_POLY = PW
    STREAM_POLY = PZ

    @classmethod
    def validate_seed(cls, seed: Sequence[int]) -> None:
        seed = cls.check_word_range(seed)
        if all(v == 0 for v in seed):
            raise InvalidSeedError("At least one of the elements of the seed must not be 0.")

    @staticmethod
    def _step(state: list[int], i: int) -> int:
        s = state
        m = BUFFER_MASK
        z0 = s[(i + 31) & m]
        z1 = s[i] ^ (s[(i + M1) & m] ^ (s[(i + M1) & m] >> 8))
        z2 = ((s[(i + M2) & m] ^ (s[(i + M2) & m] << 19)) ^ (s[(i + M3) & m] ^ (s[(i + M3) & m] << 14))) & MASK32
        s[i] = z1 ^ z2
        s[(i + 31) & m] = ((z0 ^ (z0 << 11)) ^ (z1 ^ (z1 << 7)) ^ (z2 ^ (z2 << 13))) & MASK32
        return (i + 31) & m

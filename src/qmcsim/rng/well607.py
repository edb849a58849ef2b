"""
WELL607 generator (Panneton, L'Ecuyer and Matsumoto 2006).

State of 607 bits held in 19 words of 32 bits (bit 0 of the last word is
not part of the state). Period 2^607 - 1, split into streams of 2^400
values and substreams of 2^150.
"""

from __future__ import annotations

from typing import Sequence

from qmcsim.errors import InvalidSeedError
from qmcsim.rng.base import Seed
from qmcsim.rng.well import BUFFER_MASK, MASK32, WellStream

R = 19
MASKU = 0x00000001
MASKL = 0xFFFFFFFE
NORM = 1.0 / 0x100000001

DEFAULT_SEED: Seed = (
    0xD6AFB71C, 0x82ADB18E, 0x326E714E, 0xB1EE42B6, 0xF1A834ED,
    0x04AE5721, 0xC5EA2843, 0xFA04116B, 0x6ACE14EF, 0xCD5781A0,
    0x6B1F731C, 0x7E3B8E3D, 0x8B34DE2A, 0x74EC15F5, 0x84EBC216,
    0x83EA2C61, 0xE4A83B1E, 0xA5D82CB9, 0x9E1A6C89,
)

# z^(2^150) mod P(z): substream jump
PW: Seed = (
    0x83167621, 0x6b5515c8, 0x61a62bd2, 0xbceaa78f, 0xac04b304,
    0x28a75ea4, 0xa9104058, 0x595ea53b, 0x35687e95, 0x7f8eca9b,
    0x30beffb8, 0xc61e6111, 0x284ee30e, 0x4e9cd901, 0x659633ba,
    0x344cc69e, 0xd6052ac1, 0x5d508b69, 0x62cf130,
)

# z^(2^400) mod P(z): stream jump
PZ: Seed = (
    0x70b2bdee, 0x595828f1, 0x85a17885, 0x5100c7b2, 0xd3333da2,
    0xb42857de, 0xf8a7a4a7, 0xabad2a33, 0xa2580cf, 0xf94c465e,
    0x7df951d5, 0x35467053, 0xb3c9a4e, 0x6a33977, 0x443910e,
    0xc25aec3d, 0xeb72e8c5, 0x8873b01, 0x7da57636,
)


class WELL607(WellStream):
    """WELL607 random stream with 32 bits of precision per draw."""

    SEED_LENGTH = R
    DEFAULT_SEED = DEFAULT_SEED
    R = R
    NORM = NORM
    SUBSTREAM_POLY = PW
    STREAM_POLY = PZ

    @classmethod
    def validate_seed(cls, seed: Sequence[int]) -> None:
        seed = cls.check_word_range(seed)
        if all(v == 0 for v in seed[: R - 1]) and seed[R - 1] & MASKL == 0:
            raise InvalidSeedError(
                "At least one of the elements of the seed must not be 0. "
                "If this element is the last one, it must not be equal to 0 or 1."
            )

    @staticmethod
    def _step(state: list[int], i: int) -> int:
        s = state
        m = BUFFER_MASK
        z0 = (s[(i + 18) & m] & MASKL) | (s[(i + 17) & m] & MASKU)
        z1 = (s[i] ^ (s[i] >> 19)) ^ (s[(i + 16) & m] ^ (s[(i + 16) & m] >> 11))
        z2 = (s[(i + 15) & m] ^ ((s[(i + 15) & m] << 14) & MASK32)) ^ s[(i + 14) & m]
        s[i] = z1 ^ z2
        s[(i - 1) & m] = (z0 ^ (z0 >> 18)) ^ z1 ^ ((s[i] ^ (s[i] << 5)) & MASK32)
        return (i - 1) & m

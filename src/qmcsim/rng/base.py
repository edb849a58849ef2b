"""
Random stream core.

Every generator keeps three copies of its state:

- the stream start (``Ig``), fixed for the life of the stream,
- the start of the current substream (``Bg``),
- the working state (``Cg``), advanced by every draw.

New streams take their seed from a :class:`SeedSequence`, which then jumps
ahead by the full stream length Z. Streams created from the same sequence
therefore never overlap. Each generator class owns a default sequence,
used when none is passed in; :func:`reset_package_seeds` puts all defaults
back to their initial seeds (call it between independent experiments).
"""

from __future__ import annotations

import copy
import logging
import operator
from abc import ABC, abstractmethod
from typing import Callable, Sequence

from qmcsim.errors import InvalidSeedError

logger = logging.getLogger(__name__)

INV_TWO24 = 5.9604644775390625e-8  # 2^-24
EPSILON = 5.5511151231257827e-17  # 2^-54

Seed = tuple[int, ...]

# One default sequence per generator class, created on first use.
_default_sequences: dict[type, SeedSequence] = {}


def reset_package_seeds() -> None:
    """Reset every generator's default seed sequence. Call between simulation runs."""
    _default_sequences.clear()
    logger.debug("package seed sequences reset")


class SeedSequence:
    """
    Source of non-overlapping stream seeds for one generator type.

    ``next_seed()`` hands out the current seed and advances it by the
    generator's full-stream jump. A sequence is owned by whoever constructs
    streams from it; it is not locked, so create streams serially or give
    each thread its own sequence.
    """

    def __init__(
        self,
        seed: Sequence[int],
        validate: Callable[[Sequence[int]], None],
        jump: Callable[[list[int]], list[int]],
    ) -> None:
        validate(seed)
        self._validate = validate
        self._jump = jump
        self._seed: Seed = as_seed(seed)

    @property
    def current(self) -> Seed:
        """Seed the next stream will receive."""
        return self._seed

    def next_seed(self) -> Seed:
        """Return the current seed and advance the sequence by one stream."""
        seed = self._seed
        self._seed = tuple(self._jump(list(seed)))
        return seed

    def set_seed(self, seed: Sequence[int]) -> None:
        """Restart the sequence at `seed`."""
        self._validate(seed)
        self._seed = as_seed(seed)

    def __repr__(self) -> str:
        return f"SeedSequence({list(self._seed)})"


def check_seed_length(seed: Sequence[int], length: int) -> Seed:
    """
    Raise InvalidSeedError unless `seed` holds exactly `length` integers.

    Returns the seed as a tuple of Python ints.
    """
    if len(seed) != length:
        raise InvalidSeedError(f"Seed must contain {length} values, got {len(seed)}")
    for value in seed:
        try:
            operator.index(value)
        except TypeError:
            raise InvalidSeedError(f"Seed values must be integers, got {value!r}") from None
    return as_seed(seed)


def as_seed(seed: Sequence[int]) -> Seed:
    """Copy a validated seed as a tuple of Python ints."""
    return tuple(operator.index(v) for v in seed)


class RandomStream(ABC):
    """
    Abstract base class for random number streams.

    Subclasses supply the recurrence (`_next_value`), the substream start
    (`reset_start_substream`), the two jumps and the seed rules. The base
    class provides stream bookkeeping, seeding, cloning and the uniform
    output helpers.
    """

    SEED_LENGTH: int = 0
    DEFAULT_SEED: Seed = ()

    def __init__(self, name: str | None = None, seeds: SeedSequence | None = None) -> None:
        self.name = name
        self._prec53 = False
        self._anti = False
        self._state: list[int] = []
        self._state_i = 0

        if seeds is None:
            seeds = type(self).default_seed_sequence()
        seed = seeds.next_seed()
        self._stream: list[int] = list(seed)
        self._substream: list[int] = list(seed)
        self.reset_start_stream()
        logger.debug("created %s stream %r with seed %s", type(self).__name__, name, list(seed))

    # ----------------------------------------------------------------- seeds

    @classmethod
    @abstractmethod
    def validate_seed(cls, seed: Sequence[int]) -> None:
        """Raise InvalidSeedError if `seed` is not a valid state."""
        ...

    @classmethod
    @abstractmethod
    def jump_stream(cls, seed: list[int]) -> list[int]:
        """Return `seed` advanced by one full stream (Z steps)."""
        ...

    @classmethod
    def seed_sequence(cls, seed: Sequence[int] | None = None) -> SeedSequence:
        """Create an independent seed sequence for this generator type."""
        return SeedSequence(cls.DEFAULT_SEED if seed is None else seed, cls.validate_seed, cls.jump_stream)

    @classmethod
    def default_seed_sequence(cls) -> SeedSequence:
        """Sequence used by constructors that are not given one."""
        seq = _default_sequences.get(cls)
        if seq is None:
            seq = cls.seed_sequence()
            _default_sequences[cls] = seq
        return seq

    @classmethod
    def set_package_seed(cls, seed: Sequence[int]) -> None:
        """Set the seed of the next stream created from the default sequence."""
        cls.default_seed_sequence().set_seed(seed)
        logger.debug("%s package seed set to %s", cls.__name__, list(seed))

    def set_seed(self, seed: Sequence[int]) -> None:
        """
        Restart this stream at `seed`.

        Only this stream is affected; it is no longer spaced Z values apart
        from the streams created around it.
        """
        type(self).validate_seed(seed)
        self._stream = list(as_seed(seed))
        self.reset_start_stream()

    # ----------------------------------------------------------- positioning

    def reset_start_stream(self) -> None:
        """Go back to the start of the stream."""
        self._substream = list(self._stream)
        self.reset_start_substream()

    @abstractmethod
    def reset_start_substream(self) -> None:
        """Go back to the start of the current substream."""
        ...

    def reset_next_substream(self) -> None:
        """Jump to the start of the next substream (V steps ahead)."""
        self._substream = self._jump_substream(self._substream)
        self.reset_start_substream()

    @abstractmethod
    def _jump_substream(self, seed: list[int]) -> list[int]:
        """Return `seed` advanced by one substream (V steps)."""
        ...

    @property
    @abstractmethod
    def state(self) -> Seed:
        """Current working state."""
        ...

    @property
    def stream_start(self) -> Seed:
        """Initial seed of the stream."""
        return tuple(self._stream)

    @property
    def substream_start(self) -> Seed:
        """Start of the current substream."""
        return tuple(self._substream)

    # ---------------------------------------------------------------- output

    @abstractmethod
    def _next_value(self) -> float:
        """Advance the recurrence one step and return a value in (0, 1)."""
        ...

    def increased_precision(self, incp: bool) -> None:
        """Use two draws per output (53 bits of precision) when `incp` is True."""
        self._prec53 = incp

    @property
    def antithetic(self) -> bool:
        """True if the stream returns 1 - u instead of u."""
        return self._anti

    @antithetic.setter
    def antithetic(self, anti: bool) -> None:
        self._anti = anti

    def next_double(self) -> float:
        """Return the next uniform value in (0, 1)."""
        u = self._next_value()
        if self._prec53:
            u = (u + self._next_value() * INV_TWO24) % 1.0 + EPSILON
        if self._anti:
            return 1.0 - u
        return u

    def __call__(self) -> float:
        return self.next_double()

    def next_int(self, i: int, j: int) -> int:
        """Return an integer uniformly distributed over {i, ..., j}."""
        if i > j:
            raise ValueError(f"{i} is larger than {j}.")
        return i + int(self.next_double() * (j - i + 1.0))

    def next_array_of_double(self, n: int) -> list[float]:
        """Return the next `n` uniform values."""
        if n < 0:
            raise ValueError("Must have a non-negative number of elements.")
        return [self.next_double() for _ in range(n)]

    def next_array_of_int(self, i: int, j: int, n: int) -> list[int]:
        """Return `n` integers uniformly distributed over {i, ..., j}."""
        if n < 0:
            raise ValueError("Must have a non-negative number of elements.")
        return [self.next_int(i, j) for _ in range(n)]

    # ----------------------------------------------------------------- misc

    def clone(self) -> RandomStream:
        """Return an independent copy positioned at the same point of the same stream."""
        twin = copy.copy(self)
        twin._stream = list(self._stream)
        twin._substream = list(self._substream)
        twin._state = list(self._state)
        return twin

    def _label(self) -> str:
        if self.name:
            return f"{type(self).__name__} {self.name}"
        return type(self).__name__

    def __str__(self) -> str:
        return f"The current state of the {self._label()}: Cg = {list(self.state)}"

    def describe(self) -> str:
        """Full dump of the stream: flags and the Ig, Bg and Cg states."""
        lines = [
            f"The {self._label()} stream:",
            f"   anti = {self._anti}",
            f"   prec53 = {self._prec53}",
            f"   Ig = {self._stream}",
            f"   Bg = {self._substream}",
            f"   Cg = {list(self.state)}",
        ]
        return "\n".join(lines)

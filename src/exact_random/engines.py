"""Random engines: the uniform integer sources digit generators draw from.

An engine is any callable returning uniformly distributed integers in the
closed range ``[min_value, max_value]``. Three are provided:

- MT19937: the 32-bit Mersenne Twister, seeded exactly like C++
  ``std::mt19937`` so that published reference sums reproduce
- RandomEngine: wraps any ``random.Random`` (or ``random.SystemRandom``)
- TableEngine: a finite list of pre-tabulated digits, e.g. a page of the
  RAND table of random digits
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from exact_random.errors import OutOfDigitsError

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    'MT19937',
    'Engine',
    'RandomEngine',
    'TableEngine',
]

_N = 624
_MASK_32 = 0xFFFFFFFF


@runtime_checkable
class Engine(Protocol):
    """Uniform integer source."""

    min_value: int
    max_value: int

    def __call__(self) -> int: ...


class MT19937:
    """32-bit Mersenne Twister with the ``std::mt19937`` seeding.

    Python's ``random.Random`` runs the same generator but seeds it through
    ``init_by_array``; here the state is built with the single-word
    ``init_genrand`` recurrence and loaded with ``setstate``, so
    ``MT19937(s)`` yields the same stream as ``std::mt19937(s)``.

    Example:
        >>> g = MT19937()
        >>> g.discard(9999)
        >>> g()
        4123659995
    """

    min_value = 0
    max_value = _MASK_32
    default_seed = 5489

    def __init__(self, seed: int = default_seed) -> None:
        self._rng = random.Random()
        self.seed(seed)

    def seed(self, value: int = default_seed) -> None:
        mt = [0] * _N
        mt[0] = value & _MASK_32
        for i in range(1, _N):
            prev = mt[i - 1]
            mt[i] = (1812433253 * (prev ^ (prev >> 30)) + i) & _MASK_32
        # Position _N forces a twist before the first output, as in std::mt19937.
        self._rng.setstate((3, (*mt, _N), None))

    def discard(self, n: int) -> None:
        """Advance the stream by ``n`` outputs."""
        for _ in range(n):
            self._rng.getrandbits(32)

    def __call__(self) -> int:
        return self._rng.getrandbits(32)


class RandomEngine:
    """Engine over a ``random.Random`` instance, producing ``bits``-bit words."""

    min_value = 0

    def __init__(self, rng: random.Random | None = None, bits: int = 32) -> None:
        if not 1 <= bits <= 64:
            msg = f'bits must be in [1, 64], got {bits}'
            raise ValueError(msg)
        self.rng = rng if rng is not None else random.Random()
        self.bits = bits
        self.max_value = (1 << bits) - 1

    def __call__(self) -> int:
        return self.rng.getrandbits(self.bits)


class TableEngine:
    """Finite engine replaying tabulated digits.

    ``digits`` is either a string of decimal characters (anything that is
    not '0'..'9' reads as 9, matching how the RAND tables were transcribed)
    or a sequence of integers in ``[0, base)``.

    Raises:
        OutOfDigitsError: When called after the last digit was consumed.
    """

    min_value = 0

    def __init__(self, digits: str | Sequence[int] = '', base: int = 10) -> None:
        self.base = base
        self.max_value = base - 1
        self.seed(digits)

    def seed(self, digits: str | Sequence[int] = '') -> None:
        """Replace the table and rewind to its start."""
        if isinstance(digits, str):
            self._digits = [_table_digit(c) for c in digits]
        else:
            self._digits = list(digits)
        self._pos = 0

    @property
    def position(self) -> int:
        """Number of digits consumed so far."""
        return self._pos

    def remaining(self) -> int:
        return len(self._digits) - self._pos

    def __call__(self) -> int:
        if self._pos >= len(self._digits):
            raise OutOfDigitsError(self._pos)
        d = self._digits[self._pos]
        self._pos += 1
        return d


def _table_digit(c: str) -> int:
    d = ord(c) - ord('0')
    return d if 0 <= d <= 9 else 9

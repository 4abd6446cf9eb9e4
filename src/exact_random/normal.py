"""Exact sampling of the unit normal distribution (Algorithm N)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exact_random._logging import get_logger
from exact_random.errors import UnsupportedBaseError
from exact_random.realfmt import FLOAT64
from exact_random.urand import URand

if TYPE_CHECKING:
    from decimal import Decimal
    from fractions import Fraction

    from exact_random.digits import DigitGenerator
    from exact_random.engines import Engine
    from exact_random.realfmt import RealFormat, Rounding

__all__ = ['UnitNormal']

log = get_logger(__name__)

# C() works on at most 15 bits of each digit so that n * tbase fits an int.
_C_MAX_BITS = 15


class _GeometricSteps:
    """Steps G and P shared by the normal and discrete normal samplers.

    Both draw an integer k with probability proportional to
    ``exp(-k/2) * exp(-k(k-1)/2)`` using Bernoulli(exp(-1/2)) trials built
    from u-rand comparisons, so no transcendental function is evaluated.
    """

    def __init__(self, digits: DigitGenerator) -> None:
        self.digits = digits
        self._y = URand(digits)
        self._z = URand(digits)

    @property
    def digit_generator(self) -> DigitGenerator:
        return self.digits

    def _h(self, engine: Engine) -> bool:
        """Bernoulli trial with success probability ``exp(-1/2)``."""
        y, z = self._y, self._z
        if not y.init().less_than_half(engine):
            return True
        while True:
            if not z.init().less_than(engine, y):
                return False
            if not y.init().less_than(engine, z):
                return True

    def _g(self, engine: Engine) -> int:
        """Geometric k: the number of successes before the first failed H."""
        n = 0
        while self._h(engine):
            n += 1
        return n

    def _p(self, engine: Engine, n: int) -> bool:
        """True with probability ``exp(-n/2)``."""
        return all(self._h(engine) for _ in range(n))


class UnitNormal(_GeometricSteps):
    """Algorithm N: exact unit normal deviates as u-rands.

    Step G picks k, step P accepts it with probability ``exp(-k(k-1)/2)``,
    then k+1 runs of step B accept a uniform fraction x with probability
    ``exp(-x(2k+x)/(2k+2))``. The result is ``+/-(k + x)`` with a fair sign.

    Args:
        digits: Digit generator; base at most 2**15 or a power of two.

    Raises:
        UnsupportedBaseError: For other bases.
    """

    def __init__(self, digits: DigitGenerator) -> None:
        if not (digits.base <= 1 << _C_MAX_BITS or digits.power_of_two):
            raise UnsupportedBaseError(digits.base, 'base must be at most 2**15 or a power of two')
        super().__init__(digits)
        self._x = URand(digits)
        if digits.power_of_two and digits.bits > _C_MAX_BITS:
            self._shift = digits.bits - _C_MAX_BITS
            self._tbase = 1 << _C_MAX_BITS
        else:
            self._shift = 0
            self._tbase = digits.base
        log.debug('unit_normal_created', base=digits.base, c_base=self._tbase)

    def generate(self, engine: Engine, x: URand | None = None) -> URand:
        """Sample into ``x`` (the sampler's own u-rand if omitted) and return it."""
        if x is None:
            x = self._x
        while True:
            k = self._g(engine)
            if not self._p(engine, k * (k - 1)):
                continue
            x.init()
            if not all(self._b(engine, k, x) for _ in range(k + 1)):
                continue
            x.set_integer(k)
            if self._y.init().less_than_half(engine):
                x.negate()
            return x

    def value(
        self,
        engine: Engine,
        fmt: RealFormat = FLOAT64,
        rounding: Rounding | str | None = None,
    ) -> float | Decimal | Fraction:
        """Sample and round exactly to ``fmt``."""
        return self.generate(engine).value(engine, fmt, rounding)

    def _c(self, engine: Engine, m: int) -> int:
        """Three-way choice: -1 w.p. 1/m, +1 w.p. 1/m, 0 w.p. 1 - 2/m."""
        n1, n2 = 1, 2
        tbase, shift = self._tbase, self._shift
        while True:
            d = self.digits(engine) >> shift
            n1 = max(0, n1 * tbase - d * m)
            if n1 >= m:
                return -1
            n2 = min(m, n2 * tbase - d * m)
            if n2 <= 0:
                return 1
            if n1 <= 0 and n2 >= m:
                return 0

    def _b(self, engine: Engine, k: int, x: URand) -> bool:
        """True with probability ``exp(-x(2k+x)/(2k+2))``."""
        n, m = 0, 2 * k + 2
        y, z = self._y, self._z
        while True:
            f = 0 if k else self._c(engine, m)
            if f < 0:
                break
            if not z.init().less_than(engine, y if n else x):
                break
            if k:
                f = self._c(engine, m)
            if f < 0:
                break
            if f == 0 and not y.init().less_than(engine, x):
                break
            y, z = z, y
            n += 1
        return n % 2 == 0

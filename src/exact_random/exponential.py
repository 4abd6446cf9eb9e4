"""Exact sampling of the unit exponential distribution (Algorithms V and E)."""

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

__all__ = ['UnitExponential']

log = get_logger(__name__)


class UnitExponential:
    """Von Neumann's exponential sampler on u-rands.

    Algorithm V accepts a uniform fraction p when a descending run of
    uniforms below p has even length; each rejection adds one to the
    integer part. Algorithm E (``bit_optimized=True``) first restricts p to
    ``(0, 1/2)`` and folds the parity of the rejection count into the
    leading digit, which halves the rejection work. E needs an even base.

    Args:
        digits: Digit generator.
        bit_optimized: Use Algorithm E instead of V.

    Raises:
        UnsupportedBaseError: If bit_optimized and the base is odd.
    """

    def __init__(self, digits: DigitGenerator, bit_optimized: bool = True) -> None:
        if bit_optimized and digits.base % 2:
            raise UnsupportedBaseError(digits.base, 'bit-optimized exponential needs an even base')
        self.digits = digits
        self.bit_optimized = bit_optimized
        self._v = URand(digits)
        self._w = URand(digits)
        self._x = URand(digits)
        log.debug('unit_exponential_created', base=digits.base, bit_optimized=bit_optimized)

    @property
    def digit_generator(self) -> DigitGenerator:
        return self.digits

    def generate(self, engine: Engine, x: URand | None = None) -> URand:
        """Sample into ``x`` (the sampler's own u-rand if omitted) and return it."""
        if x is None:
            x = self._x
        k = 0
        while not self._f(engine, x):
            k += 1
        if self.bit_optimized:
            if k % 2:
                x.set_raw_digit(0, x.raw_digit(0) + self.digits.base // 2)
            k //= 2
        x.set_integer(k)
        return x

    def value(
        self,
        engine: Engine,
        fmt: RealFormat = FLOAT64,
        rounding: Rounding | str | None = None,
    ) -> float | Decimal | Fraction:
        """Sample and round exactly to ``fmt``."""
        return self.generate(engine).value(engine, fmt, rounding)

    def _f(self, engine: Engine, p: URand) -> bool:
        """Reset p to a uniform and accept it with probability ``exp(-p)``."""
        p.init()
        if self.bit_optimized and not p.less_than_half(engine):
            return False
        v, w = self._v, self._w
        if not w.init().less_than(engine, p):
            return True
        while True:
            if not v.init().less_than(engine, w):
                return False
            if not w.init().less_than(engine, v):
                return True

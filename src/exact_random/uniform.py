"""Exact sampling of the unit uniform distribution."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exact_random.realfmt import FLOAT64
from exact_random.urand import URand

if TYPE_CHECKING:
    from decimal import Decimal
    from fractions import Fraction

    from exact_random.digits import DigitGenerator
    from exact_random.engines import Engine
    from exact_random.realfmt import RealFormat, Rounding

__all__ = ['UnitUniform']


class UnitUniform:
    """A fresh u-rand is already uniform on (0, 1); rounding does the rest."""

    def __init__(self, digits: DigitGenerator) -> None:
        self.digits = digits
        self._x = URand(digits)

    @property
    def digit_generator(self) -> DigitGenerator:
        return self.digits

    def generate(self, engine: Engine, x: URand | None = None) -> URand:
        if x is None:
            x = self._x
        return x.init()

    def value(
        self,
        engine: Engine,
        fmt: RealFormat = FLOAT64,
        rounding: Rounding | str | None = None,
    ) -> float | Decimal | Fraction:
        return self.generate(engine).value(engine, fmt, rounding)

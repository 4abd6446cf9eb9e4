"""Target real formats: the capability record u-rands round to.

A RealFormat says what a floating-point type can hold (radix, precision,
exponent range, denormals) and which Python type carries the rounded
result:

- ``float`` for IEEE binary32 and binary64 (binary32 values are exact in a
  Python float, so no extra type is needed)
- ``decimal`` for radix-10 formats, returned as ``decimal.Decimal``
- ``fraction`` for binary formats wider than a double, returned as
  ``fractions.Fraction``

Usage:
    >>> from exact_random.realfmt import FLOAT64, decimal_format
    >>> FLOAT64.make(1, 3, -2)
    0.75
    >>> decimal_format(20).make(-1, 5, -1)
    Decimal('-0.5')
"""

from __future__ import annotations

import math
from decimal import Decimal
from enum import StrEnum
from fractions import Fraction
from typing import Literal

import msgspec

__all__ = [
    'FLOAT32',
    'FLOAT64',
    'FLOAT128',
    'FORMATS',
    'RealFormat',
    'Rounding',
    'binary_format',
    'decimal_format',
]


class Rounding(StrEnum):
    """Directed rounding modes."""

    NEAREST = 'nearest'
    TOWARD_ZERO = 'toward_zero'
    UPWARD = 'upward'
    DOWNWARD = 'downward'
    AWAY_FROM_ZERO = 'away_from_zero'


ResultKind = Literal['float', 'decimal', 'fraction']


class RealFormat(msgspec.Struct, frozen=True):
    """Description of a target floating-point type.

    Exponents follow the ``std::numeric_limits`` convention: a normalized
    value is ``0.d1 d2 ... x radix**e`` with ``min_exponent <= e <=
    max_exponent``, so the smallest normal number is
    ``radix**(min_exponent - 1)``.

    Attributes:
        name: Registry name, e.g. "float64".
        radix: 2 or 10.
        precision: Significand length in radix digits.
        min_exponent: Smallest normalized exponent.
        max_exponent: Largest exponent.
        has_denormals: Whether values below the smallest normal are representable.
        round_style: Rounding mode used when a caller gives none.
        kind: Python type carrying results.
    """

    name: str
    radix: Literal[2, 10]
    precision: int
    min_exponent: int
    max_exponent: int
    has_denormals: bool = True
    round_style: Rounding = Rounding.NEAREST
    kind: ResultKind = 'float'

    @property
    def binary(self) -> bool:
        return self.radix == 2

    def make(self, sign: int, mantissa: int, exponent: int) -> float | Decimal | Fraction:
        """Build ``sign * mantissa * radix**exponent`` exactly in the result type.

        The caller guarantees the value is representable; a negative sign
        on a zero mantissa gives a negative zero where the type has one.
        """
        if self.kind == 'float':
            return math.copysign(math.ldexp(mantissa, exponent), sign)
        if self.kind == 'decimal':
            return Decimal(f'{"-" if sign < 0 else ""}{mantissa}E{exponent}')
        if exponent >= 0:
            return Fraction(sign * mantissa * self.radix**exponent)
        return Fraction(sign * mantissa, self.radix**-exponent)

    def tiny(self) -> float | Decimal | Fraction:
        """Smallest positive normal number."""
        return self.make(1, 1, self.min_exponent - 1)

    def largest(self) -> float | Decimal | Fraction:
        """Largest finite number."""
        return self.make(1, self.radix**self.precision - 1, self.max_exponent - self.precision)


FLOAT32 = RealFormat(name='float32', radix=2, precision=24, min_exponent=-125, max_exponent=128)
"""IEEE binary32; results carried as float."""

FLOAT64 = RealFormat(name='float64', radix=2, precision=53, min_exponent=-1021, max_exponent=1024)
"""IEEE binary64."""

FLOAT128 = RealFormat(
    name='float128',
    radix=2,
    precision=113,
    min_exponent=-16381,
    max_exponent=16384,
    kind='fraction',
)
"""IEEE binary128; results carried as Fraction."""


def decimal_format(
    precision: int,
    min_exponent: int = -999_999,
    max_exponent: int = 999_999,
    *,
    name: str | None = None,
    rounding: Rounding = Rounding.NEAREST,
) -> RealFormat:
    """Radix-10 format with ``precision`` significant digits, results as Decimal."""
    return RealFormat(
        name=name or f'decimal{precision}',
        radix=10,
        precision=precision,
        min_exponent=min_exponent,
        max_exponent=max_exponent,
        round_style=rounding,
        kind='decimal',
    )


def binary_format(
    precision: int,
    *,
    name: str | None = None,
    rounding: Rounding = Rounding.NEAREST,
) -> RealFormat:
    """Binary format with a runtime precision and a huge exponent range.

    Like an MPFR number: no denormals, and the exponent range is wide
    enough that underflow never occurs in practice.
    """
    return RealFormat(
        name=name or f'binary{precision}',
        radix=2,
        precision=precision,
        min_exponent=-(1 << 30),
        max_exponent=1 << 30,
        has_denormals=False,
        round_style=rounding,
        kind='fraction',
    )


FORMATS: dict[str, RealFormat] = {
    'float32': FLOAT32,
    'float64': FLOAT64,
    'float128': FLOAT128,
    'decimal32': decimal_format(7, -94, 97, name='decimal32'),
    'decimal64': decimal_format(16, -382, 385, name='decimal64'),
    'decimal128': decimal_format(34, -6142, 6145, name='decimal128'),
}
"""Predefined formats by name (the values accepted for EXACT_RANDOM_FORMAT)."""

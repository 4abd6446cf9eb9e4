"""Lazy arbitrary-precision uniform deviates (u-rands).

A u-rand is ``s * (n + 0.d0 d1 d2 ...)`` in base b: a sign, a non-negative
integer part and a fraction whose digits are drawn only when a comparison
or a rounding step needs them. Digits once drawn are cached, so every
question asked of the same u-rand is answered consistently.

All operations that may draw digits take the engine explicitly; the digit
generator is shared (borrowed) by all u-rands and i-rands of one sampler.
"""

from __future__ import annotations

import re
from fractions import Fraction
from typing import TYPE_CHECKING

from exact_random.errors import IncompatibleFormatError, UnsupportedBaseError
from exact_random.realfmt import FLOAT64, Rounding

if TYPE_CHECKING:
    from decimal import Decimal

    from exact_random.digits import DigitGenerator
    from exact_random.engines import Engine
    from exact_random.irand import IRand
    from exact_random.realfmt import RealFormat

__all__ = [
    'URand',
    'check_format',
    'parse_fixed',
]

_HEX = '0123456789abcdef'
_MIN_EXP_FLOOR = -(1 << 30)


def check_format(fmt: RealFormat, digits: DigitGenerator) -> None:
    """Raise unless u-rands over ``digits`` can be rounded exactly to ``fmt``.

    Exact rounding needs the digits to line up with the format's radix:
    either a binary format and a power-of-two base, or a base equal to the
    (even) radix.

    Raises:
        IncompatibleFormatError: If the pair is unsupported.
    """
    base = digits.base
    if not ((fmt.radix == 2 and digits.power_of_two) or (fmt.radix == base and base % 2 == 0)):
        raise IncompatibleFormatError(
            fmt.name, base, 'need radix 2 with a power-of-two base, or radix equal to an even base'
        )
    if fmt.max_exponent < (32 if fmt.radix == 2 else 10):
        raise IncompatibleFormatError(fmt.name, base, f'max_exponent {fmt.max_exponent} too small')


def _check_printable(digits: DigitGenerator) -> None:
    if not (digits.base <= 16 or (digits.power_of_two and digits.bits % 4 == 0)):
        raise UnsupportedBaseError(digits.base, 'printing needs base <= 16 or a power of 16')


def _digit_width(base: int) -> int:
    return ((base - 1).bit_length() + 3) // 4


class URand:
    """Uniform deviate in ``(0, 1)`` (after ``init``) with lazily drawn digits.

    Args:
        digits: The digit generator shared with the rest of the sampler.
    """

    __slots__ = ('_d', '_n', '_s', 'digits')

    def __init__(self, digits: DigitGenerator) -> None:
        self.digits = digits
        self._s = 1
        self._n = 0
        self._d: list[int] = []

    def init(self) -> URand:
        """Reset to a fresh uniform deviate in (0, 1); returns self for chaining."""
        self._s = 1
        self._n = 0
        self._d.clear()
        return self

    def swap(self, other: URand) -> None:
        """Exchange values with ``other``; the digit generators stay put."""
        if other is self:
            return
        self._s, other._s = other._s, self._s
        self._n, other._n = other._n, self._n
        self._d, other._d = other._d, self._d

    def copy(self) -> URand:
        x = URand(self.digits)
        x._s = self._s
        x._n = self._n
        x._d = list(self._d)
        return x

    @property
    def sign(self) -> int:
        return self._s

    def negate(self) -> None:
        self._s = -self._s

    @property
    def integer(self) -> int:
        return self._n

    def set_integer(self, n: int) -> None:
        if n < 0:
            msg = f'integer part must be non-negative, got {n}'
            raise ValueError(msg)
        self._n = n

    @property
    def ndigits(self) -> int:
        """Number of fraction digits drawn so far."""
        return len(self._d)

    def digit(self, engine: Engine, k: int) -> int:
        """The k-th fraction digit (from 0), drawing digits up to it as needed."""
        d = self._d
        while len(d) <= k:
            d.append(self.digits(engine))
        return d[k]

    def raw_digit(self, k: int) -> int:
        """The k-th fraction digit, which must already be drawn."""
        return self._d[k]

    def set_raw_digit(self, k: int, value: int) -> None:
        self._d[k] = value

    # --- Comparisons ---

    def less_than(self, engine: Engine, other: URand) -> bool:
        """Test ``self < other``, drawing digits only while they tie."""
        if other is self:
            return False
        if self._s != other._s:
            return self._s < other._s
        if self._n != other._n:
            return (self._s < 0) ^ (self._n < other._n)
        k = 0
        while True:
            a = self.digit(engine, k)
            b = other.digit(engine, k)
            if a != b:
                return (self._s < 0) ^ (a < b)
            k += 1

    def less_than_half(self, engine: Engine) -> bool:
        if self._s < 0:
            return True
        if self._n > 0:
            return False
        return self.truncates(engine, 0)

    def truncates(self, engine: Engine, k: int) -> bool:
        """Whether the digits from position k on round digit ``k - 1`` toward zero.

        With an even base a single digit decides; with an odd base a middle
        digit defers to the next one. ``k = 0`` rounds the integer part.
        """
        bm1 = self.digits.max_value
        lo, hi = (bm1 - 1) // 2, bm1 // 2
        while True:
            d = self.digit(engine, k)
            if d <= lo:
                return True
            if d > hi:
                return False
            k += 1

    def compare(self, engine: Engine, u1: int, u2: int, v: int) -> int:
        """Place self relative to ``u1/v`` and ``u2/v`` (requires ``v > 0``, ``u2 > u1``).

        Returns:
            -1 if self < u1/v, +1 if self > u2/v, else 0 (fraction bracketed).
        """
        base = self.digits.base
        s = self._s
        u1 = max(0, s * u1 - self._n * v)
        u2 = min(v, s * u2 - self._n * v)
        k = 0
        while True:
            if u1 >= v:
                return -s
            if u2 <= 0:
                return s
            if u1 <= 0 and u2 >= v:
                return 0
            d = self.digit(engine, k)
            u1 = max(0, u1 * base - d * v)
            u2 = min(v, u2 * base - d * v)
            k += 1

    def less_than_range(self, engine: Engine, u0: int, c: int, v: int, h: IRand) -> bool:
        """Test ``self < (u0 + h*c)/v`` for an i-rand h (``v > 0``, ``c > 0``), refining h on ties."""
        while True:
            r = self.compare(engine, u0 + h.min() * c, u0 + h.max() * c, v)
            if r < 0:
                return True
            if r > 0:
                return False
            h.refine(engine)

    # --- Rational and float views ---

    def raw_rational(self, k: int) -> tuple[int, int]:
        """Lower end of the range using the first k (drawn) digits, as ``(num, den)``.

        Not reduced; the upper end is ``(num + 1)/den``.
        """
        base = self.digits.base
        if base > 256:
            raise UnsupportedBaseError(base, 'rational views need base <= 256')
        num, den = self._n, 1
        for j in range(k):
            num = base * num + self._d[j]
            den *= base
        if self._s < 0:
            num = -num - 1
        return num, den

    def rational(self, k: int | None = None) -> tuple[int, int]:
        return self.raw_rational(self.ndigits if k is None else k)

    def rational_at(self, engine: Engine, k: int) -> tuple[int, int]:
        """Like raw_rational, drawing the first k digits if needed."""
        if k:
            self.digit(engine, k - 1)
        return self.raw_rational(k)

    def range(self) -> tuple[float, float]:
        """Approximate float bounds of the current interval."""
        x, d, v = 0.0, 1.0, self.digits.inv_base()
        for dk in reversed(self._d):
            x = (dk + x) * v
            d *= v
        x += self._n
        if self._s > 0:
            return x, x + d
        return -(x + d), -x

    def midpoint(self, engine: Engine | None = None, k: int = 0) -> float:
        """Approximate midpoint, after drawing at least k digits when an engine is given."""
        if engine is not None and k:
            self.digit(engine, k - 1)
        lo, hi = self.range()
        return (lo + hi) / 2

    # --- Exact rounding ---

    def value_with_flag(
        self,
        engine: Engine,
        fmt: RealFormat = FLOAT64,
        rounding: Rounding | str | None = None,
    ) -> tuple[float | Decimal | Fraction, int]:
        """Round exactly to ``fmt`` and report the direction.

        Draws just the digits needed to find the leading digit (handling
        denormals and underflow) and then the rounding digit.

        Returns:
            The rounded value and an inexact flag: +1 if the result is above
            the true value, -1 if below.

        Raises:
            IncompatibleFormatError: If fmt cannot be produced from this base.
        """
        check_format(fmt, self.digits)
        mode = fmt.round_style if rounding is None else Rounding(rounding)
        s, n = self._s, self._n
        match mode:
            case Rounding.NEAREST:
                flag = 0
            case Rounding.TOWARD_ZERO:
                flag = -1
            case Rounding.UPWARD:
                flag = s
            case Rounding.DOWNWARD:
                flag = -s
            case _:
                flag = 1

        radix = fmt.radix
        binary = fmt.binary
        xbits = self.digits.bits if binary else 1
        min_exp = max(fmt.min_exponent, _MIN_EXP_FLOOR)

        # lead: exponent of the leading digit (0.5 sits at position 0)
        if n:
            lead = n.bit_length() if binary else len(str(n))
        else:
            i = 0
            limit = (-min_exp) // xbits
            while self.digit(engine, i) == 0 and i < limit:
                i += 1
            d = self._d[i]
            lead = (d.bit_length() if binary else (1 if d else 0)) - (i + 1) * xbits
            if lead < min_exp:
                lead = min_exp if fmt.has_denormals else min_exp - 1
        trail = lead - (fmt.precision if lead >= min_exp else 0)

        if flag == 0:
            if binary:
                if trail > 0:
                    bit = (n >> (trail - 1)) & 1
                else:
                    bit = (self.digit(engine, (-trail) // xbits) >> (xbits - 1 - (-trail) % xbits)) & 1
            elif trail > 0:
                bit = (n // radix ** (trail - 1)) % radix // (radix // 2)
            else:
                bit = self.digit(engine, -trail) // (radix // 2)
            flag = 1 if bit else -1

        z = 1 if flag > 0 else 0
        if trail >= 0:
            mantissa = n >> trail if binary else n // radix**trail
        elif lead >= min_exp:
            k = (-trail - 1) // xbits
            self.digit(engine, k)
            mantissa = n
            for j in range(k + 1):
                mantissa = (mantissa << xbits) | self._d[j] if binary else mantissa * radix + self._d[j]
            if binary:
                mantissa >>= (k + 1) * xbits + trail
        else:
            # underflow: zero or the smallest normal
            return fmt.make(s, z, min_exp - 1), flag * s
        return fmt.make(s, mantissa + z, trail), flag * s

    def value(
        self,
        engine: Engine,
        fmt: RealFormat = FLOAT64,
        rounding: Rounding | str | None = None,
    ) -> float | Decimal | Fraction:
        """Round exactly to ``fmt`` (see value_with_flag)."""
        return self.value_with_flag(engine, fmt, rounding)[0]

    # --- Printing ---

    def _bare(self) -> str:
        _check_printable(self.digits)
        base = self.digits.base
        parts = ['-' if self._s < 0 else '+', _format_integer(self._n, base, self.digits.power_of_two)]
        if self._d:
            width = _digit_width(base)
            parts.append('.')
            parts.extend(format(d, f'0{width}x') for d in self._d)
        return ''.join(parts)

    def to_string(self) -> str:
        """Sign, integer part, drawn digits, then '...' for the undrawn tail.

        Raises:
            UnsupportedBaseError: Unless the base is <= 16 or a power of 16.
        """
        return self._bare() + '...'

    def to_fixed(self, engine: Engine, k: int) -> str:
        """Round to k fraction digits, marking the true value as beyond '(+)' or short '(-)'."""
        trunc = self.truncates(engine, k)
        x = self.copy()
        del x._d[k:]
        if not trunc:
            bm1 = self.digits.max_value
            for i in reversed(range(k)):
                if x._d[i] < bm1:
                    x._d[i] += 1
                    break
                x._d[i] = 0
            else:
                x._n += 1
        return x._bare() + ('(+)' if trunc else '(-)')

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f'URand(sign={self._s}, integer={self._n}, digits={self._d})'


def _format_integer(n: int, base: int, power_of_two: bool) -> str:
    if power_of_two and base >= 16:
        return format(n, 'x')
    if n == 0:
        return '0'
    out = []
    while n:
        n, r = divmod(n, base)
        out.append(_HEX[r])
    return ''.join(reversed(out))


_FIXED_RE = re.compile(r'^([+-]?)([0-9a-f]+)(?:\.([0-9a-f]*))?(?:\.\.\.|\(\+\)|\(-\))?$')


def parse_fixed(text: str, base: int) -> Fraction:
    """Read a printed u-rand (``to_string`` or ``to_fixed`` output) as an exact Fraction.

    The '...', '(+)' and '(-)' markers are ignored; the result is the
    printed prefix itself.

    Raises:
        ValueError: If text is not in the printed form for ``base``.
    """
    m = _FIXED_RE.match(text.strip().lower())
    if m is None:
        msg = f'not a fixed-point u-rand string: {text!r}'
        raise ValueError(msg)
    sign, int_part, frac_part = m.group(1), m.group(2), m.group(3) or ''
    power_of_two = base & (base - 1) == 0
    n = int(int_part, 16) if power_of_two and base >= 16 else int(int_part, base)
    width = _digit_width(base)
    if len(frac_part) % width:
        msg = f'fraction of {text!r} is not a whole number of base-{base} digits'
        raise ValueError(msg)
    value = Fraction(n)
    scale = Fraction(1)
    for i in range(0, len(frac_part), width):
        d = int(frac_part[i : i + width], 16)
        if d >= base:
            msg = f'digit {d} out of range for base {base}'
            raise ValueError(msg)
        scale /= base
        value += d * scale
    return -value if sign == '-' else value

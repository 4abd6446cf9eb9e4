"""Partially sampled uniform integers (i-rands)."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from exact_random.digits import DigitGenerator
    from exact_random.engines import Engine

__all__ = ['IRand']


class IRand:
    """A uniform integer in ``[0, m)`` resolved only as far as needed.

    The current state is the range ``a + [0, d)`` with ``d = base**l``; the
    true value lies somewhere in it, uniformly. ``refine`` draws one digit
    and shrinks the range by a factor of base. ``init`` uses Lumbroso's
    method (generalised from bits to base-b digits): draw digits until the
    outcome is pinned down to a power-of-base block lying inside a single
    residue class, which uses the fewest digits on average.

    Example:
        >>> from exact_random.digits import DigitGenerator
        >>> from exact_random.engines import MT19937
        >>> g, D = MT19937(), DigitGenerator(2)
        >>> h = IRand(D).init(g, 6)
        >>> 0 <= h.min() <= h.max() < 6
        True
        >>> h.value(g) in range(6)
        True
    """

    __slots__ = ('_a', '_d', '_l', 'digits')

    def __init__(self, digits: DigitGenerator) -> None:
        self.digits = digits
        self._a = 0
        self._d = 1
        self._l = 0

    def init(self, engine: Engine, m: int) -> IRand:
        """Start a new draw uniform in ``[0, m)``; ``m <= 0`` is taken as 1."""
        if m <= 0:
            m = 1
        b = self.digits.base
        v, c = 1, 0
        while True:
            self._l = 0
            w, a, d = v, c, 1
            while True:
                if w >= m:
                    j = (a // m) * m
                    a -= j
                    w -= j
                    if w >= m:
                        if a + d <= m:
                            self._a = a
                            self._d = d
                            return self
                        break
                w *= b
                a *= b
                d *= b
                self._l += 1
            j = (v // m) * m
            v -= j
            c -= j
            v *= b
            c = c * b + self.digits(engine)

    def min(self) -> int:
        return self._a

    def max(self) -> int:
        return self._a + self._d - 1

    def entropy(self) -> int:
        """Number of digits still needed to resolve the value."""
        return self._l

    def refine(self, engine: Engine) -> None:
        """Draw one more digit, narrowing the range."""
        if self._l > 0:
            self._l -= 1
            self._d //= self.digits.base
            self._a += self.digits(engine) * self._d

    def negate(self) -> None:
        self._a = -self.max()

    def add(self, c: int) -> None:
        self._a += c

    def less_than(self, engine: Engine, m: int, n: int = 1) -> bool:
        """Test ``self < m/n`` for ``n > 0``, refining only on a tie."""
        while True:
            if n * self.max() < m:
                return True
            if not n * self.min() < m:
                return False
            self.refine(engine)

    def less_than_equal(self, engine: Engine, m: int, n: int = 1) -> bool:
        return self.less_than(engine, m + 1, n)

    def greater_than(self, engine: Engine, m: int, n: int = 1) -> bool:
        return not self.less_than_equal(engine, m, n)

    def greater_than_equal(self, engine: Engine, m: int, n: int = 1) -> bool:
        return not self.less_than(engine, m, n)

    def value(self, engine: Engine) -> int:
        """Resolve completely and return the integer."""
        while self._l:
            self.refine(engine)
        return self._a

    __call__ = value

    def __str__(self) -> str:
        if self._l:
            return f'{self.min()}+[0,{self._d})'
        return str(self.min())

    def __repr__(self) -> str:
        return f'IRand({self})'

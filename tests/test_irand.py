"""Tests for partially sampled integers."""

from __future__ import annotations

from collections import Counter

from hypothesis import given
from hypothesis import strategies as st

from exact_random.digits import DigitGenerator
from exact_random.engines import MT19937, TableEngine
from exact_random.irand import IRand
from exact_random.reference import chi_squared
from strategies import ranges, seeds


def _binary(bits: list[int]) -> tuple[TableEngine, DigitGenerator]:
    return TableEngine(bits, base=2), DigitGenerator(2)


class TestInit:
    """Lumbroso sampling stops as early as the outcome allows."""

    def test_single_outcome_needs_no_digits(self) -> None:
        g, d = _binary([])
        h = IRand(d).init(g, 1)
        assert h.entropy() == 0
        assert h.value(g) == 0
        assert d.count == 0

    def test_non_positive_range_is_one(self) -> None:
        g, d = _binary([])
        assert IRand(d).init(g, 0).value(g) == 0
        assert IRand(d).init(g, -5).value(g) == 0

    def test_power_of_base_range_is_left_unresolved(self) -> None:
        g, d = _binary([1])
        h = IRand(d).init(g, 2)
        assert d.count == 0
        assert h.entropy() == 1
        assert (h.min(), h.max()) == (0, 1)
        assert str(h) == '0+[0,2)'
        assert h.value(g) == 1
        assert str(h) == '1'

    def test_range_three_early_exit(self) -> None:
        # a leading 0 leaves the sub-range [0, 2), which fits inside [0, 3)
        g, d = _binary([0, 1])
        h = IRand(d).init(g, 3)
        assert d.count == 1
        assert h.entropy() == 1
        assert h() == 1
        assert d.count == 2

    def test_range_three_two_digits(self) -> None:
        g, d = _binary([1, 0])
        h = IRand(d).init(g, 3)
        assert h.entropy() == 0
        assert h.value(g) == 2

    def test_range_three_rejects_and_restarts(self) -> None:
        # 0.11 lands in the rejected quarter; the next draw restarts
        g, d = _binary([1, 1, 0, 0])
        assert IRand(d).init(g, 3).value(g) == 0
        assert g.position == 4

    @given(m=ranges, seed=seeds)
    def test_value_in_range(self, m: int, seed: int) -> None:
        g = MT19937(seed)
        h = IRand(DigitGenerator(2)).init(g, m)
        lo, hi = h.min(), h.max()
        assert 0 <= lo <= hi < m
        v = h.value(g)
        assert lo <= v <= hi

    @given(m=ranges, seed=seeds, base=st.sampled_from([2, 3, 10, 16, 2**16]))
    def test_refine_never_widens(self, m: int, seed: int, base: int) -> None:
        g = MT19937(seed)
        h = IRand(DigitGenerator(base)).init(g, m)
        while h.entropy():
            before = (h.entropy(), h.min(), h.max())
            h.refine(g)
            assert h.entropy() == before[0] - 1
            assert before[1] <= h.min() <= h.max() <= before[2]

    def test_uniform_over_six(self) -> None:
        g = MT19937(42)
        d = DigitGenerator(2)
        h = IRand(d)
        n = 6000
        counts = Counter(h.init(g, 6).value(g) for _ in range(n))
        assert set(counts) == set(range(6))
        # five explicit bins plus the catch-all bin holding 5
        probs = [1 / 6] * 6
        assert chi_squared(probs, counts) < 30


class TestComparisons:
    """Comparisons against rationals refine only on ties."""

    def test_less_than_decided_without_digits(self) -> None:
        g, d = _binary([])
        h = IRand(d).init(g, 2)
        assert h.less_than(g, 2)
        assert not h.less_than(g, 0)
        assert d.count == 0

    def test_less_than_refines_on_tie(self) -> None:
        g, d = _binary([1])
        h = IRand(d).init(g, 2)
        assert not h.less_than(g, 1)
        assert d.count == 1
        assert h.entropy() == 0

    def test_less_than_rational(self) -> None:
        g, d = _binary([0])
        h = IRand(d).init(g, 2)
        # 3 * j < 2 holds only for j = 0
        assert h.less_than(g, 2, 3)

    def test_derived_comparisons(self) -> None:
        g, d = _binary([1])
        h = IRand(d).init(g, 2)
        assert h.less_than_equal(g, 1)
        assert h.greater_than_equal(g, 1)
        assert not h.greater_than(g, 1)
        assert h.greater_than(g, 0)


class TestArithmetic:
    """negate and add shift the unresolved range."""

    def test_negate(self) -> None:
        g, d = _binary([1])
        h = IRand(d).init(g, 2)
        h.negate()
        assert (h.min(), h.max()) == (-1, 0)
        assert h.value(g) == 0

    def test_add(self) -> None:
        g, d = _binary([0])
        h = IRand(d).init(g, 2)
        h.add(5)
        assert str(h) == '5+[0,2)'
        assert h.value(g) == 5

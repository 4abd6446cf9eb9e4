"""Tests for the distribution adapters and parameter serialization."""

from __future__ import annotations

import math
from decimal import Decimal
from fractions import Fraction

import msgspec
import pytest

from exact_random.discrete_normal import DiscreteNormalParams
from exact_random.distributions import (
    DiscreteNormalDistribution,
    UnitExponentialDistribution,
    UnitNormalDistribution,
    UnitUniformDistribution,
    _UnitDistribution,
    decode_params,
    encode_params,
)
from exact_random.engines import MT19937
from exact_random.errors import InvalidParametersError
from exact_random.realfmt import FLOAT32, FLOAT64, FLOAT128, FORMATS, Rounding, decimal_format
from exact_random.types import INT_MAX, INT_MIN


class TestParamsCodec:
    """encode_params / decode_params over JSON and MessagePack."""

    def test_json_encoding(self) -> None:
        data = encode_params(DiscreteNormalParams(1, 3, 129, 2))
        assert data == b'{"mu_num":1,"mu_den":3,"sigma_num":129,"sigma_den":2}'

    @pytest.mark.parametrize('fmt', ['json', 'msgpack'])
    def test_round_trip(self, fmt: str) -> None:
        p = DiscreteNormalParams(-5, 7, 11, 13)
        assert decode_params(encode_params(p, fmt), fmt) == p  # type: ignore[arg-type]

    def test_decode_fills_defaults_and_reduces(self) -> None:
        p = decode_params(b'{"mu_num":2,"mu_den":6}')
        assert (p.mu_num, p.mu_den, p.sigma_num, p.sigma_den) == (1, 3, 1, 1)

    def test_decode_accepts_str(self) -> None:
        assert decode_params('{"sigma_num":4}').sigma_num == 4

    @pytest.mark.parametrize(
        'data',
        [
            b'{"sigma_num":0}',
            b'{"mu_den":-1}',
            f'{{"mu_num":{INT_MIN}}}'.encode(),
            f'{{"sigma_den":{INT_MAX + 1}}}'.encode(),
            b'{"mu_num":"one"}',
        ],
    )
    def test_decode_rejects_out_of_range(self, data: bytes) -> None:
        with pytest.raises(msgspec.ValidationError):
            decode_params(data)

    def test_decode_malformed(self) -> None:
        with pytest.raises(msgspec.DecodeError):
            decode_params(b'{"mu_num":')

    def test_unknown_encoding(self) -> None:
        p = DiscreteNormalParams()
        with pytest.raises(ValueError, match='unknown encoding'):
            encode_params(p, 'yaml')  # type: ignore[arg-type]
        with pytest.raises(ValueError, match='unknown encoding'):
            decode_params(b'', 'yaml')  # type: ignore[arg-type]


class TestUnitDistributions:
    """The continuous adapters."""

    def test_uniform_range(self, mt: MT19937) -> None:
        u = UnitUniformDistribution(FLOAT64)
        assert (u.min, u.max) == (0.0, 1.0)
        assert all(0.0 <= u(mt) <= 1.0 for _ in range(100))

    def test_exponential_range(self, mt: MT19937) -> None:
        e = UnitExponentialDistribution(FLOAT64)
        assert e.min == 0.0
        assert e.max == FLOAT64.largest()
        assert all(e(mt) >= 0.0 for _ in range(100))

    def test_normal_limits(self) -> None:
        n = UnitNormalDistribution(FLOAT32)
        assert n.max == FLOAT32.largest()
        assert n.min == -FLOAT32.largest()

    def test_float32_results_are_representable(self, mt: MT19937) -> None:
        n = UnitNormalDistribution(FLOAT32)
        for _ in range(50):
            x = n(mt)
            m, _ = math.frexp(x)
            assert (m * 2**24).is_integer()

    def test_decimal_results(self, mt: MT19937) -> None:
        n = UnitNormalDistribution(FORMATS['decimal32'])
        x = n(mt)
        assert isinstance(x, Decimal)
        assert len(x.as_tuple().digits) <= 7

    def test_decimal_exponential(self, mt: MT19937) -> None:
        x = UnitExponentialDistribution(decimal_format(4))(mt)
        assert isinstance(x, Decimal)
        assert x >= 0

    def test_fraction_results(self, mt: MT19937) -> None:
        x = UnitExponentialDistribution(FLOAT128)(mt)
        assert isinstance(x, Fraction)
        assert x.denominator & (x.denominator - 1) == 0

    def test_rounding_mode(self, mt: MT19937) -> None:
        u = UnitUniformDistribution(FLOAT64, 'toward_zero')
        assert u.rounding is Rounding.TOWARD_ZERO
        assert u(mt) < 1.0

    def test_digit_count(self, mt: MT19937) -> None:
        u = UnitUniformDistribution(FLOAT64)
        assert u.digit_count == 0
        u(mt)
        assert u.digit_count >= 2
        u.reset()
        assert u.digit_count >= 2

    def test_same_seed_same_values(self) -> None:
        a, b = UnitNormalDistribution(FLOAT64), UnitNormalDistribution(FLOAT64)
        ga, gb = MT19937(9), MT19937(9)
        assert [a(ga) for _ in range(10)] == [b.draw(gb) for _ in range(10)]

    def test_base_is_abstract(self) -> None:
        with pytest.raises(TypeError, match='_make_sampler'):
            _UnitDistribution(FLOAT64)

    def test_equality(self) -> None:
        assert UnitNormalDistribution(FLOAT64) == UnitNormalDistribution(FLOAT64)
        assert hash(UnitNormalDistribution(FLOAT64)) == hash(UnitNormalDistribution(FLOAT64))
        assert UnitNormalDistribution(FLOAT64) != UnitNormalDistribution(FLOAT32)
        assert UnitNormalDistribution(FLOAT64) != UnitNormalDistribution(FLOAT64, Rounding.UPWARD)
        assert UnitNormalDistribution(FLOAT64) != UnitUniformDistribution(FLOAT64)

    def test_repr(self) -> None:
        assert repr(UnitUniformDistribution(FLOAT32)) == "UnitUniformDistribution(fmt='float32', rounding=None)"

    @pytest.mark.usefixtures('fresh_runtime')
    def test_default_format_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv('EXACT_RANDOM_FORMAT', 'decimal64')
        assert UnitUniformDistribution().fmt == FORMATS['decimal64']


class TestDiscreteNormalDistribution:
    """The discrete normal adapter."""

    def test_argument_shapes(self) -> None:
        assert DiscreteNormalDistribution().params == DiscreteNormalParams()
        assert DiscreteNormalDistribution(2, 3).params == DiscreteNormalParams(2, 1, 3, 1)
        assert DiscreteNormalDistribution(1, 129, 2).params == DiscreteNormalParams(1, 2, 129, 2)
        d = DiscreteNormalDistribution(params=DiscreteNormalParams(1, 3, 129, 2))
        assert (d.mu_num, d.mu_den, d.sigma_num, d.sigma_den) == (1, 3, 129, 2)

    def test_both_forms_rejected(self) -> None:
        with pytest.raises(TypeError):
            DiscreteNormalDistribution(1, 2, params=DiscreteNormalParams())

    def test_invalid_params(self) -> None:
        with pytest.raises(InvalidParametersError):
            DiscreteNormalDistribution(0, 0)

    def test_range_and_str(self) -> None:
        d = DiscreteNormalDistribution(2, 6, 129, 3)
        assert (d.min, d.max) == (INT_MIN, INT_MAX)
        assert str(d) == '1 3 43 1'
        assert 'DiscreteNormalParams' in repr(d)

    def test_draws_integers(self, mt: MT19937) -> None:
        d = DiscreteNormalDistribution(100, 2)
        xs = [d(mt) for _ in range(100)]
        assert all(isinstance(x, int) for x in xs)
        assert 80 < sum(xs) / len(xs) < 120
        assert d.digit_count > 0

    def test_one_off_params(self, mt: MT19937) -> None:
        d = DiscreteNormalDistribution(0, 1)
        far = DiscreteNormalParams(1_000_000, 1, 1, 1)
        assert all(abs(d.draw(mt, far) - 1_000_000) < 10 for _ in range(20))
        assert d.params == DiscreteNormalParams()

    def test_set_params(self, mt: MT19937) -> None:
        d = DiscreteNormalDistribution()
        d.set_params(DiscreteNormalParams(-50, 1, 1, 4))
        assert all(abs(d(mt) + 50) <= 2 for _ in range(20))
        d.reset()
        assert d.params == DiscreteNormalParams(-50, 1, 1, 4)

    def test_equality(self) -> None:
        assert DiscreteNormalDistribution(2, 6, 129, 3) == DiscreteNormalDistribution(1, 3, 43, 1)
        assert hash(DiscreteNormalDistribution(1, 3)) == hash(DiscreteNormalDistribution(1, 3))
        assert DiscreteNormalDistribution(1, 3) != DiscreteNormalDistribution(1, 4)


@pytest.mark.slow
class TestSelfCheck:
    """Million-draw sums that pin the digit streams to the reference samplers."""

    NDRAWS = 1_000_000

    def test_uniform(self) -> None:
        g, u = MT19937(1), UnitUniformDistribution(FLOAT64)
        x = 0.0
        for _ in range(self.NDRAWS):
            x += u(g) - 0.5
        assert abs(x - -173.53065882716) <= 5e-12

    def test_exponential(self) -> None:
        g, e = MT19937(2), UnitExponentialDistribution(FLOAT64)
        x = 0.0
        for _ in range(self.NDRAWS):
            x += e(g) - 1.0
        assert abs(x - 708.92395157383) <= 5e-12

    def test_normal(self) -> None:
        g, n = MT19937(3), UnitNormalDistribution(FLOAT64)
        x = 0.0
        for _ in range(self.NDRAWS):
            x += n(g)
        assert abs(x - 332.17627482462) <= 5e-12

    def test_discrete_normal(self) -> None:
        g, d = MT19937(4), DiscreteNormalDistribution(1, 3, 129, 2)
        assert sum(d(g) for _ in range(self.NDRAWS)) == 316205

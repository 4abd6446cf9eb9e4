"""Exact sampling of the discrete normal distribution (Algorithm D).

Samples integers i with probability proportional to
``exp(-((i - mu)/sigma)**2 / 2)`` for rational mu and sigma, using only
integer arithmetic on u-rands and i-rands.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import TYPE_CHECKING

import msgspec

from exact_random._config import get_config
from exact_random._logging import get_logger
from exact_random.errors import InvalidParametersError, ParameterOverflowError, UnsupportedBaseError
from exact_random.irand import IRand
from exact_random.normal import _GeometricSteps
from exact_random.types import INT_MAX, INT_MIN, LLONG_MAX, Int32, PositiveInt32

if TYPE_CHECKING:
    from exact_random.digits import DigitGenerator
    from exact_random.engines import Engine

__all__ = [
    'DiscreteNormal',
    'DiscreteNormalParams',
]

log = get_logger(__name__)

MAX_BASE_BITS = 24


def _in_int32(v: int) -> bool:
    return INT_MIN <= v <= INT_MAX


def _trunc_div(n: int, d: int) -> int:
    """Integer division rounding toward zero (d > 0)."""
    q = abs(n) // d
    return q if n >= 0 else -q


def _ceil_div(n: int, d: int) -> int:
    return -(-n // d)


class DiscreteNormalParams(msgspec.Struct, frozen=True):
    """``mu = mu_num/mu_den`` and ``sigma = sigma_num/sigma_den``, kept in lowest terms.

    Validated on construction and on decode: sigma_num, sigma_den and
    mu_den must be positive, and every field must be a 32-bit integer
    other than INT_MIN.

    Example:
        >>> DiscreteNormalParams(2, 6, 129, 3)
        DiscreteNormalParams(mu_num=1, mu_den=3, sigma_num=43, sigma_den=1)
    """

    mu_num: Int32 = 0
    mu_den: PositiveInt32 = 1
    sigma_num: PositiveInt32 = 1
    sigma_den: PositiveInt32 = 1

    def __post_init__(self) -> None:
        raw = (self.mu_num, self.mu_den, self.sigma_num, self.sigma_den)
        if not all(_in_int32(v) for v in raw) or self.mu_num <= INT_MIN:
            raise InvalidParametersError('parameters must be 32-bit integers above INT_MIN', raw)
        if not (self.sigma_num > 0 and self.sigma_den > 0 and self.mu_den > 0):
            raise InvalidParametersError('need sigma > 0 and positive denominators', raw)
        g = math.gcd(self.mu_num, self.mu_den)
        msgspec.structs.force_setattr(self, 'mu_num', self.mu_num // g)
        msgspec.structs.force_setattr(self, 'mu_den', self.mu_den // g)
        g = math.gcd(self.sigma_num, self.sigma_den)
        msgspec.structs.force_setattr(self, 'sigma_num', self.sigma_num // g)
        msgspec.structs.force_setattr(self, 'sigma_den', self.sigma_den // g)

    @classmethod
    def from_args(cls, *args: int) -> DiscreteNormalParams:
        """Build from ``()``, ``(mu, sigma)``, ``(mu_num, sigma_num, den)`` or all four fields."""
        match args:
            case ():
                return cls()
            case (mu, sigma):
                return cls(mu, 1, sigma, 1)
            case (mu_num, sigma_num, den):
                return cls(mu_num, den, sigma_num, den)
            case (mu_num, mu_den, sigma_num, sigma_den):
                return cls(mu_num, mu_den, sigma_num, sigma_den)
        msg = f'expected 0, 2, 3 or 4 integers, got {len(args)}'
        raise TypeError(msg)

    @property
    def mu(self) -> Fraction:
        return Fraction(self.mu_num, self.mu_den)

    @property
    def sigma(self) -> Fraction:
        return Fraction(self.sigma_num, self.sigma_den)

    def __str__(self) -> str:
        return f'{self.mu_num} {self.mu_den} {self.sigma_num} {self.sigma_den}'


class _Derived(msgspec.Struct, frozen=True):
    """Integer constants of Algorithm D: ``sigma = sig/d``, ``mu = imu + mu/d``."""

    sig: int
    mu: int
    d: int
    imu: int
    isig: int


def _derive(params: DiscreteNormalParams, base: int, kmax: int) -> _Derived:
    """Compute the derived constants, rejecting sets that could overflow 64-bit arithmetic.

    Raises:
        ParameterOverflowError: Naming the failed check.
    """
    imu = _trunc_div(params.mu_num, params.mu_den)
    fmu_num = params.mu_num - imu * params.mu_den
    isig = _ceil_div(params.sigma_num, params.sigma_den)
    l = math.gcd(params.sigma_den, params.mu_den)  # noqa: E741
    if not (
        params.mu_den // l <= LLONG_MAX // params.sigma_num
        and abs(fmu_num) <= LLONG_MAX // (params.sigma_den // l)
        and params.mu_den // l <= LLONG_MAX // params.sigma_den
    ):
        raise ParameterOverflowError('scale', str(params))
    sig = params.sigma_num * (params.mu_den // l)
    mu = fmu_num * (params.sigma_den // l)
    d = params.sigma_den * (params.mu_den // l)
    if not isig <= LLONG_MAX // d:
        raise ParameterOverflowError('range', str(params))
    if not isig <= INT_MAX // kmax:
        raise ParameterOverflowError('a', f'ceil(sigma) = {isig} too large')
    if not abs(imu) <= INT_MAX - isig * kmax:
        raise ParameterOverflowError('b', f'|mu| = {abs(imu)} too large')
    if not max(2, sig) <= LLONG_MAX // (base * kmax):
        raise ParameterOverflowError('c', f'sig = {sig} too large')
    return _Derived(sig=sig, mu=mu, d=d, imu=imu, isig=isig)


class DiscreteNormal(_GeometricSteps):
    """Algorithm D: exact discrete normal deviates.

    Reuses steps G and P of Algorithm N to choose k, picks a sign s and an
    offset j in ``[0, ceil(sigma))`` as i-rands, and accepts ``s * (i0 + j)
    + imu`` after k+1 Bernoulli trials comparing u-rands against
    ``(xn0 + j*d)/sig``. The offset is only resolved as far as the
    comparisons require.

    Args:
        digits: Digit generator with base at most 2**24.
        params: Distribution parameters (standard lattice normal if omitted).
        rejection_bound: Largest k the overflow checks must cover; taken
            from the runtime config if omitted.

    Raises:
        UnsupportedBaseError: If the base exceeds 2**24.
        ParameterOverflowError: If the parameters are too extreme.
    """

    def __init__(
        self,
        digits: DigitGenerator,
        params: DiscreteNormalParams | None = None,
        *,
        rejection_bound: int | None = None,
    ) -> None:
        if digits.bits > MAX_BASE_BITS:
            raise UnsupportedBaseError(digits.base, 'base must be in [2, 2**24]')
        super().__init__(digits)
        self._j = IRand(digits)
        bound = get_config().rejection_bound if rejection_bound is None else rejection_bound
        self._kmax = bound + 1
        self.set_params(params if params is not None else DiscreteNormalParams())

    @property
    def params(self) -> DiscreteNormalParams:
        return self._params

    def set_params(self, params: DiscreteNormalParams) -> None:
        """Replace the parameters and their derived constants together."""
        derived = _derive(params, self.digits.base, self._kmax)
        self._params = params
        self._derived = derived
        log.debug(
            'discrete_normal_params',
            params=str(params),
            sig=derived.sig,
            mu=derived.mu,
            d=derived.d,
            imu=derived.imu,
            isig=derived.isig,
        )

    @property
    def mu_num(self) -> int:
        return self._params.mu_num

    @property
    def mu_den(self) -> int:
        return self._params.mu_den

    @property
    def sigma_num(self) -> int:
        return self._params.sigma_num

    @property
    def sigma_den(self) -> int:
        return self._params.sigma_den

    def generate(self, engine: Engine, j: IRand | None = None) -> IRand:
        """Sample into the i-rand ``j`` (the sampler's own if omitted), possibly unresolved."""
        if j is None:
            j = self._j
        c = self._derived
        while True:
            k = self._g(engine)
            if not self._p(engine, k * (k - 1)):
                continue
            s = -1 if j.init(engine, 2).value(engine) else 1
            xn0 = c.sig * k + s * c.mu
            i0 = _ceil_div(xn0, c.d)
            xn0 = i0 * c.d - xn0
            j.init(engine, c.isig)
            if not j.less_than(engine, c.sig - xn0, c.d) or (
                k == 0 and s < 0 and not j.greater_than(engine, -xn0, c.d)
            ):
                continue
            if not all(self._b(engine, k, xn0, j) for _ in range(k + 1)):
                continue
            j.add(i0 + s * c.imu)
            if s < 0:
                j.negate()
            return j

    def __call__(self, engine: Engine) -> int:
        """Sample and resolve to an integer."""
        return self.generate(engine).value(engine)

    def _b(self, engine: Engine, k: int, xn0: int, j: IRand) -> bool:
        """Bernoulli trial with probability ``exp(-x(2k+x)/(2k+2))``, ``x = (xn0 + j*d)/sig``."""
        c = self._derived
        n, m = 0, 2 * k + 2
        y, z = self._y, self._z
        f = 0
        while True:
            if k == 0:
                f = z.init().compare(engine, 1, 2, m)
                if f < 0:
                    break
            z.init()
            if not (z.less_than(engine, y) if n else z.less_than_range(engine, xn0, c.d, c.sig, j)):
                break
            if k > 0:
                f = y.init().compare(engine, 1, 2, m)
                if f < 0:
                    break
            if f == 0 and not y.init().less_than_range(engine, xn0, c.d, c.sig, j):
                break
            y, z = z, y
            n += 1
        return n % 2 == 0

"""Closed-form reference values for checking samplers.

Cumulative distributions, entropies (in nats) and mean binary exponents of
the continuous laws, the normalised probabilities of the discrete normal,
and a chi-squared statistic over binned counts. Everything here is plain
double-precision arithmetic; it is for testing and accounting, never for
sampling.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from exact_random.discrete_normal import DiscreteNormalParams

__all__ = [
    'bin_probabilities',
    'chi_squared',
    'cumulative_exponential',
    'cumulative_normal',
    'cumulative_uniform',
    'discrete_bin_probabilities',
    'discrete_normal_norm',
    'discrete_normal_prob',
    'exponential_entropy',
    'exponential_mean_exponent',
    'normal_entropy',
    'normal_mean_exponent',
    'uniform_entropy',
    'uniform_mean_exponent',
]


def cumulative_uniform(x: float) -> float:
    return 0.0 if x < 0 else x if x < 1 else 1.0


def cumulative_exponential(x: float) -> float:
    return -math.expm1(-x) if x > 0 else 0.0


def cumulative_normal(x: float) -> float:
    return (1 + math.erf(x / math.sqrt(2))) / 2


def uniform_entropy() -> float:
    return 0.0


def exponential_entropy() -> float:
    return 1.0


def normal_entropy() -> float:
    return math.log(2 * math.pi) / 2 + 0.5


def uniform_mean_exponent() -> float:
    """Mean of ``floor(log2 x) + 1`` for x uniform on (0, 1)."""
    return -1.0


def _mean_exponent(cdf: Callable[[float], float], k0: int) -> float:
    z = 0.0
    y0 = cdf(0.0)
    k = k0
    while True:
        y1 = cdf(2.0**k)
        z += k * (y1 - y0)
        if not y1 < 1:
            return z
        y0 = y1
        k += 1


def exponential_mean_exponent() -> float:
    """Mean binary exponent of a unit exponential deviate (drives digit usage)."""
    return _mean_exponent(cumulative_exponential, -53)


def normal_mean_exponent() -> float:
    """Mean binary exponent of ``|x|`` for x unit normal."""
    return _mean_exponent(lambda x: 2 * cumulative_normal(x) - 1, -40)


def discrete_normal_prob(params: DiscreteNormalParams, i: int, norm: float = 1.0) -> float:
    """``exp(-((i - mu)/sigma)**2 / 2) / norm``."""
    mu = params.mu_num / params.mu_den
    sigma = params.sigma_num / params.sigma_den
    x = (i - mu) / sigma
    return math.exp(-x * x / 2) / norm


def discrete_normal_norm(params: DiscreteNormalParams) -> tuple[float, float]:
    """Normalising sum and entropy (nats) of the discrete normal.

    Summed directly when sigma is small; for ``ceil(sigma) >= 10`` the
    continuous values ``sqrt(2 pi) sigma`` and ``log(norm) + 1/2`` are used,
    which are accurate to double precision there.
    """
    imu = int(params.mu_num / params.mu_den)
    isig = -(-params.sigma_num // params.sigma_den)
    if isig < 10:
        s = h = 0.0
        for i in range(imu - 10 * isig, imu + 10 * isig):
            p = discrete_normal_prob(params, i)
            s += p
            if p > 0:
                h -= p * math.log(p)
        return s, h / s + math.log(s)
    s = math.sqrt(2 * math.pi) * params.sigma_num / params.sigma_den
    return s, math.log(s) + 0.5


def bin_probabilities(cdf: Callable[[float], float], x0: float, dx: float, nbins: int) -> list[float]:
    """Probabilities of bins ``[x0 + n dx, x0 + (n+1) dx)`` plus a final catch-all bin."""
    probs = [cdf(x0 + (n + 1) * dx) - cdf(x0 + n * dx) for n in range(nbins)]
    probs.append(1 - sum(probs))
    return probs


def discrete_bin_probabilities(params: DiscreteNormalParams, x0: int, dx: int, nbins: int) -> list[float]:
    """Discrete normal analogue of bin_probabilities; bin n holds ``x0 + n dx + [0, dx)``."""
    norm, _ = discrete_normal_norm(params)
    probs = [
        sum(discrete_normal_prob(params, x0 + dx * n + j, norm) for j in range(dx)) for n in range(nbins)
    ]
    probs.append(1 - sum(probs))
    return probs


def chi_squared(probs: Sequence[float], counts: Mapping[int, int]) -> float:
    """Pearson's statistic for counts of bin indices against ``probs``.

    ``counts`` maps bin index to tally; indices outside ``[0, len(probs) - 1)``
    all fall in the final catch-all bin. Bins with no expected count add
    nothing when empty and make the statistic infinite otherwise.
    """
    nbins = len(probs) - 1
    if nbins < 1:
        return 0.0
    num = sum(counts.values())
    observed = [counts.get(n, 0) for n in range(nbins)]
    observed.append(num - sum(observed))
    v = 0.0
    for c, p in zip(observed, probs, strict=True):
        expected = num * p
        if expected <= 0:
            if c:
                return math.inf
            continue
        x = c - expected
        v += x * x / expected
    return v

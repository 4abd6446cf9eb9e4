"""Distribution objects: an engine in, a rounded value out.

Each adapter owns its digit generator and sampler and hides u-rands
entirely; draws are rounded exactly to a RealFormat (the runtime config's
default format if none is given). The digit base follows the format: 2**32
for binary formats, the radix for decimal ones.

Usage:
    >>> from exact_random import MT19937, UnitNormalDistribution
    >>> g = MT19937(3)
    >>> normal = UnitNormalDistribution()
    >>> x = normal(g)

Parameter records of the discrete normal serialize through msgspec:
    >>> from exact_random.distributions import DiscreteNormalParams, encode_params
    >>> encode_params(DiscreteNormalParams(1, 3, 129, 2))
    b'{"mu_num":1,"mu_den":3,"sigma_num":129,"sigma_den":2}'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Literal

import msgspec

from exact_random._config import get_config
from exact_random._logging import get_logger
from exact_random.digits import DigitGenerator
from exact_random.discrete_normal import DiscreteNormal, DiscreteNormalParams
from exact_random.exponential import UnitExponential
from exact_random.normal import UnitNormal
from exact_random.realfmt import Rounding
from exact_random.types import INT_MAX, INT_MIN
from exact_random.uniform import UnitUniform
from exact_random.urand import check_format

if TYPE_CHECKING:
    from decimal import Decimal
    from fractions import Fraction

    from exact_random.engines import Engine
    from exact_random.realfmt import RealFormat

__all__ = [
    'DiscreteNormalDistribution',
    'UnitExponentialDistribution',
    'UnitNormalDistribution',
    'UnitUniformDistribution',
    'decode_params',
    'encode_params',
]

log = get_logger(__name__)

DISCRETE_BASE = 1 << 16

_json_encoder = msgspec.json.Encoder()
_msgpack_encoder = msgspec.msgpack.Encoder()
_json_decoder: msgspec.json.Decoder[DiscreteNormalParams] = msgspec.json.Decoder(DiscreteNormalParams)
_msgpack_decoder: msgspec.msgpack.Decoder[DiscreteNormalParams] = msgspec.msgpack.Decoder(DiscreteNormalParams)


def encode_params(params: DiscreteNormalParams, fmt: Literal['json', 'msgpack'] = 'json') -> bytes:
    """Serialize discrete normal parameters."""
    if fmt == 'json':
        return _json_encoder.encode(params)
    if fmt == 'msgpack':
        return _msgpack_encoder.encode(params)
    msg = f'unknown encoding {fmt!r}'
    raise ValueError(msg)


def decode_params(data: bytes | str, fmt: Literal['json', 'msgpack'] = 'json') -> DiscreteNormalParams:
    """Deserialize and validate discrete normal parameters.

    Raises:
        msgspec.ValidationError: If a field is out of range or sigma <= 0.
        msgspec.DecodeError: If data is malformed.
    """
    if fmt == 'json':
        return _json_decoder.decode(data)
    if fmt == 'msgpack':
        return _msgpack_decoder.decode(data)
    msg = f'unknown encoding {fmt!r}'
    raise ValueError(msg)


class _UnitDistribution(ABC):
    """Common shape of the continuous adapters."""

    def __init__(self, fmt: RealFormat | None = None, rounding: Rounding | str | None = None) -> None:
        self.fmt = fmt if fmt is not None else get_config().real_format
        self.rounding = Rounding(rounding) if rounding is not None else None
        self._digits = DigitGenerator(0 if self.fmt.binary else self.fmt.radix)
        check_format(self.fmt, self._digits)
        self._sampler = self._make_sampler(self._digits)
        log.debug('distribution_created', kind=type(self).__name__, format=self.fmt.name, base=self._digits.base)

    @abstractmethod
    def _make_sampler(self, digits: DigitGenerator) -> UnitUniform | UnitExponential | UnitNormal:
        """Build the sampler that draws from ``digits``."""

    def draw(self, engine: Engine) -> float | Decimal | Fraction:
        """Draw one exactly rounded deviate."""
        return self._sampler.value(engine, self.fmt, self.rounding)

    __call__ = draw

    @property
    def digit_count(self) -> int:
        """Digits consumed by all draws so far."""
        return self._digits.count

    def reset(self) -> None:
        """No-op: nothing carries over between draws."""

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.fmt == other.fmt and self.rounding == other.rounding

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.fmt, self.rounding))

    def __repr__(self) -> str:
        return f'{type(self).__name__}(fmt={self.fmt.name!r}, rounding={self.rounding})'


class UnitUniformDistribution(_UnitDistribution):
    """Uniform on (0, 1)."""

    def _make_sampler(self, digits: DigitGenerator) -> UnitUniform:
        return UnitUniform(digits)

    @property
    def min(self) -> float | Decimal | Fraction:
        return self.fmt.make(1, 0, 0)

    @property
    def max(self) -> float | Decimal | Fraction:
        return self.fmt.make(1, 1, 0)


class UnitExponentialDistribution(_UnitDistribution):
    """Exponential with unit mean.

    Algorithm E when the base allows it; base 2**32 uses Algorithm V.
    """

    def _make_sampler(self, digits: DigitGenerator) -> UnitExponential:
        return UnitExponential(digits, bit_optimized=digits.base != 1 << 32)

    @property
    def min(self) -> float | Decimal | Fraction:
        return self.fmt.make(1, 0, 0)

    @property
    def max(self) -> float | Decimal | Fraction:
        return self.fmt.largest()


class UnitNormalDistribution(_UnitDistribution):
    """Normal with zero mean and unit variance."""

    def _make_sampler(self, digits: DigitGenerator) -> UnitNormal:
        return UnitNormal(digits)

    @property
    def min(self) -> float | Decimal | Fraction:
        return -self.fmt.largest()

    @property
    def max(self) -> float | Decimal | Fraction:
        return self.fmt.largest()


class DiscreteNormalDistribution:
    """Discrete normal over the integers.

    Accepts the same argument shapes as ``DiscreteNormalParams.from_args``
    or a ready-made ``params`` record.

    Example:
        >>> from exact_random import MT19937
        >>> d = DiscreteNormalDistribution(1, 3, 129, 2)   # mu = 1/3, sigma = 64.5
        >>> isinstance(d(MT19937(4)), int)
        True
    """

    min = INT_MIN
    max = INT_MAX

    def __init__(self, *args: int, params: DiscreteNormalParams | None = None) -> None:
        if params is not None and args:
            msg = 'pass either positional parameters or params, not both'
            raise TypeError(msg)
        self._digits = DigitGenerator(DISCRETE_BASE)
        if params is None:
            params = DiscreteNormalParams.from_args(*args)
        self._sampler = DiscreteNormal(self._digits, params)

    @property
    def params(self) -> DiscreteNormalParams:
        return self._sampler.params

    def set_params(self, params: DiscreteNormalParams) -> None:
        self._sampler.set_params(params)

    @property
    def mu_num(self) -> int:
        return self._sampler.mu_num

    @property
    def mu_den(self) -> int:
        return self._sampler.mu_den

    @property
    def sigma_num(self) -> int:
        return self._sampler.sigma_num

    @property
    def sigma_den(self) -> int:
        return self._sampler.sigma_den

    @property
    def digit_count(self) -> int:
        return self._digits.count

    def draw(self, engine: Engine, params: DiscreteNormalParams | None = None) -> int:
        """Draw one integer, optionally with one-off parameters."""
        if params is None:
            return self._sampler(engine)
        return DiscreteNormal(self._digits, params)(engine)

    __call__ = draw

    def reset(self) -> None:
        """No-op: nothing carries over between draws."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DiscreteNormalDistribution):
            return NotImplemented
        return self.params == other.params

    def __hash__(self) -> int:
        return hash(self.params)

    def __str__(self) -> str:
        return str(self.params)

    def __repr__(self) -> str:
        return f'DiscreteNormalDistribution(params={self.params!r})'

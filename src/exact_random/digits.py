"""Random digit generators in an arbitrary base."""

from __future__ import annotations

from typing import TYPE_CHECKING

from exact_random._logging import get_logger
from exact_random.errors import UnsupportedBaseError

if TYPE_CHECKING:
    from exact_random.engines import Engine

__all__ = [
    'DigitGenerator',
    'TableDigits',
]

log = get_logger(__name__)

MAX_BASE = 1 << 32
_MASK_32 = 0xFFFFFFFF
_MASK_64 = 0xFFFFFFFFFFFFFFFF


class DigitGenerator:
    """Draws uniform digits in ``[0, base)`` from an engine and counts them.

    One generator is shared by every u-rand and i-rand of a sampler, so
    ``count`` is the total number of digits a sampling session consumed.

    Args:
        base: Digit base in ``[2, 2**32]``; 0 stands for ``2**32``.

    Raises:
        UnsupportedBaseError: If base is outside that range.
    """

    min_value = 0

    def __init__(self, base: int = 0) -> None:
        if base == 0:
            base = MAX_BASE
        if not 2 <= base <= MAX_BASE:
            raise UnsupportedBaseError(base, 'base must be in [2, 2**32]')
        self.base = base
        self.max_value = base - 1
        self.bits = (base - 1).bit_length()
        self.power_of_two = base & (base - 1) == 0
        self.count = 0
        log.debug('digit_generator_created', base=base, bits=self.bits, power_of_two=self.power_of_two)

    def gen(self, engine: Engine) -> int:
        """Return the next random digit."""
        self.count += 1
        if self.power_of_two and engine.min_value == 0:
            # Slice the top bits of a native 32-bit word.
            if engine.max_value == _MASK_32:
                return engine() >> (32 - self.bits)
            if engine.max_value == _MASK_64:
                return (engine() & _MASK_32) >> (32 - self.bits)
        return _uniform_int(engine, self.max_value)

    def __call__(self, engine: Engine) -> int:
        return self.gen(engine)

    def inv_base(self) -> float:
        """``1 / base`` as a float."""
        return 1.0 / self.base

    def __repr__(self) -> str:
        return f'{type(self).__name__}(base={self.base}, count={self.count})'


class TableDigits(DigitGenerator):
    """Base-10 digits taken verbatim from an engine over tabulated digits.

    No range mapping happens: the engine (normally a TableEngine) must
    already produce values in ``[0, 10)``, and its exhaustion propagates.
    """

    def __init__(self) -> None:
        super().__init__(10)

    def gen(self, engine: Engine) -> int:
        self.count += 1
        return engine()


def _uniform_int(engine: Engine, urange: int) -> int:
    """Uniform integer in ``[0, urange]`` from an engine of any range.

    Downscaling rejects the top partial bucket; upscaling combines several
    engine outputs, rejecting combinations past ``urange``.
    """
    urngmin = engine.min_value
    urngrange = engine.max_value - urngmin
    if urngrange > urange:
        uerange = urange + 1
        scaling = urngrange // uerange
        past = uerange * scaling
        while True:
            ret = engine() - urngmin
            if ret < past:
                return ret // scaling
    if urngrange < urange:
        uerngrange = urngrange + 1
        while True:
            tmp = uerngrange * _uniform_int(engine, urange // uerngrange)
            ret = tmp + (engine() - urngmin)
            if ret <= urange:
                return ret
    return engine() - urngmin

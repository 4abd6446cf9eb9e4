"""Constrained type aliases for decode-time validation.

These aliases carry msgspec constraints, so parameter records decoded from
JSON or MessagePack are range-checked before a sampler ever sees them. The
bounds mirror the fixed-width integers the sampling protocols are validated
against.

Usage:
    >>> import msgspec
    >>> from exact_random.types import Int32, PositiveInt32
    >>>
    >>> class Scale(msgspec.Struct):
    ...     num: Int32
    ...     den: PositiveInt32
    >>>
    >>> msgspec.json.decode(b'{"num": 3, "den": 0}', type=Scale)
    # ValidationError: Expected `int` >= 1 - at `$.den`
"""

from __future__ import annotations

from typing import Annotated

import msgspec

__all__ = [
    'INT_MAX',
    'INT_MIN',
    'LLONG_MAX',
    'Int32',
    'PositiveInt32',
]

# -----------------------------------------------------------------------------
# Integer Widths
# -----------------------------------------------------------------------------

INT_MAX: int = 2**31 - 1
"""Largest value of the 32-bit signed integers results are returned in."""

INT_MIN: int = -(2**31)
"""Smallest 32-bit signed integer (excluded as a numerator, it has no negation)."""

LLONG_MAX: int = 2**63 - 1
"""Largest 64-bit signed integer; bounds the exact rational arithmetic."""

# -----------------------------------------------------------------------------
# Numeric Constraints
# -----------------------------------------------------------------------------

Int32 = Annotated[int, msgspec.Meta(gt=INT_MIN, le=INT_MAX)]
"""Signed 32-bit integer other than INT_MIN.

Valid: -2147483647, 0, 2147483647
Invalid: -2147483648, 2**31
"""

PositiveInt32 = Annotated[int, msgspec.Meta(ge=1, le=INT_MAX)]
"""Strictly positive 32-bit integer (denominators, sigma numerators)."""


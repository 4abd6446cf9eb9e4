"""Error types: configuration faults raised at construction, digit exhaustion raised on request."""

from __future__ import annotations

__all__ = [
    'ConfigurationError',
    'IncompatibleFormatError',
    'InvalidParametersError',
    'OutOfDigitsError',
    'ParameterOverflowError',
    'UnsupportedBaseError',
]


# --- Configuration Errors ---


class ConfigurationError(ValueError):
    """Invalid sampler configuration - raised before any sampling happens."""


class InvalidParametersError(ConfigurationError):
    """Distribution parameters out of their domain (e.g. sigma <= 0)."""

    def __init__(self, message: str, params: tuple[int, ...] | None = None) -> None:
        self.message = message
        self.params = params
        msg = message
        if params is not None:
            msg = f'{message} (got {params})'
        super().__init__(msg)


class ParameterOverflowError(ConfigurationError):
    """Derived constants do not fit the exact-integer width."""

    def __init__(self, check: str, detail: str | None = None) -> None:
        self.check = check
        self.detail = detail
        msg = f'sigma or mu overflow [{check}]'
        if detail:
            msg = f'{msg}: {detail}'
        super().__init__(msg)


class UnsupportedBaseError(ConfigurationError):
    """Digit base outside the range an algorithm supports."""

    def __init__(self, base: int, requirement: str) -> None:
        self.base = base
        self.requirement = requirement
        super().__init__(f'Unsupported base {base}: {requirement}')


class IncompatibleFormatError(ConfigurationError):
    """Target real format cannot be produced from digits in this base."""

    def __init__(self, format_name: str, base: int, reason: str) -> None:
        self.format_name = format_name
        self.base = base
        self.reason = reason
        super().__init__(f"Format '{format_name}' incompatible with base {base}: {reason}")


# --- Digit Source Errors ---


class OutOfDigitsError(Exception):
    """A finite digit source has no more digits."""

    def __init__(self, consumed: int) -> None:
        self.consumed = consumed
        super().__init__(f'Ran out of digits after {consumed}')

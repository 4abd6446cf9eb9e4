"""Runtime configuration: SamplerConfig, environment detection, and initialization."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from exact_random._logging import configure_logging
from exact_random.realfmt import FORMATS, RealFormat

__all__ = [
    'SamplerConfig',
    'get_config',
    'init',
]


@dataclass(frozen=True)
class SamplerConfig:
    """Configuration for exact-random.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
        json_logs: Render logs as JSON (True) or colored console lines (False).
        default_format: Name of the real format adapters round to when none is given.
        rejection_bound: Largest rejection count k the discrete normal overflow
            checks must cover.
    """

    log_level: str | None = None
    json_logs: bool = True
    default_format: str = 'float64'
    rejection_bound: int = 50

    @property
    def real_format(self) -> RealFormat:
        """The RealFormat named by default_format."""
        return FORMATS[self.default_format]


# Global configuration (set by init() or on first get_config())
_config: SamplerConfig | None = None


def _detect_log_level() -> str | None:
    """Read EXACT_RANDOM_LOG_LEVEL; empty or unset means silent."""
    level = os.environ.get('EXACT_RANDOM_LOG_LEVEL', '').strip()
    return level.upper() or None


def _detect_format() -> str:
    """Detect the default real format from the environment.

    Priority:
    1. EXACT_RANDOM_FORMAT environment variable (a key of FORMATS)
    2. Default to float64
    """
    env_format = os.environ.get('EXACT_RANDOM_FORMAT', '').lower()
    if env_format in FORMATS:
        return env_format
    if env_format:
        logging.warning("Unknown EXACT_RANDOM_FORMAT value '%s', defaulting to float64", env_format)
    return 'float64'


def init(
    log_level: str | None = None,
    default_format: str | None = None,
    rejection_bound: int | None = None,
    *,
    json_logs: bool = True,
) -> SamplerConfig:
    """Initialize exact-random with the specified configuration.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). Read from the
            environment if None; None there too means silent.
        default_format: Real format name for the distribution adapters.
            Auto-detected if None.
        rejection_bound: Rejection count the overflow checks cover. Clamped
            to [1, 1000].
        json_logs: Emit JSON logs (True) or console logs (False).

    Returns:
        The SamplerConfig that was set.

    Raises:
        KeyError: If default_format does not name a known format.

    Example:
        ```python
        from exact_random import init

        # Everything from the environment
        init()

        # Explicit configuration
        init(log_level='DEBUG', default_format='float32')
        ```
    """
    global _config  # noqa: PLW0603

    resolved_level = log_level if log_level is not None else _detect_log_level()

    if default_format is None:
        resolved_format = _detect_format()
    else:
        resolved_format = default_format.lower()
        if resolved_format not in FORMATS:
            msg = f'Unknown real format {default_format!r}; expected one of {sorted(FORMATS)}'
            raise KeyError(msg)

    resolved_bound = 50 if rejection_bound is None else max(1, min(1000, rejection_bound))

    _config = SamplerConfig(
        log_level=resolved_level,
        json_logs=json_logs,
        default_format=resolved_format,
        rejection_bound=resolved_bound,
    )

    if resolved_level is not None:
        configure_logging(resolved_level, json_output=json_logs)

    return _config


def get_config() -> SamplerConfig:
    """Get the current configuration, initializing from the environment on first use.

    Returns:
        The current SamplerConfig.

    Example:
        ```python
        from exact_random import init, get_config

        init(default_format='decimal128')
        config = get_config()
        print(config.default_format)  # decimal128
        ```
    """
    if _config is None:
        return init()
    return _config

"""exact-random: exact sampling of continuous and discrete distributions.

Normal, exponential and uniform deviates rounded exactly to a target
format, and discrete normal integers, drawn from nothing but uniform
random digits.

Flat imports (preferred):
    from exact_random import MT19937, UnitNormalDistribution, DiscreteNormalDistribution

Submodule imports (for the u-rand machinery):
    from exact_random.urand import URand
    from exact_random.normal import UnitNormal
    from exact_random.digits import DigitGenerator
"""

# Configuration
from exact_random._config import SamplerConfig, get_config, init

# Logging
from exact_random._logging import (
    add_log_hook,
    clear_log_hooks,
    configure_logging,
    get_logger,
    remove_log_hook,
)
from exact_random.digits import DigitGenerator, TableDigits
from exact_random.discrete_normal import DiscreteNormal, DiscreteNormalParams

# Distribution adapters
from exact_random.distributions import (
    DiscreteNormalDistribution,
    UnitExponentialDistribution,
    UnitNormalDistribution,
    UnitUniformDistribution,
    decode_params,
    encode_params,
)

# Engines
from exact_random.engines import MT19937, Engine, RandomEngine, TableEngine

# Errors
from exact_random.errors import (
    ConfigurationError,
    IncompatibleFormatError,
    InvalidParametersError,
    OutOfDigitsError,
    ParameterOverflowError,
    UnsupportedBaseError,
)
from exact_random.exponential import UnitExponential
from exact_random.irand import IRand
from exact_random.normal import UnitNormal

# Real formats
from exact_random.realfmt import (
    FLOAT32,
    FLOAT64,
    FLOAT128,
    FORMATS,
    RealFormat,
    Rounding,
    binary_format,
    decimal_format,
)
from exact_random.uniform import UnitUniform
from exact_random.urand import URand, parse_fixed

__all__ = [
    'FLOAT32',
    'FLOAT64',
    'FLOAT128',
    'FORMATS',
    'MT19937',
    'ConfigurationError',
    'DigitGenerator',
    'DiscreteNormal',
    'DiscreteNormalDistribution',
    'DiscreteNormalParams',
    'Engine',
    'IRand',
    'IncompatibleFormatError',
    'InvalidParametersError',
    'OutOfDigitsError',
    'ParameterOverflowError',
    'RandomEngine',
    'RealFormat',
    'Rounding',
    'SamplerConfig',
    'TableDigits',
    'TableEngine',
    'URand',
    'UnitExponential',
    'UnitExponentialDistribution',
    'UnitNormal',
    'UnitNormalDistribution',
    'UnitUniform',
    'UnitUniformDistribution',
    'UnsupportedBaseError',
    'add_log_hook',
    'binary_format',
    'clear_log_hooks',
    'configure_logging',
    'decimal_format',
    'decode_params',
    'encode_params',
    'get_config',
    'get_logger',
    'init',
    'parse_fixed',
    'remove_log_hook',
]

__version__ = '0.1.0'

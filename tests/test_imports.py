"""Tests for verifying import styles work correctly."""

import pytest


class TestFlatImports:
    """Verify flat imports from exact_random work."""

    def test_engines(self) -> None:
        """Test importing engines from root."""
        from exact_random import MT19937, Engine, RandomEngine, TableEngine

        assert isinstance(MT19937(), Engine)
        assert isinstance(RandomEngine(), Engine)
        assert isinstance(TableEngine('1'), Engine)

    def test_distributions(self) -> None:
        """Test importing the adapters from root."""
        from exact_random import (
            FLOAT64,
            MT19937,
            DiscreteNormalDistribution,
            UnitExponentialDistribution,
            UnitNormalDistribution,
            UnitUniformDistribution,
        )

        g = MT19937(5)
        for dist in (UnitUniformDistribution, UnitExponentialDistribution, UnitNormalDistribution):
            assert isinstance(dist(FLOAT64)(g), float)
        assert isinstance(DiscreteNormalDistribution(1, 3, 129, 2)(g), int)

    def test_errors(self) -> None:
        """All configuration errors share one base."""
        from exact_random import (
            ConfigurationError,
            IncompatibleFormatError,
            InvalidParametersError,
            OutOfDigitsError,
            ParameterOverflowError,
            UnsupportedBaseError,
        )

        for exc in (IncompatibleFormatError, InvalidParametersError, ParameterOverflowError, UnsupportedBaseError):
            assert issubclass(exc, ConfigurationError)
        assert issubclass(ConfigurationError, ValueError)
        assert not issubclass(OutOfDigitsError, ConfigurationError)

    def test_all_is_complete(self) -> None:
        import exact_random

        for name in exact_random.__all__:
            assert hasattr(exact_random, name), name
        assert exact_random.__version__ == '0.1.0'


class TestSubmoduleImports:
    """Verify the u-rand machinery imports from its modules."""

    @pytest.mark.parametrize(
        ('module', 'name'),
        [
            ('exact_random.urand', 'URand'),
            ('exact_random.irand', 'IRand'),
            ('exact_random.digits', 'DigitGenerator'),
            ('exact_random.normal', 'UnitNormal'),
            ('exact_random.exponential', 'UnitExponential'),
            ('exact_random.uniform', 'UnitUniform'),
            ('exact_random.discrete_normal', 'DiscreteNormal'),
            ('exact_random.reference', 'chi_squared'),
        ],
    )
    def test_import(self, module: str, name: str) -> None:
        import importlib

        assert hasattr(importlib.import_module(module), name)

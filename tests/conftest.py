"""Pytest configuration for exact-random tests."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

import exact_random._config as config_module
from exact_random._logging import clear_log_hooks
from exact_random.engines import MT19937

if TYPE_CHECKING:
    from collections.abc import Generator


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        '--runslow',
        action='store_true',
        default=False,
        help='run the million-draw end-to-end self-checks',
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption('--runslow'):
        return
    skip_slow = pytest.mark.skip(reason='needs --runslow')
    for item in items:
        if 'slow' in item.keywords:
            item.add_marker(skip_slow)


@pytest.fixture
def fresh_runtime() -> Generator[None]:
    """Run a test with no runtime config and no log hooks, restoring that afterwards."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    config_module._config = None
    clear_log_hooks()
    yield
    config_module._config = None
    clear_log_hooks()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def mt() -> MT19937:
    """A Mersenne Twister with a fixed seed."""
    return MT19937(20240601)

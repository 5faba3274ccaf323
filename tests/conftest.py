"""Pytest fixtures for test configuration.

Global test safety measures:
 - Every test gets its own seeded random source; nothing touches global random state
"""
import pytest
import random
from datetime import datetime, timezone
from typing import Dict, Any

from ssm.config_types import AppConfig
from ssm.engine import build_engine


@pytest.fixture
def test_config() -> Dict[str, Any]:
    """Provide the default configuration as a dict.

    Tests should use this fixture and pass cfg to CLI/services directly,
    rather than setting environment variables.
    Tests can override individual values using dict update or deep_merge.
    """
    cfg = AppConfig().to_dict()
    cfg['log_level'] = 'DEBUG'
    return cfg


@pytest.fixture
def engine():
    """Engine wired from default configuration."""
    return build_engine(AppConfig())


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

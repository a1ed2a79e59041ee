import sys
import os

import pytest

# Ensure the project root is in the python path for all tests
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.matching import MatchingContext  # noqa: E402
from src.models import (  # noqa: E402
    LocationConfig,
    ProductGroupsConfig,
    VariationPatternsConfig,
)
from tests.payloads import GROUPS, LOCATIONS, PATTERNS  # noqa: E402


@pytest.fixture
def patterns_config():
    return VariationPatternsConfig.model_validate(PATTERNS)


@pytest.fixture
def groups_config():
    return ProductGroupsConfig.model_validate(GROUPS)


@pytest.fixture
def context(patterns_config, groups_config):
    """A fresh, initialized matching context per test."""
    return MatchingContext.from_configs(patterns_config, groups_config)


@pytest.fixture
def location_configs():
    return [LocationConfig.model_validate(loc) for loc in LOCATIONS["locations"]]

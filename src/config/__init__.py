"""
Configuration loading: JSON config documents and environment settings.
"""

from .loader import (
    ConfigError,
    load_json_config,
    load_locations_config,
    load_product_groups,
    load_variation_patterns,
)
from .settings import Settings

__all__ = [
    "ConfigError",
    "load_json_config",
    "load_locations_config",
    "load_product_groups",
    "load_variation_patterns",
    "Settings",
]

"""
Runtime settings read from the environment (and a .env file when present).
"""

import os
from typing import Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel

from src.config.loader import ConfigError

REQUIRED_VARIABLES = (
    "LOCATIONS_PATH",
    "VARIATION_PATTERNS_PATH",
    "PRODUCT_GROUPS_PATH",
    "TOAST_POS_PATH",
    "DOORDASH_ORDERS_PATH",
    "SQUARE_LOCATIONS_PATH",
    "SQUARE_CATALOG_PATH",
    "SQUARE_ORDERS_PATH",
    "SQUARE_PAYMENTS_PATH",
)


class Settings(BaseModel):
    locations_path: str
    variation_patterns_path: str
    product_groups_path: str
    toast_pos_path: str
    doordash_orders_path: str
    square_locations_path: str
    square_catalog_path: str
    square_orders_path: str
    square_payments_path: str
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, use_dotenv: bool = True) -> "Settings":
        """
        Builds settings from environment variables.

        Raises:
            ConfigError: naming every required variable that is unset.
        """
        if environ is None:
            if use_dotenv:
                load_dotenv()
            environ = dict(os.environ)

        missing = [name for name in REQUIRED_VARIABLES if not environ.get(name)]
        if missing:
            raise ConfigError(f"Missing environment variables: {', '.join(missing)}")

        values = {name.lower(): environ[name] for name in REQUIRED_VARIABLES}
        values["log_level"] = environ.get("LOG_LEVEL", "INFO")
        return cls(**values)

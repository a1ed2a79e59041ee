"""
Loading and validation of the JSON configuration documents.

Every failure (unreadable file, malformed JSON, schema violation) surfaces as
ConfigError with a message that names the offending field paths.
"""

import json
from pathlib import Path
from typing import Any, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from src.models.config import LocationsConfig, ProductGroupsConfig, VariationPatternsConfig
from src.utils.logging_config import logger

ConfigModel = TypeVar("ConfigModel", bound=BaseModel)


class ConfigError(ValueError):
    """Raised when a configuration file or environment setting is invalid."""


def format_validation_error(error: ValidationError) -> str:
    """One "  - dotted.path: message" line per validation issue."""
    lines = []
    for issue in error.errors():
        path = '.'.join(str(part) for part in issue['loc'])
        lines.append(f"  - {path}: {issue['msg']}")
    return '\n'.join(lines)


def load_json_file(path: Union[str, Path]) -> Any:
    """Reads a JSON document. Raises ConfigError when it cannot be read or parsed."""
    file_path = Path(path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read {file_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Malformed JSON in {file_path}: {e}") from e


def validate_config(data: Any, model: Type[ConfigModel], label: str) -> ConfigModel:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid {label}:\n{format_validation_error(e)}") from e


def load_json_config(path: Union[str, Path], model: Type[ConfigModel], label: str) -> ConfigModel:
    config = validate_config(load_json_file(path), model, label)
    logger.debug(f"Loaded {label} from {path}")
    return config


def load_locations_config(path: Union[str, Path]) -> LocationsConfig:
    return load_json_config(path, LocationsConfig, "locations config")


def load_variation_patterns(path: Union[str, Path]) -> VariationPatternsConfig:
    return load_json_config(path, VariationPatternsConfig, "variation patterns config")


def load_product_groups(path: Union[str, Path]) -> ProductGroupsConfig:
    return load_json_config(path, ProductGroupsConfig, "product groups config")

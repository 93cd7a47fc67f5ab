"""Configuration loading and key-case conversion."""

import json
import re
from pathlib import Path
from typing import Any

from loguru import logger

from svckit.config.schema import Settings


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".svckit" / "config.json"


def load_config(config_path: Path | None = None) -> Settings:
    """Load settings from file, falling back to defaults.

    Environment variables (``SVCKIT_*``) still apply on top of the defaults;
    values present in the file win over the environment.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            return Settings(**convert_keys(data))
        except (json.JSONDecodeError, TypeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}. Using defaults.")

    return Settings()


def save_config(settings: Settings, config_path: Path | None = None) -> None:
    """Save settings to file with camelCase keys."""
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(settings.model_dump())

    with open(path, "w") as f:
        json.dump(data, f, indent=2)


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    first, *rest = name.split("_")
    return first + "".join(word.capitalize() for word in rest)


def convert_keys(data: Any, preserve: frozenset[str] = frozenset()) -> Any:
    """Recursively convert dict keys from camelCase to snake_case.

    Values stored under a (converted) key named in *preserve* are passed
    through untouched, e.g. environment variable maps.
    """
    if isinstance(data, dict):
        result = {}
        for k, v in data.items():
            key = camel_to_snake(k)
            result[key] = v if key in preserve else convert_keys(v, preserve)
        return result
    if isinstance(data, list):
        return [convert_keys(item, preserve) for item in data]
    return data


def convert_to_camel(data: Any, preserve: frozenset[str] = frozenset()) -> Any:
    """Recursively convert dict keys from snake_case to camelCase.

    *preserve* names snake_case keys whose values are left untouched.
    """
    if isinstance(data, dict):
        result = {}
        for k, v in data.items():
            result[snake_to_camel(k)] = v if k in preserve else convert_to_camel(v, preserve)
        return result
    if isinstance(data, list):
        return [convert_to_camel(item, preserve) for item in data]
    return data

"""Configuration Loader - Imperative Shell.

This module handles loading configuration from YAML files and
environment variables. All I/O is contained here.

Models (Config) are defined in src/core/config.py
to avoid information leakage between layers.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from src.core.config import (
    Config,
    DEFAULT_CATEGORIES,
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_FALLBACK_LOCATION,
    validate_config,
)
from src.core.geo import Coordinate
from src.core.plan import ALL_CATEGORIES


logger = logging.getLogger(__name__)


def _resolve_value(value: Any) -> Any:
    """Resolve a value that may be an environment variable placeholder.

    Args:
        value: Value to resolve (may be a ${VAR} placeholder)

    Returns:
        Resolved value, or the placeholder itself if the variable is unset
    """
    if not isinstance(value, str):
        return value

    if value.startswith("${") and value.endswith("}"):
        var_name = value[2:-1]
        env_value = os.environ.get(var_name)
        if env_value:
            return env_value
        logger.warning("Environment variable %s not set", var_name)

    return value


def _parse_coordinate(data: dict[str, Any] | None) -> Coordinate:
    """Parse the fallback coordinate from config data."""
    if not data:
        return DEFAULT_FALLBACK_LOCATION
    return Coordinate(
        latitude=float(data["latitude"]),
        longitude=float(data["longitude"]),
    )


def _parse_url(value: Any) -> str | None:
    """Parse an optional URL, treating unresolved placeholders as unset."""
    resolved = _resolve_value(value)
    if not resolved or (isinstance(resolved, str) and resolved.startswith("${")):
        return None
    return str(resolved)


def _parse_categories(data: list[str] | None) -> tuple[str, ...]:
    """Parse the category list, making sure ALL comes first."""
    if not data:
        return DEFAULT_CATEGORIES
    names = [str(name) for name in data if name != ALL_CATEGORIES]
    return (ALL_CATEGORIES, *names)


def load_config_from_dict(data: dict[str, Any]) -> Config:
    """Load configuration from a dictionary.

    This is a pure-ish function (only env var expansion has side effects).

    Args:
        data: Configuration dictionary

    Returns:
        Parsed Config object
    """
    debounce_ms = data.get("debounce_ms")
    if debounce_ms is not None:
        debounce_seconds = float(debounce_ms) / 1000
    else:
        debounce_seconds = float(data.get("debounce_seconds", DEFAULT_DEBOUNCE_SECONDS))

    filters = data.get("filters") or {}

    return Config(
        fallback_location=_parse_coordinate(data.get("fallback_location")),
        debounce_seconds=debounce_seconds,
        default_mode=str(filters.get("mode", "nearby")),
        default_category=str(filters.get("category", ALL_CATEGORIES)),
        default_distance_km=float(filters.get("distance_km", 10)),
        min_distance_km=float(filters.get("min_distance_km", 1)),
        max_distance_km=float(filters.get("max_distance_km", 50)),
        categories=_parse_categories(data.get("categories")),
        events_api_url=_parse_url(data.get("events_api_url")),
        location_api_url=_parse_url(data.get("location_api_url")),
        request_timeout_seconds=int(data.get("request_timeout_seconds", 10)),
    )


def _log_validation(config: Config) -> None:
    """Log validation problems without failing the screen."""
    result = validate_config(config)
    for error in result.errors:
        if error.severity == "warning":
            logger.warning("Config %s: %s", error.field, error.message)
        else:
            logger.error("Config %s: %s", error.field, error.message)


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from a YAML file.

    This method performs file I/O.

    Args:
        config_path: Path to YAML config file.
                    If None, uses CONFIG_PATH env var or default.

    Returns:
        Parsed Config object

    Raises:
        yaml.YAMLError: If config file is invalid YAML
    """
    if config_path is None:
        config_path = os.environ.get("CONFIG_PATH", "config/config.yaml")

    path = Path(config_path)

    logger.info("Loading configuration from %s", path)

    if not path.exists():
        logger.warning("Config file not found: %s, using defaults", path)
        return Config()

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        logger.warning("Config file is empty, using defaults")
        return Config()

    config = load_config_from_dict(data)
    _log_validation(config)

    logger.info(
        "Loaded config: fallback %.4f,%.4f, debounce %.0fms, %d categories",
        config.fallback_location.latitude,
        config.fallback_location.longitude,
        config.debounce_seconds * 1000,
        len(config.categories),
    )

    return config


def load_config_from_env() -> Config:
    """Load minimal configuration from environment variables.

    Useful for simple deployments without a YAML file.

    Environment variables:
        FALLBACK_LAT: Fallback latitude
        FALLBACK_LON: Fallback longitude
        DEBOUNCE_MS: Debounce window in milliseconds
        EVENTS_API_URL: Events backend base URL
        LOCATION_API_URL: IP geolocation endpoint

    Returns:
        Config object from environment
    """
    fallback = DEFAULT_FALLBACK_LOCATION
    lat = os.environ.get("FALLBACK_LAT")
    lon = os.environ.get("FALLBACK_LON")
    if lat and lon:
        fallback = Coordinate(latitude=float(lat), longitude=float(lon))

    debounce_ms = os.environ.get("DEBOUNCE_MS")
    debounce_seconds = float(debounce_ms) / 1000 if debounce_ms else DEFAULT_DEBOUNCE_SECONDS

    config = Config(
        fallback_location=fallback,
        debounce_seconds=debounce_seconds,
        events_api_url=os.environ.get("EVENTS_API_URL") or None,
        location_api_url=os.environ.get("LOCATION_API_URL") or None,
    )
    _log_validation(config)

    return config

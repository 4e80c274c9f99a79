"""Imperative Shell - I/O and side effects.

This module contains all code that interacts with external systems:
- Events API client (HTTP)
- Location providers (HTTP / static)
- Debounce scheduler (timer threads)
- Configuration loading (environment/files)

Keep this layer thin and simple. All business logic should be in core.
"""

from src.shell.events_client import EventsClient
from src.shell.location_provider import (
    IpLocationProvider,
    LocationUnavailable,
    StaticLocationProvider,
)
from src.shell.scheduler import ThreadingScheduler
from src.shell.config_loader import load_config, Config

__all__ = [
    "EventsClient",
    "IpLocationProvider",
    "LocationUnavailable",
    "StaticLocationProvider",
    "ThreadingScheduler",
    "load_config",
    "Config",
]

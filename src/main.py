"""Application Entry Point.

Builds a ready-to-use recompute controller for the dashboard screen.
It's a thin wrapper that loads configuration, fetches events, resolves
the user's location and hands everything to the controller.
"""

import logging
import os
from typing import Callable

import requests

from src.controller import ReactiveRecomputeController
from src.core.config import Config
from src.core.engine import DisplayResult
from src.core.event import EventRecord
from src.shell.config_loader import load_config, load_config_from_env
from src.shell.events_client import EventsClient
from src.shell.location_provider import (
    IpLocationProvider,
    LocationProvider,
    StaticLocationProvider,
)
from src.shell.scheduler import Scheduler


# Configure logging
log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("EVENTS_API_URL"):
        # Simple env-based config
        return load_config_from_env()
    else:
        # Try default config path
        return load_config()


def _load_events(config: Config, events_client: EventsClient | None) -> list[EventRecord]:
    """Fetch the initial event list, starting empty on failure."""
    if events_client is None:
        if not config.events_api_url:
            logger.info("No events API configured, starting with no events")
            return []
        events_client = EventsClient(
            config.events_api_url,
            timeout=config.request_timeout_seconds,
        )

    try:
        return events_client.get_events()
    except requests.RequestException as e:
        logger.error("Failed to fetch events: %s", e)
        return []


def _default_location_provider(config: Config) -> LocationProvider:
    if config.location_api_url:
        return IpLocationProvider(
            config.location_api_url,
            timeout=config.request_timeout_seconds,
        )
    return StaticLocationProvider(config.fallback_location)


def build_controller(
    config: Config | None = None,
    events_client: EventsClient | None = None,
    location_provider: LocationProvider | None = None,
    scheduler: Scheduler | None = None,
    on_change: Callable[[DisplayResult], None] | None = None,
) -> ReactiveRecomputeController:
    """Create a controller for a freshly mounted dashboard.

    The returned controller is ready, with its first recompute pending.

    Args:
        config: Application configuration (loaded if not provided)
        events_client: Event source (built from config if not provided)
        location_provider: Location source (built from config if not provided)
        scheduler: Debounce scheduler (threading timers if not provided)
        on_change: Listener for installed display lists

    Returns:
        Ready controller
    """
    config = config or _get_config()
    events = _load_events(config, events_client)

    controller = ReactiveRecomputeController(
        config,
        scheduler=scheduler,
        on_change=on_change,
        events=events,
    )
    controller.resolve_location(location_provider or _default_location_provider(config))

    logger.info("Dashboard controller built with %d events", len(events))

    return controller


# For local testing
if __name__ == "__main__":
    from src.core.formatter import format_event_summary

    controller = build_controller()
    controller.flush()

    print(f"\n{controller.settings.mode.value} events near {controller.reference}:")
    for event in controller.get_display_list():
        print(f"  - {format_event_summary(event)}")

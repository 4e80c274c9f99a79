"""Events API Client - Imperative Shell.

This module handles HTTP communication with the events backend.
All I/O is contained here; parsing and filtering are in the core module.
"""

import logging
from typing import Any

import requests

from src.core.event import EventRecord, parse_events


logger = logging.getLogger(__name__)


# Default timeout for API requests (seconds)
DEFAULT_TIMEOUT = 10

# Events fetched per page; the dashboard shows tens of events
DEFAULT_LIMIT = 50


def extract_items(payload: Any) -> list[dict[str, Any]]:
    """Unwrap the event list from a backend response body.

    Accepts {"data": {"data": [...]}}, {"data": [...]} or a bare list.
    """
    if isinstance(payload, list):
        return payload

    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict):
            data = data.get("data")
        if isinstance(data, list):
            return data

    return []


class EventsClient:
    """Client for fetching events from the backend.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize events client.

        Args:
            base_url: Backend API base URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_events(self, page: int = 1, limit: int = DEFAULT_LIMIT) -> Any:
        """Fetch a page of events from the backend.

        This method performs HTTP I/O.

        Args:
            page: Page number (1-based)
            limit: Events per page

        Returns:
            Raw JSON response body

        Raises:
            requests.RequestException: If the request fails
        """
        params = {"page": page, "limit": limit}

        logger.info(
            "Fetching events from backend",
            extra={"params": params},
        )

        response = requests.get(
            f"{self.base_url}/events",
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()

        return response.json()

    def get_events(self, page: int = 1, limit: int = DEFAULT_LIMIT) -> list[EventRecord]:
        """Fetch and parse events.

        Returns:
            Parsed event records in backend order

        Raises:
            requests.RequestException: If the request fails
        """
        items = extract_items(self.fetch_events(page=page, limit=limit))
        events = parse_events(items)

        logger.info(
            "Fetched %d events (%d skipped as invalid)",
            len(events),
            len(items) - len(events),
        )

        return events

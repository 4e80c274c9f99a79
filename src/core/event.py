"""Event data models and parsing - Pure functions.

This module handles parsing backend event JSON into typed EventRecord
objects, and the annotated view the filter engine produces.
All functions are pure with no side effects.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any

from src.core.geo import Coordinate


@dataclass(frozen=True)
class EventRecord:
    """Immutable event data model, owned by the data layer.

    Attributes:
        id: Backend event ID
        title: Event title
        category: Sport name (e.g., 'Futbol', 'Tenis')
        coordinates: Venue location, None when the backend has none
        participant_count: Current number of participants
        max_participants: Capacity (0 for unlimited)
        is_joined: Whether the current user has joined
        location_name: Human-readable venue name
        event_date: Day of the event (optional)
        start_time: Start time as sent by the backend (e.g., '18:00')
        end_time: End time as sent by the backend
        description: Free-text description
        price: Entry price
        status: Backend status (e.g., 'active')
        image_url: Cover image URL (optional)
    """
    id: int | str
    title: str
    category: str
    coordinates: Coordinate | None
    participant_count: int = 0
    max_participants: int = 0
    is_joined: bool = False
    location_name: str = ""
    event_date: date | None = None
    start_time: str = ""
    end_time: str = ""
    description: str = ""
    price: float = 0.0
    status: str = "active"
    image_url: str | None = None

    @property
    def is_full(self) -> bool:
        """Return True if the event has reached its capacity."""
        return self.max_participants > 0 and self.participant_count >= self.max_participants


@dataclass(frozen=True)
class AnnotatedEvent:
    """An event with its distance from a reference coordinate.

    Always built fresh by the annotator; the wrapped record is never
    modified.

    Attributes:
        event: The original event record
        distance_km: Great-circle distance to the reference (NaN if unknown)
        distance_label: Display label, e.g. '0.8 km'
    """
    event: EventRecord
    distance_km: float
    distance_label: str

    @property
    def id(self) -> int | str:
        return self.event.id

    @property
    def title(self) -> str:
        return self.event.title

    @property
    def category(self) -> str:
        return self.event.category

    @property
    def is_joined(self) -> bool:
        return self.event.is_joined

    @property
    def coordinates(self) -> Coordinate | None:
        return self.event.coordinates

    @property
    def event_date(self) -> date | None:
        return self.event.event_date

    @property
    def participant_count(self) -> int:
        return self.event.participant_count

    @property
    def max_participants(self) -> int:
        return self.event.max_participants


def _parse_coordinates(data: dict[str, Any]) -> Coordinate | None:
    """Read coordinates from either backend or dashboard field names."""
    lat = data.get("location_lat")
    lon = data.get("location_lng")

    nested = data.get("coordinates")
    if (lat is None or lon is None) and isinstance(nested, dict):
        lat = nested.get("latitude")
        lon = nested.get("longitude")

    if lat is None or lon is None:
        return None

    return Coordinate(latitude=float(lat), longitude=float(lon))


def _parse_date(value: Any) -> date | None:
    """Parse an ISO date or datetime string, keeping only the day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def parse_event(data: dict[str, Any]) -> EventRecord | None:
    """Parse a single backend event dict into an EventRecord.

    Pure function: takes raw dict, returns typed EventRecord or None if invalid.
    Events with missing coordinates are kept; their distance is undefined.

    Args:
        data: Event dict from the events API

    Returns:
        EventRecord or None if parsing fails
    """
    try:
        event_id = data.get("id")
        if event_id is None:
            return None

        sport = data.get("sport")
        if isinstance(sport, dict) and sport.get("name"):
            category = sport["name"]
        else:
            category = data.get("category", "")

        return EventRecord(
            id=event_id,
            title=data.get("title", ""),
            category=category,
            coordinates=_parse_coordinates(data),
            participant_count=int(
                data.get("current_participants", data.get("participantCount", 0)) or 0
            ),
            max_participants=int(
                data.get("max_participants", data.get("maxParticipants", 0)) or 0
            ),
            is_joined=bool(data.get("is_joined", data.get("isJoined", False))),
            location_name=data.get("location_name", data.get("location", "")) or "",
            event_date=_parse_date(data.get("event_date")),
            start_time=data.get("start_time", "") or "",
            end_time=data.get("end_time", "") or "",
            description=data.get("description", "") or "",
            price=float(data.get("price", 0) or 0),
            status=data.get("status", "active") or "active",
            image_url=data.get("image_url"),
        )
    except (KeyError, TypeError, ValueError):
        return None


def parse_events(items: list[dict[str, Any]]) -> list[EventRecord]:
    """Parse a list of backend event dicts, dropping invalid ones.

    Pure function. Preserves the backend order.

    Args:
        items: Event dicts from the events API

    Returns:
        List of valid EventRecord objects
    """
    events = []

    for item in items:
        if not isinstance(item, dict):
            continue
        event = parse_event(item)
        if event is not None:
            events.append(event)

    return events


def toggle_joined(
    events: list[EventRecord],
    event_id: int | str,
) -> list[EventRecord]:
    """Flip the joined flag of one event, as a join/leave action does.

    Pure function - returns a new list without modifying the input.
    Participant count moves by one, clamped to [0, max_participants]
    when a maximum is set.

    Args:
        events: Current event list
        event_id: ID of the event being joined or left

    Returns:
        New list with the matching event replaced
    """
    result = []

    for event in events:
        if event.id != event_id:
            result.append(event)
            continue

        joined = not event.is_joined
        count = event.participant_count + (1 if joined else -1)
        count = max(count, 0)
        if event.max_participants > 0:
            count = min(count, event.max_participants)

        result.append(replace(event, is_joined=joined, participant_count=count))

    return result

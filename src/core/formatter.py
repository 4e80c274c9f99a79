"""Display formatting - Pure functions.

This module formats event values into the short labels shown on
dashboard event cards. All functions are pure with no side effects.
"""

import math

from src.core.event import AnnotatedEvent, EventRecord


DISTANCE_UNIT = "km"


def format_distance_label(distance_km: float) -> str:
    """Format a distance rounded to one decimal with a unit suffix.

    Pure function.

    Args:
        distance_km: Distance in kilometers (may be NaN)

    Returns:
        Label such as '0.8 km', or '? km' when the distance is unknown
    """
    if math.isnan(distance_km):
        return f"? {DISTANCE_UNIT}"
    return f"{distance_km:.1f} {DISTANCE_UNIT}"


def format_participants(event: EventRecord | AnnotatedEvent) -> str:
    """Format participant count, e.g. '3/10', or '3' without a capacity.

    Pure function.
    """
    if event.max_participants > 0:
        return f"{event.participant_count}/{event.max_participants}"
    return str(event.participant_count)


def format_event_summary(event: AnnotatedEvent) -> str:
    """Format a one-line summary of an annotated event.

    Pure function.

    Args:
        event: Annotated event to summarize

    Returns:
        One-line summary string
    """
    joined = " [joined]" if event.is_joined else ""
    return (
        f"{event.title} ({event.category}) - {event.distance_label}, "
        f"{format_participants(event)} participants{joined}"
    )

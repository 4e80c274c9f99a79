"""Event annotation - Pure functions.

Attaches a reference-relative distance to each event. Annotation never
reorders or drops events; sorting and filtering belong to the engine.
"""

import math

from src.core.event import AnnotatedEvent, EventRecord
from src.core.formatter import format_distance_label
from src.core.geo import Coordinate, distance_km


def annotate_event(event: EventRecord, reference: Coordinate) -> AnnotatedEvent:
    """Annotate a single event with its distance from the reference.

    Pure function. Events without coordinates get a NaN distance.
    """
    if event.coordinates is None:
        distance = math.nan
    else:
        distance = distance_km(reference, event.coordinates)

    return AnnotatedEvent(
        event=event,
        distance_km=distance,
        distance_label=format_distance_label(distance),
    )


def annotate(
    events: list[EventRecord],
    reference: Coordinate,
) -> list[AnnotatedEvent]:
    """Annotate every event with its distance from the reference.

    Pure function. Output has the same length and order as the input.

    Args:
        events: Raw event records
        reference: Current user coordinate

    Returns:
        Newly built annotated events
    """
    return [annotate_event(e, reference) for e in events]

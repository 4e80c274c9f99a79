"""Functional Core - Pure functions with no side effects.

This module contains all business logic as pure functions:
- Event data parsing
- Geo/distance calculations
- Distance annotation
- Filter plan construction
- Filtering and empty-result fallback

All functions here are deterministic and have no I/O.
"""

from src.core.event import EventRecord, AnnotatedEvent, parse_events, toggle_joined
from src.core.geo import Coordinate, calculate_distance, distance_km
from src.core.annotate import annotate
from src.core.plan import FilterMode, FilterSettings, FilterPlan, build_plan
from src.core.engine import filter_events, apply_empty_fallback, compute_display_list

__all__ = [
    # Event
    "EventRecord",
    "AnnotatedEvent",
    "parse_events",
    "toggle_joined",
    # Geo
    "Coordinate",
    "calculate_distance",
    "distance_km",
    # Annotation
    "annotate",
    # Plan
    "FilterMode",
    "FilterSettings",
    "FilterPlan",
    "build_plan",
    # Engine
    "filter_events",
    "apply_empty_fallback",
    "compute_display_list",
]

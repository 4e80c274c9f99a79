"""Filter plan construction - Pure functions.

This module turns a filter settings snapshot into an ordered plan of
predicates, an optional sort key and an optional selection limit.
All functions are pure with no side effects.
"""

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Callable

from src.core.event import AnnotatedEvent


ALL_CATEGORIES = "ALL"


class FilterMode(str, Enum):
    """Dashboard tab selecting which events are shown."""
    NEARBY = "nearby"
    NEAREST = "nearest"
    JOINED = "joined"


@dataclass(frozen=True)
class FilterSettings:
    """Snapshot of the user's filter choices.

    Attributes:
        mode: Active tab
        category: Sport name, or ALL_CATEGORIES for no category filter
        max_distance_km: Distance threshold; None, zero or negative disables it
        event_date: Only show events on this day (nearby tab only)
    """
    mode: FilterMode = FilterMode.NEARBY
    category: str | None = ALL_CATEGORIES
    max_distance_km: float | None = 10.0
    event_date: date | None = None


Predicate = Callable[[AnnotatedEvent], bool]
SortKey = Callable[[AnnotatedEvent], float]


@dataclass(frozen=True)
class FilterPlan:
    """Ordered description of how to select the display list.

    Attributes:
        predicates: Applied in order; an event must pass all of them
        sort_key: Ascending sort key, None to keep annotated order
        limit: Maximum number of events, None for no limit
    """
    predicates: tuple[Predicate, ...] = ()
    sort_key: SortKey | None = None
    limit: int | None = None


def normalize_threshold(value: Any) -> float | None:
    """Normalize a distance threshold, treating invalid values as unset.

    Pure function.

    Args:
        value: Threshold as given by the UI

    Returns:
        Positive finite threshold in km, or None
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(threshold) or threshold <= 0:
        return None
    return threshold


def normalize_category(value: str | None) -> str:
    """Map empty category selections to ALL_CATEGORIES.

    Pure function.
    """
    if not value:
        return ALL_CATEGORIES
    return value


def nearest_first(event: AnnotatedEvent) -> float:
    """Sort key for ascending distance; unknown distances sort last.

    Pure function.
    """
    if math.isnan(event.distance_km):
        return math.inf
    return event.distance_km


def within_distance(threshold: float) -> Predicate:
    """Build a predicate accepting events at most threshold km away.

    NaN distances compare false and are excluded.
    """
    def predicate(event: AnnotatedEvent) -> bool:
        return event.distance_km <= threshold

    return predicate


def in_category(category: str) -> Predicate:
    """Build a predicate accepting events of one category."""
    def predicate(event: AnnotatedEvent) -> bool:
        return event.category == category

    return predicate


def on_date(day: date) -> Predicate:
    """Build a predicate accepting events scheduled on one day."""
    def predicate(event: AnnotatedEvent) -> bool:
        return event.event_date == day

    return predicate


def is_joined(event: AnnotatedEvent) -> bool:
    """Predicate accepting events the user has joined."""
    return event.is_joined


def build_plan(settings: FilterSettings) -> FilterPlan:
    """Build the filter plan for a settings snapshot.

    Pure function.

    - JOINED: joined events only, annotated order, no limit.
    - NEAREST: the single closest event; category, threshold and date
      settings are ignored entirely.
    - NEARBY: threshold (when set), then category (unless ALL), then date
      (when set); annotated order, no limit.

    Args:
        settings: Filter settings snapshot

    Returns:
        FilterPlan to apply to annotated events
    """
    if settings.mode == FilterMode.JOINED:
        return FilterPlan(predicates=(is_joined,))

    if settings.mode == FilterMode.NEAREST:
        return FilterPlan(sort_key=nearest_first, limit=1)

    predicates: list[Predicate] = []

    threshold = normalize_threshold(settings.max_distance_km)
    if threshold is not None:
        predicates.append(within_distance(threshold))

    category = normalize_category(settings.category)
    if category != ALL_CATEGORIES:
        predicates.append(in_category(category))

    if settings.event_date is not None:
        predicates.append(on_date(settings.event_date))

    return FilterPlan(predicates=tuple(predicates))

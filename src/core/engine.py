"""Filter engine - Pure functions.

This module annotates events, applies the mode-dependent filter plan and
decides what to show when a filter leaves nothing behind.
All functions are pure with no side effects.
"""

from dataclasses import dataclass

from src.core.annotate import annotate
from src.core.event import AnnotatedEvent, EventRecord
from src.core.geo import Coordinate
from src.core.plan import FilterMode, FilterPlan, FilterSettings, build_plan, nearest_first


def unique_by_id(events: list[AnnotatedEvent]) -> list[AnnotatedEvent]:
    """Drop events whose ID was already seen, keeping the first.

    Pure function.
    """
    seen: set = set()
    result = []

    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        result.append(event)

    return result


def apply_plan(
    annotated: list[AnnotatedEvent],
    plan: FilterPlan,
) -> list[AnnotatedEvent]:
    """Apply predicates, sort and limit of a plan in that order.

    Pure function. Sorting is stable, so ties keep annotated order.

    Args:
        annotated: Annotated, de-duplicated events
        plan: Plan built from the settings

    Returns:
        Selected events
    """
    result = annotated

    for predicate in plan.predicates:
        result = [e for e in result if predicate(e)]

    if plan.sort_key is not None:
        result = sorted(result, key=plan.sort_key)

    if plan.limit is not None:
        result = result[:plan.limit]

    return list(result)


def filter_events(
    events: list[EventRecord],
    reference: Coordinate,
    settings: FilterSettings,
) -> list[AnnotatedEvent]:
    """Produce the display list for a settings snapshot.

    Pure function: identical inputs always give an identical, order-stable
    result. An empty list is a valid outcome, not an error.

    Args:
        events: Raw event records
        reference: Current user coordinate
        settings: Filter settings snapshot

    Returns:
        Filtered annotated events
    """
    annotated = unique_by_id(annotate(events, reference))
    return apply_plan(annotated, build_plan(settings))


def select_nearest(annotated: list[AnnotatedEvent]) -> list[AnnotatedEvent]:
    """Return the single closest event, or an empty list.

    Pure function.
    """
    if not annotated:
        return []
    return [min(annotated, key=nearest_first)]


def apply_empty_fallback(
    result: list[AnnotatedEvent],
    annotated: list[AnnotatedEvent],
    settings: FilterSettings,
) -> list[AnnotatedEvent]:
    """Decide what to show when a filter result is empty.

    Pure function. Decision table:

    - non-empty result: shown as is
    - NEARBY: the full annotated list, ignoring category and distance
    - NEAREST: the globally nearest event
    - JOINED: nothing; an empty joined list is meaningful

    An empty annotated list yields an empty fallback, which is terminal.

    Args:
        result: Output of the filter
        annotated: All annotated, de-duplicated events
        settings: Settings the result was computed with

    Returns:
        List to display
    """
    if result:
        return result

    if settings.mode == FilterMode.NEARBY:
        return list(annotated)

    if settings.mode == FilterMode.NEAREST:
        return select_nearest(annotated)

    return []


@dataclass(frozen=True)
class DisplayResult:
    """Outcome of one recompute.

    Attributes:
        events: List to display
        fell_back: True if the empty-result fallback replaced the filter output
        settings: Settings snapshot the list was computed with
    """
    events: list[AnnotatedEvent]
    fell_back: bool
    settings: FilterSettings

    @property
    def count(self) -> int:
        return len(self.events)


def compute_display_list(
    events: list[EventRecord],
    reference: Coordinate,
    settings: FilterSettings,
) -> DisplayResult:
    """Filter events and apply the empty-result fallback.

    Pure function.

    Args:
        events: Raw event records
        reference: Current user coordinate
        settings: Filter settings snapshot

    Returns:
        DisplayResult with the list to show
    """
    annotated = unique_by_id(annotate(events, reference))
    result = apply_plan(annotated, build_plan(settings))
    display = apply_empty_fallback(result, annotated, settings)

    return DisplayResult(
        events=display,
        fell_back=not result and bool(display),
        settings=settings,
    )

"""Unit tests for the filter engine and empty-result fallback.

Pure function tests - no mocks needed, fast execution.
"""

import math
from datetime import date

import pytest

from src.core.engine import (
    apply_empty_fallback,
    compute_display_list,
    filter_events,
    select_nearest,
    unique_by_id,
)
from src.core.annotate import annotate
from src.core.event import EventRecord
from src.core.geo import Coordinate
from src.core.plan import ALL_CATEGORIES, FilterMode, FilterSettings


# Alaaddin Tepesi, Konya
REFERENCE = Coordinate(latitude=37.8717, longitude=32.4930)


def north_of_reference(km: float) -> Coordinate:
    """Coordinate due north of the reference by km kilometers."""
    return Coordinate(REFERENCE.latitude + km / 111.19493, REFERENCE.longitude)


def make_event(event_id, km, category="Koşu", is_joined=False, event_date=None):
    return EventRecord(
        id=event_id,
        title=f"Event {event_id}",
        category=category,
        coordinates=north_of_reference(km) if km is not None else None,
        participant_count=2,
        max_participants=10,
        is_joined=is_joined,
        event_date=event_date,
    )


@pytest.fixture
def event_a():
    """Running event 0.8 km away."""
    return make_event("A", 0.8, category="Koşu")


@pytest.fixture
def event_b():
    """Tennis event 4.1 km away."""
    return make_event("B", 4.1, category="Tenis")


@pytest.fixture
def mixed_events():
    return [
        make_event(1, 5.8, category="Bisiklet"),
        make_event(2, 1.2, category="Basketbol", is_joined=True),
        make_event(3, 2.5, category="Futbol", is_joined=True),
        make_event(4, 0.9, category="Yoga"),
        make_event(5, None, category="Futbol"),
        make_event(6, 3.7, category="Yüzme", is_joined=True),
        make_event(7, 1.5, category="Bisiklet"),
    ]


class TestConcreteScenarios:
    """Dashboard scenarios around Alaaddin Tepesi."""

    def test_nearby_threshold_keeps_close_event(self, event_a, event_b):
        """Within 3 km only the 0.8 km running event remains."""
        settings = FilterSettings(mode=FilterMode.NEARBY, max_distance_km=3, category=ALL_CATEGORIES)

        result = filter_events([event_a, event_b], REFERENCE, settings)

        assert [e.id for e in result] == ["A"]

    def test_nearest_ignores_filters(self, event_a, event_b):
        """NEAREST returns the closest event whatever the filters say."""
        settings = FilterSettings(mode=FilterMode.NEAREST, max_distance_km=0.1, category="Tenis")

        result = filter_events([event_b, event_a], REFERENCE, settings)

        assert [e.id for e in result] == ["A"]

    def test_joined_returns_joined_only(self):
        """JOINED shows only events the user joined."""
        a = make_event("A", 0.8, is_joined=False)
        b = make_event("B", 4.1, is_joined=True)

        result = filter_events([a, b], REFERENCE, FilterSettings(mode=FilterMode.JOINED))

        assert [e.id for e in result] == ["B"]

    def test_empty_nearby_falls_back_to_full_list(self, event_a, event_b):
        """Nothing within 0.1 km shows every annotated event instead."""
        settings = FilterSettings(mode=FilterMode.NEARBY, max_distance_km=0.1, category=ALL_CATEGORIES)

        result = compute_display_list([event_a, event_b], REFERENCE, settings)

        assert [e.id for e in result.events] == ["A", "B"]
        assert result.fell_back is True


class TestFilterEventsLaws:
    """Properties that hold for every input."""

    @pytest.mark.parametrize("threshold", [0.5, 1.0, 2.5, 4.0, 100.0])
    def test_nearby_threshold_law(self, mixed_events, threshold):
        """Every NEARBY result is within the threshold."""
        settings = FilterSettings(mode=FilterMode.NEARBY, max_distance_km=threshold)

        for event in filter_events(mixed_events, REFERENCE, settings):
            assert event.distance_km <= threshold

    @pytest.mark.parametrize("category", ["Futbol", "Bisiklet", "Kriket"])
    def test_category_law(self, mixed_events, category):
        """Every NEARBY result matches the selected category."""
        settings = FilterSettings(mode=FilterMode.NEARBY, category=category, max_distance_km=None)

        for event in filter_events(mixed_events, REFERENCE, settings):
            assert event.category == category

    def test_nearby_preserves_annotated_order(self, mixed_events):
        """NEARBY does not reorder events."""
        settings = FilterSettings(mode=FilterMode.NEARBY, max_distance_km=None)

        result = filter_events(mixed_events, REFERENCE, settings)

        assert [e.id for e in result] == [1, 2, 3, 4, 5, 6, 7]

    def test_nan_distance_excluded_from_nearby(self, mixed_events):
        """Events without coordinates fail any threshold."""
        settings = FilterSettings(mode=FilterMode.NEARBY, max_distance_km=1_000)

        result = filter_events(mixed_events, REFERENCE, settings)

        assert 5 not in [e.id for e in result]

    def test_nearest_is_minimum(self, mixed_events):
        """NEAREST yields exactly the minimum-distance event."""
        result = filter_events(mixed_events, REFERENCE, FilterSettings(mode=FilterMode.NEAREST))
        distances = [
            e.distance_km for e in annotate(mixed_events, REFERENCE)
            if not math.isnan(e.distance_km)
        ]

        assert len(result) == 1
        assert result[0].id == 4
        assert result[0].distance_km == min(distances)

    def test_nearest_of_empty_list(self):
        """NEAREST over no events is empty."""
        assert filter_events([], REFERENCE, FilterSettings(mode=FilterMode.NEAREST)) == []

    def test_nearest_tie_keeps_first(self):
        """Ties resolve to the earlier event."""
        events = [make_event("x", 1.0), make_event("y", 1.0)]

        result = filter_events(events, REFERENCE, FilterSettings(mode=FilterMode.NEAREST))

        assert result[0].id == "x"

    def test_joined_bijection(self, mixed_events):
        """JOINED output is exactly the joined subset, in order."""
        result = filter_events(
            mixed_events,
            REFERENCE,
            FilterSettings(mode=FilterMode.JOINED, category="Yoga", max_distance_km=0.1),
        )

        assert [e.id for e in result] == [e.id for e in mixed_events if e.is_joined]

    def test_no_duplicate_ids(self, event_a, event_b):
        """Repeated IDs appear once, first occurrence wins."""
        duplicate = make_event("A", 9.0)

        result = filter_events(
            [event_a, event_b, duplicate],
            REFERENCE,
            FilterSettings(max_distance_km=None),
        )

        assert [e.id for e in result] == ["A", "B"]
        assert result[0].distance_km == pytest.approx(0.8, abs=0.01)

    def test_deterministic(self, mixed_events):
        """Identical inputs give identical results."""
        settings = FilterSettings(max_distance_km=3)

        assert filter_events(mixed_events, REFERENCE, settings) == filter_events(
            mixed_events, REFERENCE, settings
        )

    def test_date_filter(self):
        """A selected day narrows NEARBY results."""
        day = date(2024, 10, 23)
        events = [
            make_event(1, 0.5, event_date=day),
            make_event(2, 0.6, event_date=date(2024, 10, 24)),
        ]

        result = filter_events(events, REFERENCE, FilterSettings(event_date=day))

        assert [e.id for e in result] == [1]


class TestApplyEmptyFallback:
    """Tests for the empty-result decision table."""

    @pytest.fixture
    def annotated_events(self, event_a, event_b):
        return annotate([event_b, event_a], REFERENCE)

    def test_non_empty_result_kept(self, annotated_events):
        result = annotated_events[:1]
        settings = FilterSettings(mode=FilterMode.NEARBY)

        assert apply_empty_fallback(result, annotated_events, settings) == result

    def test_nearby_falls_back_to_annotated(self, annotated_events):
        settings = FilterSettings(mode=FilterMode.NEARBY)

        assert apply_empty_fallback([], annotated_events, settings) == annotated_events

    def test_nearest_falls_back_to_global_nearest(self, annotated_events):
        settings = FilterSettings(mode=FilterMode.NEAREST)

        result = apply_empty_fallback([], annotated_events, settings)

        assert [e.id for e in result] == ["A"]

    def test_joined_stays_empty(self, annotated_events):
        settings = FilterSettings(mode=FilterMode.JOINED)

        assert apply_empty_fallback([], annotated_events, settings) == []

    @pytest.mark.parametrize("mode", list(FilterMode))
    def test_no_events_is_terminal(self, mode):
        """With nothing annotated, every mode ends empty."""
        assert apply_empty_fallback([], [], FilterSettings(mode=mode)) == []


class TestComputeDisplayList:
    """Tests for compute_display_list()."""

    def test_no_fallback_when_matches(self, event_a, event_b):
        result = compute_display_list([event_a, event_b], REFERENCE, FilterSettings(max_distance_km=3))

        assert result.fell_back is False
        assert result.count == 1

    def test_joined_empty_is_not_a_fallback(self, event_a):
        result = compute_display_list([event_a], REFERENCE, FilterSettings(mode=FilterMode.JOINED))

        assert result.events == []
        assert result.fell_back is False

    def test_carries_settings(self, event_a):
        settings = FilterSettings(mode=FilterMode.NEAREST)

        assert compute_display_list([event_a], REFERENCE, settings).settings == settings

    def test_empty_events(self):
        result = compute_display_list([], REFERENCE, FilterSettings())

        assert result.events == []
        assert result.fell_back is False


class TestHelpers:
    """Tests for unique_by_id() and select_nearest()."""

    def test_unique_by_id(self, event_a, event_b):
        annotated = annotate([event_a, event_b, event_a], REFERENCE)

        assert [e.id for e in unique_by_id(annotated)] == ["A", "B"]

    def test_select_nearest_skips_unknown_distance(self, event_b):
        annotated = annotate([make_event("n", None), event_b], REFERENCE)

        assert [e.id for e in select_nearest(annotated)] == ["B"]

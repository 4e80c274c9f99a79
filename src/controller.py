"""Recompute Controller - Wires Functional Core and Imperative Shell.

This module decides when the pure filter engine must run again. Five
inputs change independently (location, category, distance threshold,
mode and the event list); every change replaces a settings snapshot and
schedules a debounced recompute. Only the latest snapshot is ever
computed, and results are installed whole.
"""

import logging
import threading
from dataclasses import replace
from datetime import date
from enum import Enum
from typing import Callable

from src.core.config import Config
from src.core.engine import DisplayResult, compute_display_list
from src.core.event import AnnotatedEvent, EventRecord, toggle_joined
from src.core.geo import Coordinate
from src.core.plan import FilterMode, FilterSettings, normalize_category
from src.shell.location_provider import LocationProvider, LocationUnavailable
from src.shell.scheduler import ScheduledTask, Scheduler, ThreadingScheduler


logger = logging.getLogger(__name__)


class ControllerState(str, Enum):
    """Lifecycle of the controller."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    RECOMPUTING = "recomputing"


class ReactiveRecomputeController:
    """Keeps the dashboard display list in sync with its inputs.

    Changes made before the reference coordinate is known are recorded
    but not computed; the first recompute is scheduled once the
    controller becomes ready.
    """

    def __init__(
        self,
        config: Config | None = None,
        scheduler: Scheduler | None = None,
        on_change: Callable[[DisplayResult], None] | None = None,
        events: list[EventRecord] | None = None,
    ) -> None:
        """Initialize controller with configuration.

        Args:
            config: Application configuration
            scheduler: Debounce scheduler (threading timers if not provided)
            on_change: Called with each newly installed result
            events: Initial event list
        """
        self.config = config or Config()
        self.scheduler = scheduler or ThreadingScheduler()
        self.on_change = on_change

        self._lock = threading.RLock()
        self._state = ControllerState.UNINITIALIZED
        self._settings = self.config.initial_settings()
        self._events: list[EventRecord] = list(events or [])
        self._reference = self.config.fallback_location
        self._display: list[AnnotatedEvent] = []
        self._last_result: DisplayResult | None = None
        self._pending: ScheduledTask | None = None
        self._generation = 0
        self.recompute_count = 0

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def is_recomputing(self) -> bool:
        """True while a recompute is pending; the UI shows a loading hint."""
        return self._state == ControllerState.RECOMPUTING

    @property
    def settings(self) -> FilterSettings:
        return self._settings

    @property
    def reference(self) -> Coordinate:
        return self._reference

    @property
    def events(self) -> list[EventRecord]:
        return list(self._events)

    @property
    def last_result(self) -> DisplayResult | None:
        return self._last_result

    def get_display_list(self) -> list[AnnotatedEvent]:
        """Return the current display list.

        May be stale while a recompute is pending.
        """
        return list(self._display)

    # Location

    def resolve_location(self, provider: LocationProvider) -> Coordinate:
        """Resolve the reference coordinate, falling back on any failure.

        Never raises. Moves the controller to READY.

        Args:
            provider: Location provider to ask

        Returns:
            The coordinate now in use
        """
        fallback = self.config.fallback_location

        try:
            coordinate = provider.request_location()
            if not isinstance(coordinate, Coordinate) or not coordinate.is_valid:
                raise LocationUnavailable(f"invalid coordinate {coordinate!r}")
        except LocationUnavailable as e:
            logger.warning("Location unavailable (%s), using fallback", e)
            coordinate = fallback
        except Exception:
            logger.warning("Location provider failed, using fallback", exc_info=True)
            coordinate = fallback

        self.set_reference(coordinate)
        return coordinate

    def set_reference(self, coordinate: Coordinate) -> None:
        """Install a new reference coordinate and schedule a recompute."""
        with self._lock:
            initializing = self._state == ControllerState.UNINITIALIZED
            if not initializing and coordinate == self._reference:
                return
            self._reference = coordinate
            if initializing:
                self._state = ControllerState.READY
                logger.info(
                    "Controller ready at %.4f, %.4f",
                    coordinate.latitude,
                    coordinate.longitude,
                )
            self._request_recompute()

    # Settings

    def set_settings(self, settings: FilterSettings) -> None:
        """Replace the whole settings snapshot. Unknown modes are logged and ignored."""
        try:
            settings = replace(settings, mode=FilterMode(settings.mode))
        except ValueError:
            logger.warning("Ignoring settings with unknown filter mode %r", settings.mode)
            return
        with self._lock:
            if settings == self._settings:
                return
            self._settings = settings
            self._request_recompute()

    def set_category(self, name: str | None) -> None:
        with self._lock:
            self.set_settings(replace(self._settings, category=normalize_category(name)))

    def set_distance_threshold(self, km: float | None) -> None:
        """Set the distance threshold; zero, negative or None disables it."""
        with self._lock:
            self.set_settings(replace(self._settings, max_distance_km=km))

    def set_event_date(self, day: date | None) -> None:
        with self._lock:
            self.set_settings(replace(self._settings, event_date=day))

    def set_mode(self, mode: FilterMode | str) -> None:
        """Switch tabs. Unknown modes are logged and ignored."""
        try:
            mode = FilterMode(mode)
        except ValueError:
            logger.warning("Ignoring unknown filter mode %r", mode)
            return
        with self._lock:
            self.set_settings(replace(self._settings, mode=mode))

    # Events

    def set_events(self, events: list[EventRecord]) -> None:
        """Install a new event list, e.g. after a fetch or join/leave."""
        with self._lock:
            self._events = list(events)
            self._request_recompute()

    def toggle_join(self, event_id: int | str) -> None:
        """Flip joined state of one event and recompute."""
        with self._lock:
            self.set_events(toggle_joined(self._events, event_id))

    # Recompute

    def _request_recompute(self) -> None:
        """Schedule a recompute, superseding any pending one.

        Caller must hold the lock.
        """
        if self._state == ControllerState.UNINITIALIZED:
            return

        if self._pending is not None:
            self._pending.cancel()

        self._generation += 1
        generation = self._generation
        self._state = ControllerState.RECOMPUTING
        self._pending = self.scheduler.schedule(
            self.config.debounce_seconds,
            lambda: self._run_recompute(generation),
        )

    def _run_recompute(self, generation: int) -> None:
        """Compute and install the display list for the latest snapshot."""
        with self._lock:
            if generation != self._generation:
                return
            self._pending = None
            events = self._events
            reference = self._reference
            settings = self._settings

        try:
            result = compute_display_list(events, reference, settings)
        except Exception:
            logger.exception("Recompute failed, keeping previous display list")
            with self._lock:
                if generation == self._generation:
                    self._state = ControllerState.READY
            return

        with self._lock:
            # A newer change arrived while computing; its recompute will install
            if generation != self._generation:
                return
            self._display = result.events
            self._last_result = result
            self._state = ControllerState.READY
            self.recompute_count += 1

        if result.fell_back:
            logger.warning(
                "No %s events matched, showing %d fallback events",
                settings.mode.value,
                result.count,
            )
        logger.info(
            "Recomputed %s list: %d events",
            settings.mode.value,
            result.count,
        )

        if self.on_change is not None:
            try:
                self.on_change(result)
            except Exception:
                logger.exception("Display list listener failed")

    def flush(self) -> bool:
        """Run any pending recompute now instead of waiting.

        Returns:
            True if a recompute was pending
        """
        with self._lock:
            if self._pending is None:
                return False
            # A timer already running cannot be cancelled; a new generation supersedes it
            self._pending.cancel()
            self._pending = None
            self._generation += 1
            generation = self._generation

        self._run_recompute(generation)
        return True

    def close(self) -> None:
        """Cancel any pending recompute; used when the screen unmounts."""
        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
                self._pending = None
            self._generation += 1
            if self._state == ControllerState.RECOMPUTING:
                self._state = ControllerState.READY

"""Route overlay lifecycle.

The manager is the only code that creates, re-points or destroys the route
overlay. It follows three fields of the store (user position, destination,
directions flag) for the overlay itself and a fourth (itinerary flag) for
the panel, which is shown or hidden without touching the route.

    ABSENT --enable + both points--> ACTIVE(origin, destination)
    ACTIVE --points change--------> ACTIVE(new points)   (updated in place)
    ACTIVE --disable / unmount----> DISABLING --> ABSENT
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any, Protocol

from mapnav.exceptions import OverlayCreationFailedError
from mapnav.models.coordinate import Coordinate
from mapnav.state.events import RouteStatus, StateField
from mapnav.state.store import InteractionState, InteractionStore, StateChange

_logger = logging.getLogger(__name__)

_WATCHED_FIELDS = (
    StateField.USER_POSITION,
    StateField.SELECTED_DESTINATION,
    StateField.DIRECTIONS_ENABLED,
    StateField.ITINERARY_VISIBLE,
)

Waypoints = tuple[Coordinate, Coordinate]


class OverlayPhase(StrEnum):
    ABSENT = "absent"
    ACTIVE = "active"
    DISABLING = "disabling"


class RoutingOverlay(Protocol):
    """Routing library binding.

    ``create`` and ``set_waypoints`` raise
    :class:`~mapnav.exceptions.OverlayCreationFailedError` when no route
    exists between the two points.
    """

    def create(self, origin: Coordinate, destination: Coordinate) -> Any:
        ...

    def set_waypoints(self, handle: Any, origin: Coordinate, destination: Coordinate) -> None:
        ...

    def destroy(self, handle: Any) -> None:
        ...

    def set_panel_visible(self, handle: Any, visible: bool) -> None:
        ...


class RoutingOverlayManager:
    """Owns the single route overlay handle.

    Usage::

        with RoutingOverlayManager(store, overlay) as manager:
            ...  # overlay follows the store until the block exits
    """

    def __init__(self, store: InteractionStore, overlay: RoutingOverlay) -> None:
        self._store = store
        self._overlay = overlay
        self._phase = OverlayPhase.ABSENT
        self._handle: Any = None
        self._waypoints: Waypoints | None = None
        self._panel_visible: bool | None = None
        self._failed_waypoints: Waypoints | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def phase(self) -> OverlayPhase:
        return self._phase

    @property
    def waypoints(self) -> Waypoints | None:
        """(origin, destination) the overlay currently shows."""
        return self._waypoints

    @property
    def panel_visible(self) -> bool:
        return bool(self._panel_visible)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._store.subscribe(self._on_change, fields=_WATCHED_FIELDS)
        self._reconcile(self._store.state)

    def close(self) -> None:
        """Release the overlay regardless of state. Safe to call repeatedly."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._release()

    def __enter__(self) -> RoutingOverlayManager:
        self.attach()
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    def _on_change(self, change: StateChange) -> None:
        self._reconcile(change.current)

    def _reconcile(self, state: InteractionState) -> None:
        origin = state.user_position
        if not state.directions_enabled or origin is None:
            self._failed_waypoints = None
            if self._phase is OverlayPhase.ACTIVE:
                self._release()
            self._report(RouteStatus.IDLE)
            return

        target: Waypoints = (origin, state.selected_destination)
        if self._phase is OverlayPhase.ABSENT:
            if target == self._failed_waypoints:
                return
            self._create(target)
        elif self._waypoints != target:
            self._repoint(target)

        if self._phase is OverlayPhase.ACTIVE:
            self._apply_panel(state.itinerary_visible)

    def _create(self, target: Waypoints) -> None:
        origin, destination = target
        try:
            handle = self._overlay.create(origin, destination)
        except OverlayCreationFailedError as exc:
            _logger.warning("No route from %s to %s: %s", origin, destination, exc)
            self._failed_waypoints = target
            self._report(RouteStatus.NO_ROUTE)
            return
        _logger.debug("Route overlay created %s -> %s", origin, destination)
        self._handle = handle
        self._waypoints = target
        self._panel_visible = None
        self._failed_waypoints = None
        self._phase = OverlayPhase.ACTIVE
        self._report(RouteStatus.ACTIVE)

    def _repoint(self, target: Waypoints) -> None:
        origin, destination = target
        try:
            self._overlay.set_waypoints(self._handle, origin, destination)
        except OverlayCreationFailedError as exc:
            # The old route must not stay on screen for the new points.
            _logger.warning("No route from %s to %s: %s", origin, destination, exc)
            self._release()
            self._failed_waypoints = target
            self._report(RouteStatus.NO_ROUTE)
            return
        _logger.debug("Route overlay moved to %s -> %s", origin, destination)
        self._waypoints = target

    def _apply_panel(self, visible: bool) -> None:
        if self._panel_visible == visible:
            return
        self._overlay.set_panel_visible(self._handle, visible)
        self._panel_visible = visible

    def _release(self) -> None:
        if self._phase is not OverlayPhase.ACTIVE:
            return
        handle = self._handle
        self._handle = None
        self._phase = OverlayPhase.DISABLING
        try:
            self._overlay.destroy(handle)
            _logger.debug("Route overlay destroyed")
        finally:
            self._phase = OverlayPhase.ABSENT
            self._waypoints = None
            self._panel_visible = None

    def _report(self, status: RouteStatus) -> None:
        if self._store.state.route_status != status:
            self._store.set_route_status(status)

from __future__ import annotations

from dataclasses import dataclass

import pytest

from mapnav.exceptions import OverlayCreationFailedError
from mapnav.models.coordinate import Coordinate
from mapnav.routing import OverlayPhase, RoutingOverlayManager
from mapnav.state.events import RouteStatus
from mapnav.state.store import InteractionState, InteractionStore

HOME = Coordinate.of(40.0, -73.0)
MUSEUM = Coordinate.of(40.1, -73.1)
PARK = Coordinate.of(40.78, -73.96)
ISLAND = Coordinate.of(-20.0, 57.5)


@dataclass
class _Handle:
    ident: int
    origin: Coordinate
    destination: Coordinate
    panel_visible: bool = True
    destroyed: bool = False


class _FakeRoutingOverlay:
    """Records every call; refuses routes to destinations in ``unreachable``."""

    def __init__(self, unreachable: frozenset[Coordinate] = frozenset()) -> None:
        self.unreachable = unreachable
        self.handles: list[_Handle] = []
        self.log: list[str] = []

    @property
    def live(self) -> list[_Handle]:
        return [h for h in self.handles if not h.destroyed]

    def create(self, origin: Coordinate, destination: Coordinate) -> _Handle:
        self.log.append("create")
        if destination in self.unreachable:
            raise OverlayCreationFailedError(f"no route to {destination}")
        handle = _Handle(len(self.handles), origin, destination)
        self.handles.append(handle)
        return handle

    def set_waypoints(self, handle: _Handle, origin: Coordinate, destination: Coordinate) -> None:
        self.log.append("set_waypoints")
        assert not handle.destroyed
        if destination in self.unreachable:
            raise OverlayCreationFailedError(f"no route to {destination}")
        handle.origin = origin
        handle.destination = destination

    def destroy(self, handle: _Handle) -> None:
        self.log.append("destroy")
        assert not handle.destroyed, "handle released twice"
        handle.destroyed = True

    def set_panel_visible(self, handle: _Handle, visible: bool) -> None:
        self.log.append(f"panel:{visible}")
        assert not handle.destroyed
        handle.panel_visible = visible


def _located_store(**overrides: object) -> InteractionStore:
    fields: dict[str, object] = {"user_position": HOME, "selected_destination": MUSEUM}
    fields.update(overrides)
    return InteractionStore(InteractionState(**fields))


def test_attach_creates_overlay_when_ready() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()

    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    assert manager.phase is OverlayPhase.ACTIVE
    assert manager.waypoints == (HOME, MUSEUM)
    assert overlay.log == ["create", "panel:False"]
    assert store.state.route_status is RouteStatus.ACTIVE


def test_no_overlay_without_user_position() -> None:
    store = InteractionStore()
    overlay = _FakeRoutingOverlay()

    with RoutingOverlayManager(store, overlay) as manager:
        store.select_result(MUSEUM)
        store.toggle_directions()
        assert store.state.directions_enabled is True
        assert manager.phase is OverlayPhase.ABSENT

    assert overlay.log == []


def test_position_fix_activates_overlay() -> None:
    store = InteractionStore()
    overlay = _FakeRoutingOverlay()

    with RoutingOverlayManager(store, overlay) as manager:
        store.set_user_position(HOME)
        assert manager.phase is OverlayPhase.ACTIVE
        assert manager.waypoints == (HOME, HOME)


def test_disable_releases_handle_exactly_once() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    store.toggle_directions()

    assert manager.phase is OverlayPhase.ABSENT
    assert manager.waypoints is None
    assert overlay.log.count("destroy") == 1
    assert overlay.live == []
    assert store.state.route_status is RouteStatus.IDLE

    manager.close()
    manager.close()
    assert overlay.log.count("destroy") == 1


def test_reenable_creates_fresh_overlay() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    store.toggle_directions()
    store.toggle_directions()

    assert manager.phase is OverlayPhase.ACTIVE
    assert len(overlay.handles) == 2
    assert len(overlay.live) == 1


def test_destination_change_repoints_overlay_in_place() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    # A new user fix moves the destination too while directions stay on.
    store.set_user_position(PARK)

    assert manager.waypoints == (PARK, PARK)
    assert len(overlay.handles) == 1
    handle = overlay.handles[0]
    assert (handle.origin, handle.destination) == (PARK, PARK)
    assert "set_waypoints" in overlay.log


def test_overlay_never_shows_stale_route() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    for destination in (PARK, MUSEUM, PARK):
        store.set_user_position(HOME)
        store._commit("test", selected_destination=destination)  # noqa: SLF001
        live = overlay.live
        assert len(live) == 1
        assert (live[0].origin, live[0].destination) == (store.state.user_position, store.state.selected_destination)


def test_itinerary_toggle_only_touches_panel() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()
    overlay.log.clear()

    store.toggle_itinerary()
    store.toggle_itinerary()
    store.toggle_itinerary()

    assert overlay.log == ["panel:True", "panel:False", "panel:True"]
    assert manager.panel_visible is True
    assert len(overlay.handles) == 1


def test_creation_failure_keeps_directions_enabled() -> None:
    store = _located_store(selected_destination=ISLAND)
    overlay = _FakeRoutingOverlay(unreachable=frozenset({ISLAND}))
    manager = RoutingOverlayManager(store, overlay)

    manager.attach()

    assert manager.phase is OverlayPhase.ABSENT
    assert store.state.directions_enabled is True
    assert store.state.route_status is RouteStatus.NO_ROUTE

    # Panel toggles do not retry the same unreachable pair.
    store.toggle_itinerary()
    assert overlay.log == ["create"]


def test_creation_retried_for_new_destination() -> None:
    store = _located_store(selected_destination=ISLAND)
    overlay = _FakeRoutingOverlay(unreachable=frozenset({ISLAND}))
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    store._commit("test", selected_destination=MUSEUM)  # noqa: SLF001

    assert manager.phase is OverlayPhase.ACTIVE
    assert store.state.route_status is RouteStatus.ACTIVE


def test_repoint_failure_removes_old_route() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay(unreachable=frozenset({ISLAND}))
    manager = RoutingOverlayManager(store, overlay)
    manager.attach()

    store._commit("test", selected_destination=ISLAND)  # noqa: SLF001

    assert manager.phase is OverlayPhase.ABSENT
    assert overlay.live == []
    assert store.state.route_status is RouteStatus.NO_ROUTE


def test_close_releases_active_overlay_and_stops_listening() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()

    with RoutingOverlayManager(store, overlay) as manager:
        assert manager.phase is OverlayPhase.ACTIVE

    assert overlay.live == []
    store.toggle_directions()
    store.toggle_directions()
    assert len(overlay.handles) == 1


def test_close_releases_on_error_path() -> None:
    store = _located_store()
    overlay = _FakeRoutingOverlay()

    with pytest.raises(RuntimeError):
        with RoutingOverlayManager(store, overlay):
            raise RuntimeError("render failed")

    assert overlay.live == []
    assert overlay.log.count("destroy") == 1

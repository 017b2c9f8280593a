"""End-to-end behaviour of the mounted map component."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

import pytest

from mapnav.client import MapNavigator
from mapnav.config import MapNavConfig
from mapnav.exceptions import MapNavError
from mapnav.models.coordinate import Coordinate
from mapnav.routing import OverlayPhase
from mapnav.search import PlaceSearchClient
from mapnav.state.events import RouteStatus

DEFAULT = Coordinate.of(51.505, -0.09)
HOME = Coordinate.of(40.0, -73.0)
MUSEUM = Coordinate.of(40.1, -73.1)


class _FakeTransport:
    def __init__(self, payload: list[dict[str, Any]]) -> None:
        self.payload = payload
        self.queries: list[str] = []

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        self.queries.append(str(params["q"]))
        return self.payload


class _FakeViewport:
    def __init__(self) -> None:
        self.centers: list[Coordinate] = []

    def set_center(self, coordinate: Coordinate, zoom: int, *, animate: bool) -> None:
        assert zoom == 13 and animate
        self.centers.append(coordinate)


class _FakeOverlay:
    def __init__(self) -> None:
        self.log: list[tuple[str, Any]] = []
        self.live: dict[int, tuple[Coordinate, Coordinate]] = {}
        self.panel: dict[int, bool] = {}
        self._next = 0

    def create(self, origin: Coordinate, destination: Coordinate) -> int:
        handle = self._next
        self._next += 1
        self.live[handle] = (origin, destination)
        self.log.append(("create", (origin, destination)))
        return handle

    def set_waypoints(self, handle: int, origin: Coordinate, destination: Coordinate) -> None:
        self.live[handle] = (origin, destination)
        self.log.append(("set_waypoints", (origin, destination)))

    def destroy(self, handle: int) -> None:
        del self.live[handle]
        self.panel.pop(handle, None)
        self.log.append(("destroy", handle))

    def set_panel_visible(self, handle: int, visible: bool) -> None:
        self.panel[handle] = visible
        self.log.append(("panel", visible))


class _ManualGeolocation:
    def __init__(self) -> None:
        self.on_success: Callable[[Coordinate], None] | None = None

    def get_current_position(self, on_success, on_error, *, high_accuracy: bool) -> None:  # noqa: ANN001
        assert high_accuracy
        self.on_success = on_success


def _navigator(
    payload: list[dict[str, Any]] | None = None,
) -> tuple[MapNavigator, _FakeViewport, _FakeOverlay, _ManualGeolocation, _FakeTransport]:
    viewport = _FakeViewport()
    overlay = _FakeOverlay()
    geolocation = _ManualGeolocation()
    transport = _FakeTransport(payload or [])
    navigator = MapNavigator(
        MapNavConfig(),
        geolocation=geolocation,
        viewport=viewport,
        overlay=overlay,
        search_client=PlaceSearchClient(transport=transport),
    )
    return navigator, viewport, overlay, geolocation, transport


@pytest.mark.asyncio
async def test_locate_search_select_and_route() -> None:
    payload = [{"display_name": "City Museum", "lat": "40.1", "lon": "-73.1", "place_id": 1}]
    navigator, viewport, overlay, geolocation, transport = _navigator(payload)

    async with navigator as nav:
        assert nav.state.selected_destination == DEFAULT
        assert viewport.centers == [DEFAULT]

        assert geolocation.on_success is not None
        geolocation.on_success(HOME)
        assert nav.state.user_position == HOME
        assert nav.state.selected_destination == HOME
        assert viewport.centers == [DEFAULT, HOME]

        nav.set_query("museum")
        results = await nav.submit_search()
        assert transport.queries == ["museum"]
        assert [r.label for r in results] == ["City Museum"]
        assert nav.view.controls_visible is False

        nav.select_result(results[0])
        assert nav.state.selected_destination == MUSEUM
        assert nav.state.directions_enabled is False
        assert nav.overlay_manager.phase is OverlayPhase.ABSENT
        assert overlay.live == {}
        assert viewport.centers == [DEFAULT, HOME, MUSEUM]

        nav.toggle_directions()
        assert nav.state.directions_enabled is True
        assert nav.overlay_manager.phase is OverlayPhase.ACTIVE
        assert list(overlay.live.values()) == [(HOME, MUSEUM)]

        log_before = len(overlay.log)
        nav.toggle_itinerary()
        assert nav.state.itinerary_visible is True
        assert overlay.log[log_before:] == [("panel", True)]
        assert list(overlay.live.values()) == [(HOME, MUSEUM)]

        nav.toggle_directions()
        assert nav.state.directions_enabled is False
        assert nav.state.itinerary_visible is False
        assert nav.overlay_manager.phase is OverlayPhase.ABSENT
        assert overlay.live == {}

    assert viewport.centers == [DEFAULT, HOME, MUSEUM]


@pytest.mark.asyncio
async def test_geolocation_while_active_moves_route() -> None:
    navigator, _viewport, overlay, geolocation, _transport = _navigator()

    async with navigator as nav:
        assert geolocation.on_success is not None
        geolocation.on_success(HOME)
        assert list(overlay.live.values()) == [(HOME, HOME)]

        nav.store._commit("test", selected_destination=MUSEUM)  # noqa: SLF001
        assert list(overlay.live.values()) == [(HOME, MUSEUM)]
        assert [entry[0] for entry in overlay.log].count("create") == 1


@pytest.mark.asyncio
async def test_unmount_releases_active_overlay() -> None:
    navigator, _viewport, overlay, geolocation, _transport = _navigator()

    async with navigator as nav:
        assert geolocation.on_success is not None
        geolocation.on_success(HOME)
        nav.toggle_itinerary()
        assert nav.state.route_status is RouteStatus.ACTIVE

    assert overlay.live == {}
    assert [entry[0] for entry in overlay.log].count("destroy") == 1

    # A fix delivered after unmount goes nowhere.
    geolocation.on_success(MUSEUM)
    assert overlay.live == {}


@pytest.mark.asyncio
async def test_view_labels_follow_state() -> None:
    navigator, *_ = _navigator()

    async with navigator as nav:
        view = nav.view
        assert view.directions_label == "Hide Directions"
        assert view.itinerary_button_visible is True
        assert view.itinerary_label == "Show Directions Table"
        assert [m.label for m in view.markers] == ["Destination"]

        nav.toggle_itinerary()
        assert nav.view.itinerary_label == "Hide Directions Table"

        nav.toggle_directions()
        view = nav.view
        assert view.directions_label == "Show Directions"
        assert view.itinerary_button_visible is False


@pytest.mark.asyncio
async def test_actions_require_mount() -> None:
    navigator, *_ = _navigator()
    with pytest.raises(MapNavError):
        navigator.toggle_directions()
    with pytest.raises(MapNavError):
        await navigator.submit_search("museum")


@pytest.mark.asyncio
async def test_start_search_runs_in_background() -> None:
    payload = [{"display_name": "City Museum", "lat": "40.1", "lon": "-73.1"}]
    navigator, *_ = _navigator(payload)

    async with navigator as nav:
        task = nav.start_search("museum")
        assert nav.state.search_in_flight is False
        await task
        assert nav.state.search_results[0].coordinate == MUSEUM
        assert nav.state.search_in_flight is False


class _BrokenGeolocation:
    def get_current_position(self, on_success, on_error, *, high_accuracy: bool) -> None:  # noqa: ANN001
        raise PermissionError("location services disabled")


class _BrokenViewport:
    def set_center(self, coordinate: Coordinate, zoom: int, *, animate: bool) -> None:
        raise RuntimeError("map widget not ready")


@pytest.mark.asyncio
async def test_mount_survives_geolocation_provider_error() -> None:
    viewport = _FakeViewport()
    navigator = MapNavigator(
        MapNavConfig(),
        geolocation=_BrokenGeolocation(),
        viewport=viewport,
        overlay=_FakeOverlay(),
        search_client=PlaceSearchClient(transport=_FakeTransport([])),
    )

    async with navigator as nav:
        assert nav.state.user_position is None
        assert nav.state.selected_destination == DEFAULT
        assert viewport.centers == [DEFAULT]


@pytest.mark.asyncio
async def test_failed_mount_releases_owned_session() -> None:
    overlay = _FakeOverlay()
    navigator = MapNavigator(
        MapNavConfig(),
        geolocation=_ManualGeolocation(),
        viewport=_BrokenViewport(),
        overlay=overlay,
    )

    with pytest.raises(RuntimeError):
        async with navigator:
            pass

    assert navigator._search_client._http_session is None
    assert overlay.live == {}
    with pytest.raises(MapNavError):
        navigator.state
    await navigator.unmount()

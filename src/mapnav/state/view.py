"""Read-only presentation of the interaction state.

Maps a state snapshot to what the controls and markers should show. Nothing
here mutates the store.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from mapnav._constants import (
    DESTINATION_MARKER_LABEL,
    HIDE_DIRECTIONS_LABEL,
    HIDE_ITINERARY_LABEL,
    SHOW_DIRECTIONS_LABEL,
    SHOW_ITINERARY_LABEL,
    USER_MARKER_LABEL,
)
from mapnav.models.coordinate import Coordinate
from mapnav.models.search import SearchResult
from mapnav.state.events import RouteStatus
from mapnav.state.store import InteractionState


class Marker(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    coordinate: Coordinate


class MapView(BaseModel):
    """Everything a renderer needs besides the map widget itself."""

    model_config = ConfigDict(frozen=True)

    search_options: tuple[SearchResult, ...]
    search_loading: bool
    search_failed: bool
    controls_visible: bool
    directions_label: str
    itinerary_button_visible: bool
    itinerary_label: str
    no_route_found: bool
    markers: tuple[Marker, ...]


def present(state: InteractionState) -> MapView:
    markers: list[Marker] = []
    if state.user_position is not None:
        markers.append(Marker(label=USER_MARKER_LABEL, coordinate=state.user_position))
    markers.append(Marker(label=DESTINATION_MARKER_LABEL, coordinate=state.selected_destination))

    controls_visible = state.controls_visible
    return MapView(
        search_options=state.search_results,
        search_loading=state.search_in_flight,
        search_failed=state.search_failed,
        controls_visible=controls_visible,
        directions_label=HIDE_DIRECTIONS_LABEL if state.directions_enabled else SHOW_DIRECTIONS_LABEL,
        itinerary_button_visible=controls_visible and state.directions_enabled,
        itinerary_label=HIDE_ITINERARY_LABEL if state.itinerary_visible else SHOW_ITINERARY_LABEL,
        no_route_found=state.route_status == RouteStatus.NO_ROUTE,
        markers=tuple(markers),
    )

"""Names used by state change notifications."""

from __future__ import annotations

from enum import StrEnum


class StateField(StrEnum):
    """Fields of :class:`~mapnav.state.store.InteractionState`.

    Subscribers filter notifications by these names.
    """

    SEARCH_QUERY = "search_query"
    SEARCH_RESULTS = "search_results"
    SELECTED_DESTINATION = "selected_destination"
    USER_POSITION = "user_position"
    DIRECTIONS_ENABLED = "directions_enabled"
    ITINERARY_VISIBLE = "itinerary_visible"
    SEARCH_IN_FLIGHT = "search_in_flight"
    SEARCH_FAILED = "search_failed"
    ROUTE_STATUS = "route_status"


class RouteStatus(StrEnum):
    """Outcome of the most recent route overlay reconciliation."""

    IDLE = "idle"
    ACTIVE = "active"
    NO_ROUTE = "no_route"

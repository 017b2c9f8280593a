"""mapnav - Interaction state for a locate, search and route map surface."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pymapnav")
except PackageNotFoundError:
    __version__ = "0+local"
from mapnav.client import MapNavigator
from mapnav.config import MapNavConfig
from mapnav.exceptions import (
    GeolocationUnavailableError,
    MapNavApiError,
    MapNavConfigError,
    MapNavError,
    MapNavTransportError,
    OverlayCreationFailedError,
    SearchFailedError,
)
from mapnav.geolocation import GeolocationAcquirer, GeolocationProvider, StaticGeolocationProvider
from mapnav.models import Coordinate, SearchResult
from mapnav.routing import OverlayPhase, RoutingOverlay, RoutingOverlayManager
from mapnav.search import PlaceSearchClient
from mapnav.state.events import RouteStatus, StateField
from mapnav.state.policy import ToggleCoordinator, ToggleState
from mapnav.state.store import InteractionState, InteractionStore, StateChange
from mapnav.state.view import MapView, Marker, present
from mapnav.viewport import MapViewport, ViewportController

__all__ = [
    "__version__",
    "Coordinate",
    "GeolocationAcquirer",
    "GeolocationProvider",
    "GeolocationUnavailableError",
    "InteractionState",
    "InteractionStore",
    "MapNavApiError",
    "MapNavConfig",
    "MapNavConfigError",
    "MapNavError",
    "MapNavTransportError",
    "MapNavigator",
    "MapView",
    "MapViewport",
    "Marker",
    "OverlayCreationFailedError",
    "OverlayPhase",
    "PlaceSearchClient",
    "RouteStatus",
    "RoutingOverlay",
    "RoutingOverlayManager",
    "SearchFailedError",
    "SearchResult",
    "StateChange",
    "StateField",
    "StaticGeolocationProvider",
    "ToggleCoordinator",
    "ToggleState",
    "ViewportController",
    "present",
]

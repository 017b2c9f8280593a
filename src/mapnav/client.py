"""The mounted map component: wires the store to its collaborators."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Any

from mapnav.config import MapNavConfig
from mapnav.exceptions import MapNavError
from mapnav.geolocation import GeolocationAcquirer, GeolocationProvider
from mapnav.models.coordinate import Coordinate
from mapnav.models.search import SearchResult
from mapnav.routing import RoutingOverlay, RoutingOverlayManager
from mapnav.search import PlaceSearchClient
from mapnav.state.store import InteractionState, InteractionStore
from mapnav.state.view import MapView, present
from mapnav.viewport import MapViewport, ViewportController

_logger = logging.getLogger(__name__)


class MapNavigator:
    """Interactive map state bound to a viewport, a routing overlay and a geocoder.

    Usage::

        async with MapNavigator(config, geolocation=gps, viewport=map_widget, overlay=router) as nav:
            await nav.submit_search("museum")
            nav.select_result(nav.state.search_results[0])
            nav.toggle_directions()
    """

    def __init__(
        self,
        config: MapNavConfig | None = None,
        *,
        geolocation: GeolocationProvider,
        viewport: MapViewport,
        overlay: RoutingOverlay,
        search_client: PlaceSearchClient | None = None,
    ) -> None:
        self._config = config or MapNavConfig()
        self._geolocation_provider = geolocation
        self._viewport = viewport
        self._overlay = overlay
        self._owns_search_client = search_client is None
        self._search_client = search_client or PlaceSearchClient(self._config)
        self._store: InteractionStore | None = None
        self._viewport_controller: ViewportController | None = None
        self._overlay_manager: RoutingOverlayManager | None = None
        self._acquirer: GeolocationAcquirer | None = None
        self._search_tasks: set[asyncio.Task[list[SearchResult]]] = set()

    # ------------------------------------------------------------------
    # Mount / unmount
    # ------------------------------------------------------------------

    async def __aenter__(self) -> MapNavigator:
        await self.mount()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.unmount()

    async def mount(self) -> None:
        if self._store is not None:
            raise MapNavError("MapNavigator is already mounted")
        default = Coordinate(latitude=self._config.default_latitude, longitude=self._config.default_longitude)
        store = InteractionStore(default_destination=default)
        self._store = store
        try:
            if self._owns_search_client:
                await self._search_client.__aenter__()
            self._viewport_controller = ViewportController(store, self._viewport, zoom=self._config.zoom)
            self._viewport_controller.attach()
            self._overlay_manager = RoutingOverlayManager(store, self._overlay)
            self._overlay_manager.attach()
            self._acquirer = GeolocationAcquirer(
                store,
                self._geolocation_provider,
                high_accuracy=self._config.high_accuracy,
            )
            self._acquirer.start()
        except BaseException:
            await self.unmount()
            raise
        _logger.debug("Map mounted at %s", default)

    async def unmount(self) -> None:
        """Tear everything down; the overlay is released on every path."""
        try:
            if self._overlay_manager is not None:
                self._overlay_manager.close()
        finally:
            if self._acquirer is not None:
                self._acquirer.stop()
            if self._viewport_controller is not None:
                self._viewport_controller.detach()
            for task in list(self._search_tasks):
                task.cancel()
            for task in list(self._search_tasks):
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            self._search_tasks.clear()
            self._overlay_manager = None
            self._viewport_controller = None
            self._acquirer = None
            self._store = None
            if self._owns_search_client:
                await self._search_client.close()
            _logger.debug("Map unmounted")

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def _require_store(self) -> InteractionStore:
        if self._store is None:
            raise MapNavError("MapNavigator not mounted. Use 'async with MapNavigator(...) as nav:'")
        return self._store

    @property
    def store(self) -> InteractionStore:
        return self._require_store()

    @property
    def state(self) -> InteractionState:
        return self._require_store().state

    @property
    def view(self) -> MapView:
        return present(self.state)

    @property
    def overlay_manager(self) -> RoutingOverlayManager:
        self._require_store()
        assert self._overlay_manager is not None  # noqa: S101
        return self._overlay_manager

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        self._require_store().set_query(text)

    async def submit_search(self, text: str | None = None) -> list[SearchResult]:
        """Search for *text* (default: the current query) and publish the results."""
        store = self._require_store()
        query = store.state.search_query if text is None else text
        return await store.submit_search(query, self._search_client.search)

    def start_search(self, text: str | None = None) -> asyncio.Task[list[SearchResult]]:
        """Fire-and-forget variant of :meth:`submit_search`."""
        task = asyncio.ensure_future(self.submit_search(text))
        self._search_tasks.add(task)
        task.add_done_callback(self._search_tasks.discard)
        return task

    def select_result(self, target: Coordinate | SearchResult) -> None:
        self._require_store().select_result(target)

    def toggle_directions(self) -> None:
        self._require_store().toggle_directions()

    def toggle_itinerary(self) -> None:
        self._require_store().toggle_itinerary()

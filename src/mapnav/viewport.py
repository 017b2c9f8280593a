"""Camera control driven by the selected destination."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from mapnav._constants import DEFAULT_ZOOM
from mapnav.models.coordinate import Coordinate
from mapnav.state.events import StateField
from mapnav.state.store import InteractionStore, StateChange

_logger = logging.getLogger(__name__)


class MapViewport(Protocol):
    def set_center(self, coordinate: Coordinate, zoom: int, *, animate: bool) -> None:
        ...


class ViewportController:
    """Flies the camera to every new destination, once per distinct coordinate."""

    def __init__(self, store: InteractionStore, viewport: MapViewport, *, zoom: int = DEFAULT_ZOOM) -> None:
        self._store = store
        self._viewport = viewport
        self._zoom = zoom
        self._centered_on: Coordinate | None = None
        self._unsubscribe: Callable[[], None] | None = None

    @property
    def centered_on(self) -> Coordinate | None:
        return self._centered_on

    def attach(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self._store.subscribe(self._on_change, fields=(StateField.SELECTED_DESTINATION,))
        self._fly_to(self._store.state.selected_destination)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_change(self, change: StateChange) -> None:
        self._fly_to(change.current.selected_destination)

    def _fly_to(self, coordinate: Coordinate) -> None:
        if coordinate == self._centered_on:
            return
        _logger.debug("Flying to %s at zoom %d", coordinate, self._zoom)
        self._viewport.set_center(coordinate, self._zoom, animate=True)
        self._centered_on = coordinate

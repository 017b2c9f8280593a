"""One-shot acquisition of the device position."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from mapnav.exceptions import GeolocationUnavailableError
from mapnav.models.coordinate import Coordinate
from mapnav.state.store import InteractionStore

_logger = logging.getLogger(__name__)


class GeolocationProvider(Protocol):
    """Device positioning backend.

    Exactly one of the callbacks is eventually invoked, possibly from a
    later turn of the event loop.
    """

    def get_current_position(
        self,
        on_success: Callable[[Coordinate], None],
        on_error: Callable[[object], None],
        *,
        high_accuracy: bool,
    ) -> None:
        ...


class StaticGeolocationProvider:
    """Provider that answers immediately with a fixed position.

    With no position configured every request fails, which is how a denied
    permission looks to the acquirer.
    """

    def __init__(self, position: Coordinate | None = None, *, reason: str = "permission denied") -> None:
        self._position = position
        self._reason = reason
        self.requests: list[bool] = []

    def get_current_position(
        self,
        on_success: Callable[[Coordinate], None],
        on_error: Callable[[object], None],
        *,
        high_accuracy: bool,
    ) -> None:
        self.requests.append(high_accuracy)
        if self._position is None:
            on_error(self._reason)
        else:
            on_success(self._position)


class GeolocationAcquirer:
    """Issues a single position request and writes the fix to the store."""

    def __init__(
        self,
        store: InteractionStore,
        provider: GeolocationProvider,
        *,
        high_accuracy: bool = True,
    ) -> None:
        self._store = store
        self._provider = provider
        self._high_accuracy = high_accuracy
        self._started = False
        self._stopped = False

    @property
    def started(self) -> bool:
        return self._started

    def start(self) -> None:
        if self._started:
            _logger.debug("Geolocation already requested")
            return
        self._started = True
        try:
            self._provider.get_current_position(
                self._on_success,
                self._on_error,
                high_accuracy=self._high_accuracy,
            )
        except GeolocationUnavailableError as exc:
            self._on_error(exc.reason)
        except Exception as exc:
            _logger.debug("Geolocation provider raised", exc_info=True)
            self._on_error(exc)

    def stop(self) -> None:
        """Ignore any callback that arrives after unmount."""
        self._stopped = True

    def _on_success(self, coordinate: Coordinate) -> None:
        if self._stopped:
            _logger.debug("Dropping position fix received after stop")
            return
        _logger.debug("Position fix %s", coordinate)
        self._store.set_user_position(coordinate)

    def _on_error(self, reason: object) -> None:
        if self._stopped:
            return
        _logger.warning("%s; continuing without user position", GeolocationUnavailableError(reason))

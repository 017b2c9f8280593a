"""Custom exception hierarchy for mapnav."""

from __future__ import annotations


class MapNavError(Exception):
    """Base exception for all mapnav errors."""


class MapNavConfigError(MapNavError):
    """Invalid or missing configuration."""


class MapNavTransportError(MapNavError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MapNavApiError(MapNavError):
    """The geocoding service answered with an unusable payload."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class SearchFailedError(MapNavError):
    """A place search could not be completed.

    Recovered by the state store: results are reset to empty and the
    loading flag is cleared.
    """


class GeolocationUnavailableError(MapNavError):
    """Permission denied or no position fix.

    Never surfaced to the user; the store simply keeps no user position.
    """

    def __init__(self, reason: object = None) -> None:
        self.reason = reason
        super().__init__(f"Geolocation unavailable: {reason}")


class OverlayCreationFailedError(MapNavError):
    """The routing library could not compute a route between two points.

    This is the user-visible "no route found" condition, distinct from a
    transient network failure.
    """

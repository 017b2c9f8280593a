"""Client configuration for mapnav."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from mapnav._constants import (
    BASE_URL,
    DEFAULT_LATITUDE,
    DEFAULT_LONGITUDE,
    DEFAULT_ZOOM,
    MAX_SEARCH_RESULTS,
    SEARCH_PATH,
    USER_AGENT,
)
from mapnav.exceptions import MapNavConfigError

_ENV_STR_MAP: dict[str, str] = {
    "MAPNAV_BASE_URL": "base_url",
    "MAPNAV_SEARCH_PATH": "search_path",
    "MAPNAV_USER_AGENT": "user_agent",
}

_ENV_NUMBER_MAP: dict[str, tuple[str, type[int] | type[float]]] = {
    "MAPNAV_SEARCH_LIMIT": ("search_limit", int),
    "MAPNAV_REQUEST_TIMEOUT": ("request_timeout", float),
    "MAPNAV_ZOOM": ("zoom", int),
    "MAPNAV_DEFAULT_LATITUDE": ("default_latitude", float),
    "MAPNAV_DEFAULT_LONGITUDE": ("default_longitude", float),
}


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise MapNavConfigError(f"{env_key} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class MapNavConfig:
    """Navigator configuration.

    Parameters
    ----------
    base_url : str
        Geocoding service base URL. Defaults to the public Nominatim instance.
    search_path : str
        Path of the free-text search endpoint.
    user_agent : str
        ``User-Agent`` header sent with every request. Nominatim's usage
        policy rejects anonymous clients.
    search_limit : int
        Maximum number of results per search (1-5).
    address_details : bool
        Ask the service for structured address details.
    request_timeout : float
        Total timeout in seconds for one geocoding request.
    zoom : int
        Zoom level used when the camera flies to a destination.
    default_latitude : float
        Latitude of the fallback destination.
    default_longitude : float
        Longitude of the fallback destination.
    high_accuracy : bool
        Request a high-accuracy position fix from the geolocation provider.
    """

    base_url: str = BASE_URL
    search_path: str = SEARCH_PATH
    user_agent: str = USER_AGENT
    search_limit: int = MAX_SEARCH_RESULTS
    address_details: bool = True
    request_timeout: float = 10.0
    zoom: int = DEFAULT_ZOOM
    default_latitude: float = DEFAULT_LATITUDE
    default_longitude: float = DEFAULT_LONGITUDE
    high_accuracy: bool = True

    def __post_init__(self) -> None:
        if not 1 <= self.search_limit <= MAX_SEARCH_RESULTS:
            raise MapNavConfigError(f"search_limit must be between 1 and {MAX_SEARCH_RESULTS}, got {self.search_limit}")
        if self.request_timeout <= 0:
            raise MapNavConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        if not -90.0 <= self.default_latitude <= 90.0:
            raise MapNavConfigError(f"default_latitude out of range: {self.default_latitude}")
        if not -180.0 <= self.default_longitude <= 180.0:
            raise MapNavConfigError(f"default_longitude out of range: {self.default_longitude}")

    @classmethod
    def from_env(cls, **overrides: Any) -> MapNavConfig:
        """Create configuration from environment variables.

        Reads optional ``MAPNAV_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        MapNavConfig
            Populated configuration.

        Raises
        ------
        MapNavConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, cast)

        if "address_details" not in overrides:
            config_kwargs["address_details"] = _env_bool(env.get("MAPNAV_ADDRESS_DETAILS"), True)
        if "high_accuracy" not in overrides:
            config_kwargs["high_accuracy"] = _env_bool(env.get("MAPNAV_HIGH_ACCURACY"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

"""HTTP transport for the geocoding service."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from mapnav.config import MapNavConfig
from mapnav.exceptions import MapNavTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        ...


class HttpTransport:
    """aiohttp-backed transport that returns decoded JSON bodies."""

    def __init__(self, config: MapNavConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> Any:
        """GET *endpoint* with query *params* and decode the JSON reply."""
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
        }
        url = f"{self._config.base_url}{endpoint}"

        _logger.debug("GET %s params=%s", url, dict(params))

        try:
            async with self._http.get(url, params=dict(params), headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise MapNavTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except MapNavTransportError:
            raise
        except (aiohttp.ClientError, TimeoutError, UnicodeDecodeError) as exc:
            raise MapNavTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise MapNavTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                endpoint=endpoint,
            ) from exc

"""Async place search client."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from mapnav._api.search import search_places
from mapnav._transport import HttpTransport, Transport
from mapnav.config import MapNavConfig
from mapnav.exceptions import MapNavError
from mapnav.ingestion.normalize import normalize_query, truncate_for_log
from mapnav.models.search import SearchResult

_logger = logging.getLogger(__name__)


class PlaceSearchClient:
    """Query-to-results adapter over the geocoding service.

    Usage::

        async with PlaceSearchClient(config) as client:
            results = await client.search("museum")
    """

    def __init__(
        self,
        config: MapNavConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or MapNavConfig()
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> PlaceSearchClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise MapNavError("Client not initialized. Use 'async with PlaceSearchClient(...) as client:'")
        return self._transport

    async def search(self, query: str) -> list[SearchResult]:
        """Return up to ``config.search_limit`` places matching *query*.

        An empty or whitespace-only query returns ``[]`` without touching
        the network.
        """
        text = normalize_query(query)
        if not text:
            return []
        transport = self._require_transport()
        _logger.debug("Searching for %r", truncate_for_log(text))
        return await search_places(self._config, transport, text)

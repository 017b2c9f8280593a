"""Free-text place search endpoint.

Endpoint:
  - /search (Nominatim ``format=json``)
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from mapnav._constants import MAX_SEARCH_RESULTS
from mapnav._transport import Transport
from mapnav.config import MapNavConfig
from mapnav.exceptions import MapNavApiError
from mapnav.models.search import SearchResult

_logger = logging.getLogger(__name__)


def build_search_params(config: MapNavConfig, query: str) -> dict[str, str | int]:
    """Build the query string for one search request."""
    return {
        "q": query,
        "format": "json",
        "addressdetails": 1 if config.address_details else 0,
        "limit": min(config.search_limit, MAX_SEARCH_RESULTS),
    }


def parse_search_response(payload: Any, *, limit: int = MAX_SEARCH_RESULTS, endpoint: str = "") -> list[SearchResult]:
    """Convert a provider response into ordered results.

    Provider order is relevance order and is preserved. Records without a
    label or a valid coordinate are dropped.
    """
    if not isinstance(payload, list):
        raise MapNavApiError(
            f"{endpoint or 'search'} returned {type(payload).__name__}, expected a list",
            endpoint=endpoint,
        )

    results: list[SearchResult] = []
    for item in payload:
        if len(results) >= limit:
            break
        if not isinstance(item, dict):
            _logger.debug("Skipping non-object search record: %r", item)
            continue
        try:
            results.append(SearchResult.from_provider(item))
        except ValidationError:
            _logger.debug("Skipping malformed search record place_id=%s", item.get("place_id"), exc_info=True)
    return results


async def search_places(
    config: MapNavConfig,
    transport: Transport,
    query: str,
) -> list[SearchResult]:
    """Run one search against the geocoding service.

    Raises
    ------
    MapNavTransportError
        On network errors, non-200 responses and undecodable bodies.
    MapNavApiError
        If the service answers with something other than a list.
    """
    endpoint = config.search_path
    params = build_search_params(config, query)
    payload = await transport.get_json(endpoint, params)
    results = parse_search_response(payload, limit=int(params["limit"]), endpoint=endpoint)
    _logger.debug("Search returned %d result(s)", len(results))
    return results

#!/usr/bin/env python3
"""Run a live place search and walk the interaction flow.

Searches the configured geocoding service (``MAPNAV_*`` environment
variables, Nominatim by default), prints the results, then selects one and
shows how the store, the camera and the route overlay react. The map and
routing collaborators are printing stand-ins.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from mapnav import (  # noqa: E402
    Coordinate,
    MapNavConfig,
    MapNavError,
    MapNavigator,
    StaticGeolocationProvider,
)


class _PrintingViewport:
    def set_center(self, coordinate: Coordinate, zoom: int, *, animate: bool) -> None:
        print(f"  camera -> {coordinate} zoom={zoom} animate={animate}")


class _PrintingOverlay:
    def __init__(self) -> None:
        self._next = 0

    def create(self, origin: Coordinate, destination: Coordinate) -> int:
        self._next += 1
        print(f"  overlay #{self._next} created {origin} -> {destination}")
        return self._next

    def set_waypoints(self, handle: int, origin: Coordinate, destination: Coordinate) -> None:
        print(f"  overlay #{handle} moved {origin} -> {destination}")

    def destroy(self, handle: int) -> None:
        print(f"  overlay #{handle} destroyed")

    def set_panel_visible(self, handle: int, visible: bool) -> None:
        print(f"  overlay #{handle} panel {'shown' if visible else 'hidden'}")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("query", help="Free-text place to look for")
    parser.add_argument("--lat", type=float, help="Simulated device latitude")
    parser.add_argument("--lon", type=float, help="Simulated device longitude")
    parser.add_argument("--pick", type=int, default=0, help="Index of the result to select (default: 0)")
    parser.add_argument("--limit", type=int, help="Override MAPNAV_SEARCH_LIMIT")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.limit is not None:
        overrides["search_limit"] = args.limit
    config = MapNavConfig.from_env(**overrides)

    position = Coordinate.of(args.lat, args.lon) if args.lat is not None and args.lon is not None else None
    navigator = MapNavigator(
        config,
        geolocation=StaticGeolocationProvider(position),
        viewport=_PrintingViewport(),
        overlay=_PrintingOverlay(),
    )

    async with navigator as nav:
        print(f"Searching for {args.query!r} at {config.base_url}")
        results = await nav.submit_search(args.query)
        if nav.state.search_failed:
            print("Search failed (see log)")
            return 1
        if not results:
            print("No results")
            return 0
        for index, result in enumerate(results):
            print(f"[{index}] {result.label} {result.coordinate}")

        if not 0 <= args.pick < len(results):
            print(f"--pick must be between 0 and {len(results) - 1}")
            return 2
        print(f"Selecting [{args.pick}]")
        nav.select_result(results[args.pick])
        print("Enabling directions")
        nav.toggle_directions()
        print(f"Route status: {nav.state.route_status}")
        print("Unmounting")
    return 0


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    try:
        return asyncio.run(_run(args))
    except MapNavError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())

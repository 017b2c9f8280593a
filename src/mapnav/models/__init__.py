"""Data models shared by every mapnav component."""

from mapnav.models._base import MapNavBaseModel
from mapnav.models.coordinate import Coordinate
from mapnav.models.search import SearchResult

__all__ = [
    "Coordinate",
    "MapNavBaseModel",
    "SearchResult",
]

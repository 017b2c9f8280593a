"""Place search result model."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, Field, model_validator

from mapnav.models._base import MapNavBaseModel
from mapnav.models.coordinate import Coordinate


class SearchResult(MapNavBaseModel):
    """One place returned by the geocoding service.

    Parameters
    ----------
    label : str
        Human readable place name (``display_name`` in Nominatim records).
    coordinate : Coordinate
        Position of the place.
    raw : dict
        Full provider record.
    """

    label: str = Field(validation_alias=AliasChoices("label", "display_name", "displayName", "name"))
    coordinate: Coordinate

    @model_validator(mode="before")
    @classmethod
    def _lift_coordinate(cls, values: Any) -> Any:
        if not isinstance(values, dict) or "coordinate" in values:
            return values
        lat = values.get("lat", values.get("latitude"))
        lon = values.get("lon", values.get("longitude", values.get("lng")))
        if lat is None or lon is None:
            return values
        merged = dict(values)
        merged.setdefault("raw", dict(values))
        merged["coordinate"] = {"latitude": lat, "longitude": lon}
        return merged

    @classmethod
    def from_provider(cls, item: dict[str, Any]) -> SearchResult:
        """Build a result from a raw provider record."""
        return cls.model_validate(item)

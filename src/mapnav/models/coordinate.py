"""Coordinate value type."""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from mapnav.ingestion.normalize import safe_float


class Coordinate(BaseModel):
    """An immutable WGS84 position.

    Parameters
    ----------
    latitude : float
        Degrees north, in ``[-90, 90]``.
    longitude : float
        Degrees east, in ``[-180, 180]``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    latitude: float = Field(ge=-90.0, le=90.0, validation_alias=AliasChoices("latitude", "lat"))
    longitude: float = Field(ge=-180.0, le=180.0, validation_alias=AliasChoices("longitude", "lon", "lng"))

    @field_validator("latitude", "longitude", mode="before")
    @classmethod
    def _coerce_degrees(cls, value: Any) -> Any:
        # Providers send degrees as strings; leave junk for pydantic to reject.
        parsed = safe_float(value)
        return value if parsed is None else parsed

    @classmethod
    def of(cls, latitude: float | str, longitude: float | str) -> Coordinate:
        return cls(latitude=latitude, longitude=longitude)

    def as_tuple(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)

    def __str__(self) -> str:
        return f"({self.latitude}, {self.longitude})"

"""Base model for geocoding provider payloads.

Provider records inherit from :class:`MapNavBaseModel` which provides:

* A ``model_validator(mode="before")`` that strips empty sentinel
  values (``""``, ``None``, NaN) so the field default is used.
* A ``raw`` dict that captures the original payload.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

_SENTINELS = frozenset({"", "NaN", "nan"})


class MapNavBaseModel(BaseModel):
    """Base for models built from geocoding provider records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original provider record."""

    @staticmethod
    def _clean_dict(values: dict[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            if isinstance(value, str) and value.strip() in _SENTINELS:
                continue
            if isinstance(value, float) and math.isnan(value):
                continue
            cleaned[key] = value
        return cleaned

    @model_validator(mode="before")
    @classmethod
    def _clean_provider_values(cls, values: Any) -> Any:
        """Strip sentinel values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        original = dict(values)
        cleaned = MapNavBaseModel._clean_dict(original)
        # Keep an explicit raw= from keyword construction.
        if "raw" not in values:
            cleaned["raw"] = original
        return cleaned

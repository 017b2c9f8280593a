"""Normalization helpers.

Centralizes defensive parsing and log-safe rendering of user input.
"""

from __future__ import annotations

import math
from typing import Any


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result):
        return None
    return result


def normalize_query(value: Any) -> str:
    """Collapse whitespace in a free-text query; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return " ".join(str(value).split())


def truncate_for_log(value: str, *, max_string: int = 80) -> str:
    """Return *value* shortened for log output."""
    if len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value

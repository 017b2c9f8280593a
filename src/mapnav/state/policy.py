"""Toggle coordination policy.

The itinerary panel may only be visible while directions are enabled.
These functions are pure so the rule can be checked on its own; the store
routes both toggles through them.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


def enforce_itinerary_invariant(directions_enabled: bool, itinerary_visible: bool) -> bool:
    """Return the itinerary visibility allowed for *directions_enabled*."""
    return itinerary_visible and directions_enabled


class ToggleState(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    directions_enabled: bool = True
    itinerary_visible: bool = False

    @model_validator(mode="after")
    def _check_invariant(self) -> ToggleState:
        if self.itinerary_visible and not self.directions_enabled:
            raise ValueError("itinerary cannot be visible while directions are disabled")
        return self


def toggle_directions(state: ToggleState) -> ToggleState:
    """Flip directions; turning them off always hides the itinerary."""
    enabled = not state.directions_enabled
    return ToggleState(
        directions_enabled=enabled,
        itinerary_visible=enforce_itinerary_invariant(enabled, state.itinerary_visible),
    )


def toggle_itinerary(state: ToggleState) -> ToggleState:
    """Flip the itinerary panel. No-op while directions are disabled."""
    if not state.directions_enabled:
        return state
    return ToggleState(directions_enabled=True, itinerary_visible=not state.itinerary_visible)


def disable_directions(state: ToggleState) -> ToggleState:
    if not state.directions_enabled:
        return state
    return ToggleState(directions_enabled=False, itinerary_visible=False)


class ToggleCoordinator:
    """Stateful wrapper around the toggle functions.

    Usable without a store, e.g. to drive two buttons directly.
    """

    def __init__(self, state: ToggleState | None = None) -> None:
        self._state = state or ToggleState()

    @property
    def state(self) -> ToggleState:
        return self._state

    def toggle_directions(self) -> ToggleState:
        self._state = toggle_directions(self._state)
        return self._state

    def toggle_itinerary(self) -> ToggleState:
        self._state = toggle_itinerary(self._state)
        return self._state

"""Deterministic in-memory interaction state store.

This is the only component allowed to mutate the interaction state. Every
transition builds one new immutable :class:`InteractionState` and then
notifies subscribers, so observers never see a half-applied update.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from mapnav._constants import DEFAULT_LATITUDE, DEFAULT_LONGITUDE, MAX_SEARCH_RESULTS
from mapnav.exceptions import MapNavError, SearchFailedError
from mapnav.ingestion.normalize import truncate_for_log
from mapnav.models.coordinate import Coordinate
from mapnav.models.search import SearchResult
from mapnav.state.events import RouteStatus, StateField
from mapnav.state.policy import ToggleState, disable_directions, toggle_directions, toggle_itinerary

_logger = logging.getLogger(__name__)

Searcher = Callable[[str], Awaitable[Sequence[SearchResult]]]
Listener = Callable[["StateChange"], None]


def _default_destination() -> Coordinate:
    return Coordinate(latitude=DEFAULT_LATITUDE, longitude=DEFAULT_LONGITUDE)


class InteractionState(BaseModel):
    """Snapshot of everything the map surface shows."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    search_query: str = ""
    search_results: tuple[SearchResult, ...] = ()
    selected_destination: Coordinate = Field(default_factory=_default_destination)
    user_position: Coordinate | None = None
    directions_enabled: bool = True
    itinerary_visible: bool = False
    search_in_flight: bool = False
    search_failed: bool = False
    route_status: RouteStatus = RouteStatus.IDLE

    @model_validator(mode="after")
    def _check_itinerary_invariant(self) -> InteractionState:
        if self.itinerary_visible and not self.directions_enabled:
            raise ValueError("itinerary cannot be visible while directions are disabled")
        return self

    @property
    def controls_visible(self) -> bool:
        """Direction toggles are hidden while search results are listed."""
        return not self.search_results

    @property
    def toggles(self) -> ToggleState:
        return ToggleState(
            directions_enabled=self.directions_enabled,
            itinerary_visible=self.itinerary_visible,
        )


class StateChange(BaseModel):
    """One committed transition."""

    model_config = ConfigDict(frozen=True)

    previous: InteractionState
    current: InteractionState
    changed: frozenset[StateField]
    revision: int
    reason: str = ""


@dataclass(slots=True)
class _Subscription:
    listener: Listener
    fields: frozenset[StateField] | None
    active: bool = True


class InteractionStore:
    """Single owner of :class:`InteractionState`.

    Commits issued from inside a listener are queued and delivered after
    the current notification round, in commit order, so no two transitions
    interleave.
    """

    def __init__(
        self,
        initial: InteractionState | None = None,
        *,
        default_destination: Coordinate | None = None,
    ) -> None:
        if initial is None:
            initial = (
                InteractionState()
                if default_destination is None
                else InteractionState(selected_destination=default_destination)
            )
        self._state = initial
        self._revision = 0
        self._subscriptions: list[_Subscription] = []
        self._pending: deque[StateChange] = deque()
        self._dispatching = False
        self._search_seq = 0

    @property
    def state(self) -> InteractionState:
        return self._state

    @property
    def revision(self) -> int:
        return self._revision

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(
        self,
        listener: Listener,
        fields: Iterable[StateField] | None = None,
    ) -> Callable[[], None]:
        """Register *listener*; returns a callable that unsubscribes it.

        With *fields*, the listener only hears about changes that touch at
        least one of them.
        """
        subscription = _Subscription(listener, frozenset(fields) if fields is not None else None)
        self._subscriptions.append(subscription)

        def _unsubscribe() -> None:
            if subscription.active:
                subscription.active = False
                self._subscriptions.remove(subscription)

        return _unsubscribe

    def _commit(self, reason: str, **changes: Any) -> StateChange | None:
        previous = self._state
        current = InteractionState(**{**dict(previous), **changes})
        changed = frozenset(StateField(name) for name in changes if getattr(previous, name) != getattr(current, name))
        if not changed:
            _logger.debug("%s: no change", reason)
            return None

        self._revision += 1
        self._state = current
        change = StateChange(
            previous=previous,
            current=current,
            changed=changed,
            revision=self._revision,
            reason=reason,
        )
        _logger.debug("%s: revision=%d changed=%s", reason, self._revision, sorted(changed))
        self._pending.append(change)
        self._drain()
        return change

    def _drain(self) -> None:
        if self._dispatching:
            return
        self._dispatching = True
        try:
            while self._pending:
                change = self._pending.popleft()
                for subscription in list(self._subscriptions):
                    if not subscription.active:
                        continue
                    if subscription.fields is not None and subscription.fields.isdisjoint(change.changed):
                        continue
                    subscription.listener(change)
        except BaseException:
            self._pending.clear()
            raise
        finally:
            self._dispatching = False

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        self._commit("set_query", search_query=text)

    def set_user_position(self, coordinate: Coordinate) -> None:
        """Record a position fix and center the destination on it."""
        self._commit("set_user_position", user_position=coordinate, selected_destination=coordinate)

    def set_route_status(self, status: RouteStatus) -> None:
        self._commit("set_route_status", route_status=status)

    def select_result(self, target: Coordinate | SearchResult) -> None:
        """Pick a destination from the search results.

        Clears the result list and the query, and hides the route until
        directions are re-enabled. A search still in flight is superseded.
        """
        coordinate = target.coordinate if isinstance(target, SearchResult) else target
        self._search_seq += 1
        toggles = disable_directions(self._state.toggles)
        self._commit(
            "select_result",
            selected_destination=coordinate,
            search_results=(),
            search_query="",
            search_in_flight=False,
            search_failed=False,
            directions_enabled=toggles.directions_enabled,
            itinerary_visible=toggles.itinerary_visible,
        )

    def toggle_directions(self) -> None:
        toggles = toggle_directions(self._state.toggles)
        self._commit(
            "toggle_directions",
            directions_enabled=toggles.directions_enabled,
            itinerary_visible=toggles.itinerary_visible,
        )

    def toggle_itinerary(self) -> None:
        toggles = toggle_itinerary(self._state.toggles)
        self._commit("toggle_itinerary", itinerary_visible=toggles.itinerary_visible)

    async def submit_search(self, text: str, searcher: Searcher) -> list[SearchResult]:
        """Run *searcher* for *text* and publish its results.

        Only the most recently submitted search may publish; a request that
        completes after a newer one was submitted is discarded. Failures
        publish an empty list with ``search_failed`` set.

        Returns the published results, or ``[]`` when discarded.
        """
        self._search_seq += 1
        request_id = self._search_seq
        self._commit("submit_search", search_query=text, search_in_flight=True, search_failed=False)

        failed = False
        try:
            results = list(await searcher(text))
        except Exception as exc:
            error = exc if isinstance(exc, SearchFailedError) else SearchFailedError(f"{type(exc).__name__}: {exc}")
            _logger.warning(
                "Search for %r failed: %s",
                truncate_for_log(text),
                error,
                exc_info=not isinstance(exc, MapNavError),
            )
            results = []
            failed = True

        if request_id != self._search_seq:
            _logger.debug("Discarding stale search #%d (latest #%d)", request_id, self._search_seq)
            return []

        results = results[:MAX_SEARCH_RESULTS]
        self._commit(
            "search_resolved",
            search_results=tuple(results),
            search_in_flight=False,
            search_failed=failed,
        )
        return results

"""Persistent expand/collapse state for navigation folders.

TreeStateStore maps a folder route to its expanded flag. It outlives every
rendered view: expansion survives navigation and re-renders because the
state is keyed by route, not by view. Listeners registered with the store
are notified on every write so that all views reading a route re-evaluate.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

StateListener = Callable[[str, bool], None]


class ToggleAction(Enum):
    """Effect of a click on a folder's expansion state."""

    TOGGLE = "toggle"
    OPEN = "open"
    NONE = "none"


@dataclass(frozen=True)
class ToggleOutcome:
    """Result of a folder click."""

    action: ToggleAction
    expanded: bool
    navigate_to: str | None = None


def decide_toggle(*, active: bool, has_own_page: bool, disclosure: bool) -> ToggleAction:
    """Decide how a click on a folder changes its expansion.

    A folder with its own page acts as a link while inactive: a label click
    navigates and always opens it, a click on the disclosure control only
    toggles. Once active, any click toggles. A folder without a page has
    nothing to navigate to, so clicks toggle unless it is already active.

    Args:
        active: The folder is the active node
        has_own_page: Selecting the folder navigates to its own page
        disclosure: The click targeted the expand/collapse control

    Returns:
        ToggleAction to apply
    """
    if has_own_page:
        if active or disclosure:
            return ToggleAction.TOGGLE
        return ToggleAction.OPEN
    if active:
        return ToggleAction.NONE
    return ToggleAction.TOGGLE


class TreeStateStore:
    """Route-keyed expansion state shared by all navigation views."""

    def __init__(self, initial: dict[str, bool] | None = None) -> None:
        self._state: dict[str, bool] = dict(initial or {})
        self._listeners: list[StateListener] = []

    def __contains__(self, route: object) -> bool:
        return route in self._state

    def __iter__(self) -> Iterator[str]:
        return iter(self._state)

    def __len__(self) -> int:
        return len(self._state)

    def get(self, route: str) -> bool | None:
        """Return the stored flag for a route, None when unset."""
        return self._state.get(route)

    def set(self, route: str, expanded: bool) -> None:
        """Store the flag for a route and notify listeners."""
        self._state[route] = expanded
        self._notify(route, expanded)

    def resolve(self, route: str, default_collapsed: bool) -> bool:
        """Return the effective expansion of a route.

        Unseen routes fall back to the default policy without being stored.

        Args:
            route: Folder route
            default_collapsed: Folders start collapsed when True

        Returns:
            True when the folder is expanded
        """
        stored = self._state.get(route)
        if stored is None:
            return not default_collapsed
        return stored

    def force_expand(self, route: str) -> None:
        """Mark a route expanded unless it already is.

        Called when the owning node becomes active. Writing only on change
        keeps repeated activations from fighting a later manual collapse.
        """
        if self._state.get(route) is True:
            return
        logger.debug(f"Force-expanding {route}")
        self.set(route, True)

    def toggle(
        self,
        route: str,
        *,
        active: bool,
        has_own_page: bool,
        disclosure: bool,
        default_collapsed: bool = False,
    ) -> ToggleOutcome:
        """Apply a folder click to the stored state.

        Args:
            route: Folder route
            active: The folder is the active node
            has_own_page: Selecting the folder navigates to its own page
            disclosure: The click targeted the expand/collapse control
            default_collapsed: Default policy for unseen routes

        Returns:
            ToggleOutcome with the applied action, the resulting expansion
            and the route to navigate to, if any
        """
        action = decide_toggle(active=active, has_own_page=has_own_page, disclosure=disclosure)
        current = self.resolve(route, default_collapsed)

        if action is ToggleAction.TOGGLE:
            self.set(route, not current)
        elif action is ToggleAction.OPEN:
            self.set(route, True)

        expanded = self.resolve(route, default_collapsed)
        logger.debug(f"Toggle {route}: {action.value} -> expanded={expanded}")

        navigate_to = route if has_own_page and not disclosure else None
        return ToggleOutcome(action=action, expanded=expanded, navigate_to=navigate_to)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener called with ``(route, expanded)`` on writes.

        Returns:
            Callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def snapshot(self) -> dict[str, bool]:
        """Return a copy of all stored entries."""
        return dict(self._state)

    def _notify(self, route: str, expanded: bool) -> None:
        for listener in list(self._listeners):
            listener(route, expanded)

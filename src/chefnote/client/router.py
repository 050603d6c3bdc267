"""Hash-token view router.

Maps the external location token (a URL hash such as ``#/recipe/42/edit``) to a
``(View, Recipe | None)`` pair and back. Grammar::

    "" | "#/"            -> HOME
    recipe/<id>          -> RECIPE_DETAIL
    recipe/<id>/edit     -> ADD_RECIPE (edit mode)
    add                  -> ADD_RECIPE (create mode)
    order                -> ORDER_MODE
    categories           -> CATEGORY_MANAGER
    settings             -> SETTINGS

Ids are percent-encoded. Tokens that do not parse, or that name an id missing
from a loaded collection, resolve to HOME and the external token is rewritten
to the root.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, unquote

from chefnote.client.store import EntityStore
from chefnote.domain.navigation import SIMPLE_VIEW_TOKENS, Direction, View
from chefnote.domain.recipes import Recipe

logger = logging.getLogger(__name__)

ROOT_TOKEN = "#/"
_RECIPE_SEGMENT = "recipe"
_EDIT_SEGMENT = "edit"


class LocationBar(Protocol):
    """External, bookmarkable location holding the current token."""

    @property
    def token(self) -> str:
        """Return the current token."""

    def push(self, token: str) -> None:
        """Set the token, adding a history entry."""

    def replace(self, token: str) -> None:
        """Set the token without adding a history entry."""

    def subscribe(self, callback: Callable[[str], None]) -> None:
        """Register a callback for changes not made through push/replace."""


@dataclass(frozen=True)
class RouteState:
    """Current router state."""

    view: View
    entity: Recipe | None
    direction: Direction


@dataclass(frozen=True)
class Resolution:
    """Outcome of parsing a token against a recipe collection."""

    view: View
    entity: Recipe | None
    redirect: bool = False
    missing_id: str | None = None


def _segments(token: str) -> list[str]:
    stripped = token.lstrip("#").strip("/")
    if not stripped:
        return []
    return [unquote(segment) for segment in stripped.split("/")]


def normalize_token(token: str) -> str:
    """Return the canonical spelling of a token (``#/`` prefixed)."""
    return "#/" + "/".join(quote(segment, safe="") for segment in _segments(token))


def location_token(view: View, entity: Recipe | None = None) -> str:
    """Return the canonical token for a router state."""
    if view is View.HOME:
        return ROOT_TOKEN
    if view.traits.accepts_entity and entity is not None:
        recipe_path = f"#/{_RECIPE_SEGMENT}/{quote(entity.id, safe='')}"
        if view is View.ADD_RECIPE:
            return f"{recipe_path}/{_EDIT_SEGMENT}"
        return recipe_path
    return f"#/{view.traits.token}"


def resolve_token(token: str, recipes: Iterable[Recipe]) -> Resolution:
    """Parse a token into a view and entity. Has no side effects."""
    segments = _segments(token)
    if not segments:
        return Resolution(View.HOME, None)

    if segments[0] == _RECIPE_SEGMENT and len(segments) in {2, 3}:
        recipe_id = segments[1]
        if len(segments) == 3 and segments[2] != _EDIT_SEGMENT:
            return Resolution(View.HOME, None, redirect=True)
        view = View.ADD_RECIPE if len(segments) == 3 else View.RECIPE_DETAIL
        entity = next((r for r in recipes if r.id == recipe_id), None)
        if entity is None:
            return Resolution(View.HOME, None, redirect=True, missing_id=recipe_id)
        return Resolution(view, entity)

    if len(segments) == 1 and segments[0] in SIMPLE_VIEW_TOKENS:
        return Resolution(SIMPLE_VIEW_TOKENS[segments[0]], None)

    return Resolution(View.HOME, None, redirect=True)


class ViewRouter:
    """Keeps the router state and the external location token in step."""

    def __init__(self, location: LocationBar, store: EntityStore) -> None:
        self.location = location
        self.store = store
        self._state = RouteState(View.HOME, None, Direction.FORWARD)
        self._listeners: list[Callable[[RouteState], None]] = []
        self._writing = False
        location.subscribe(self._on_location_change)

    @property
    def state(self) -> RouteState:
        return self._state

    @property
    def current_view(self) -> View:
        return self._state.view

    @property
    def selected(self) -> Recipe | None:
        return self._state.entity

    def add_listener(self, listener: Callable[[RouteState], None]) -> None:
        """Register a callback invoked after every state change."""
        self._listeners.append(listener)

    def navigate(
        self, view: View, direction: Direction, entity: Recipe | None = None
    ) -> RouteState:
        """Move to a view and reflect it into the location token."""
        if view.traits.requires_entity and entity is None:
            logger.warning("Cannot open %s without a recipe; going home", view.name)
            view = View.HOME
        if not view.traits.accepts_entity:
            entity = None
        token = location_token(view, entity)
        if normalize_token(token) != normalize_token(self.location.token):
            self._write(token, replace=False)
        self._set_state(RouteState(view, entity, direction))
        return self._state

    def sync(self, direction: Direction | None = None) -> RouteState:
        """Re-resolve the current token against the current collection.

        Before the first load completes, a token naming an unknown id shows
        HOME but keeps the token so the first sync after loading retries it.
        """
        resolved_direction = direction or self._state.direction
        resolution = resolve_token(self.location.token, self.store.recipes)
        if resolution.missing_id is not None and not self.store.loaded:
            self._set_state(RouteState(View.HOME, None, resolved_direction))
            return self._state
        if resolution.redirect:
            logger.info(
                "Unresolvable location %r; redirecting home", self.location.token
            )
            self._write(ROOT_TOKEN, replace=True)
        self._set_state(
            RouteState(resolution.view, resolution.entity, resolved_direction)
        )
        return self._state

    def _on_location_change(self, _token: str) -> None:
        if self._writing:
            return
        self.sync(Direction.BACKWARD)

    def _write(self, token: str, replace: bool) -> None:
        self._writing = True
        try:
            if replace:
                self.location.replace(token)
            else:
                self.location.push(token)
        finally:
            self._writing = False

    def _set_state(self, state: RouteState) -> None:
        if state == self._state:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)

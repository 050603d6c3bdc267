"""View and direction definitions for the single-page app."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class ViewTraits:
    """Declarative description of a full-screen view."""

    token: str
    requires_entity: bool = False
    accepts_entity: bool = False
    shows_navbar: bool = False


class View(Enum):
    """Enum of views (single source of truth for routing)."""

    HOME = ViewTraits("", shows_navbar=True)
    ADD_RECIPE = ViewTraits("add", accepts_entity=True)
    ORDER_MODE = ViewTraits("order")
    CATEGORY_MANAGER = ViewTraits("categories", shows_navbar=True)
    RECIPE_DETAIL = ViewTraits("recipe", requires_entity=True, accepts_entity=True)
    SETTINGS = ViewTraits("settings")

    @property
    def traits(self) -> ViewTraits:
        return self.value


class Direction(Enum):
    """Navigation direction, used only to pick transition edges."""

    FORWARD = 1
    BACKWARD = -1


SIMPLE_VIEW_TOKENS: dict[str, View] = {
    view.traits.token: view
    for view in View
    if view.traits.token and not view.traits.requires_entity
}

"""Tests for the hash-token view router."""

import asyncio

from chefnote.adapters.memory_location import InMemoryLocationBar
from chefnote.client.router import (
    ROOT_TOKEN,
    RouteState,
    ViewRouter,
    location_token,
    normalize_token,
    resolve_token,
)
from chefnote.client.store import EntityStore
from chefnote.domain.app_settings import AppSettings
from chefnote.domain.navigation import Direction, View
from tests.conftest import build_app, make_recipe


def _loaded_store(*recipe_ids: str) -> EntityStore:
    store = EntityStore()
    store.load(
        [make_recipe(rid, created_at=i) for i, rid in enumerate(recipe_ids)],
        ["炒菜"],
        AppSettings(),
    )
    return store


def test_tokens_round_trip_for_every_view() -> None:
    recipe = make_recipe("42")
    cases = [
        (View.HOME, None),
        (View.ADD_RECIPE, None),
        (View.ADD_RECIPE, recipe),
        (View.ORDER_MODE, None),
        (View.CATEGORY_MANAGER, None),
        (View.RECIPE_DETAIL, recipe),
        (View.SETTINGS, None),
    ]

    for view, entity in cases:
        resolution = resolve_token(location_token(view, entity), [recipe])
        assert (resolution.view, resolution.entity) == (view, entity)
        assert resolution.redirect is False


def test_edit_token_resolves_to_form_when_recipe_exists() -> None:
    recipe = make_recipe("42")

    resolution = resolve_token("#/recipe/42/edit", [recipe])

    assert resolution.view is View.ADD_RECIPE
    assert resolution.entity == recipe


def test_edit_token_for_missing_recipe_redirects_home() -> None:
    resolution = resolve_token("#/recipe/42/edit", [make_recipe("7")])

    assert resolution.view is View.HOME
    assert resolution.entity is None
    assert resolution.redirect is True
    assert resolution.missing_id == "42"


def test_unknown_tokens_redirect_home() -> None:
    for token in ("#/nope", "#/recipe", "#/recipe/1/delete", "#/order/extra"):
        resolution = resolve_token(token, [make_recipe("1")])
        assert resolution.view is View.HOME
        assert resolution.redirect is True


def test_empty_tokens_are_home_without_redirect() -> None:
    for token in ("", "#", "#/", "#//"):
        resolution = resolve_token(token, [])
        assert resolution.view is View.HOME
        assert resolution.redirect is False


def test_ids_are_percent_encoded() -> None:
    recipe = make_recipe("a/b c")

    token = location_token(View.RECIPE_DETAIL, recipe)

    assert token == "#/recipe/a%2Fb%20c"
    assert resolve_token(token, [recipe]).entity == recipe


def test_normalize_token_is_stable() -> None:
    assert normalize_token("#/order/") == "#/order"
    assert normalize_token("") == ROOT_TOKEN
    assert normalize_token(normalize_token("#/recipe/a%2Fb")) == "#/recipe/a%2Fb"


def test_navigate_pushes_token_and_notifies() -> None:
    store = _loaded_store("1")
    location = InMemoryLocationBar()
    router = ViewRouter(location, store)
    seen: list[RouteState] = []
    router.add_listener(seen.append)

    router.navigate(View.RECIPE_DETAIL, Direction.FORWARD, store.recipe_by_id("1"))

    assert location.entries == ["#/", "#/recipe/1"]
    assert router.current_view is View.RECIPE_DETAIL
    assert seen[-1].direction is Direction.FORWARD


def test_navigate_to_same_view_is_idempotent() -> None:
    store = _loaded_store()
    location = InMemoryLocationBar()
    router = ViewRouter(location, store)
    seen: list[RouteState] = []
    router.add_listener(seen.append)

    router.navigate(View.ORDER_MODE, Direction.FORWARD)
    router.navigate(View.ORDER_MODE, Direction.FORWARD)

    assert location.entries == ["#/", "#/order"]
    assert len(seen) == 1


def test_navigate_detail_without_recipe_falls_back_home() -> None:
    store = _loaded_store()
    location = InMemoryLocationBar(entries=["#/", "#/order"], index=1)
    router = ViewRouter(location, store)
    router.sync()

    router.navigate(View.RECIPE_DETAIL, Direction.FORWARD)

    assert router.current_view is View.HOME
    assert router.selected is None
    assert location.token == ROOT_TOKEN


def test_views_without_entities_drop_the_selection() -> None:
    store = _loaded_store("1")
    router = ViewRouter(InMemoryLocationBar(), store)

    router.navigate(View.SETTINGS, Direction.FORWARD, store.recipe_by_id("1"))

    assert router.selected is None
    assert router.location.token == "#/settings"


def test_browser_back_syncs_with_backward_direction() -> None:
    store = _loaded_store("1")
    location = InMemoryLocationBar()
    router = ViewRouter(location, store)
    router.navigate(View.RECIPE_DETAIL, Direction.FORWARD, store.recipe_by_id("1"))

    location.back()

    assert router.current_view is View.HOME
    assert router.state.direction is Direction.BACKWARD

    location.forward()

    assert router.current_view is View.RECIPE_DETAIL
    assert router.selected == store.recipe_by_id("1")


def test_unresolvable_token_after_load_is_replaced_not_pushed() -> None:
    store = _loaded_store("1")
    location = InMemoryLocationBar(entries=["#/", "#/recipe/99"], index=1)
    router = ViewRouter(location, store)

    router.sync()

    assert router.current_view is View.HOME
    assert location.entries == ["#/", ROOT_TOKEN]
    assert location.index == 1


def test_deep_link_waits_for_initial_load(api, scheduler) -> None:
    location = InMemoryLocationBar(entries=["#/recipe/2"])
    app = build_app(api, scheduler, location)

    assert app.router.current_view is View.HOME
    assert location.token == "#/recipe/2"

    asyncio.run(app.start())

    assert app.router.current_view is View.RECIPE_DETAIL
    assert app.router.selected is not None
    assert app.router.selected.id == "2"


def test_deep_link_to_unknown_recipe_redirects_after_load(api, scheduler) -> None:
    location = InMemoryLocationBar(entries=["#/recipe/404/edit"])
    app = build_app(api, scheduler, location)

    asyncio.run(app.start())

    assert app.router.current_view is View.HOME
    assert location.entries == [ROOT_TOKEN]


def test_resolving_the_same_token_twice_is_stable() -> None:
    recipes = [make_recipe("1"), make_recipe("2")]

    for token in ("#/recipe/2", "#/recipe/1/edit", "#/order", "#/recipe/404"):
        assert resolve_token(token, recipes) == resolve_token(token, recipes)


def test_repeated_sync_keeps_state_and_history() -> None:
    store = _loaded_store("1")
    location = InMemoryLocationBar(entries=["#/", "#/recipe/1"], index=1)
    router = ViewRouter(location, store)

    first = router.sync()
    second = router.sync()

    assert (first.view, first.entity) == (second.view, second.entity)
    assert location.entries == ["#/", "#/recipe/1"]


def test_repeated_sync_after_redirect_does_not_touch_history() -> None:
    store = _loaded_store("1")
    location = InMemoryLocationBar(entries=["#/", "#/recipe/99"], index=1)
    router = ViewRouter(location, store)

    router.sync()
    entries = list(location.entries)
    router.sync()

    assert router.current_view is View.HOME
    assert location.entries == entries == ["#/", ROOT_TOKEN]

"""Tests for order mode."""

import asyncio
from dataclasses import dataclass

from chefnote.client.notifications import Severity
from chefnote.client.order import EMPTY_PREP_LIST, OrderSession, aggregate_prep_list
from chefnote.domain.menu import MenuRecommendation
from chefnote.domain.recipes import Ingredient, Recipe
from tests.conftest import FakeChefNoteApi, FakeScheduler, build_app, make_recipe


def _session(api: FakeChefNoteApi, scheduler: FakeScheduler) -> OrderSession:
    app = build_app(api, scheduler)
    asyncio.run(app.start())
    return OrderSession(app.store, app.api, app.notifications)


def test_aggregate_prep_list_merges_amounts() -> None:
    recipes = [
        make_recipe("1", ingredients=[Ingredient("鸡蛋", "3个"), Ingredient("盐")]),
        make_recipe("2", ingredients=[Ingredient(" 鸡蛋 ", "2个"), Ingredient("")]),
    ]

    assert aggregate_prep_list(recipes) == "• 鸡蛋: 3个 + 2个\n• 盐"
    assert aggregate_prep_list([]) == EMPTY_PREP_LIST


def test_cart_toggle_and_grouping(api, scheduler) -> None:
    session = _session(api, scheduler)

    session.toggle("1")
    session.toggle("2")
    session.toggle("3")
    session.toggle("3")

    assert session.is_selected("1")
    assert not session.is_selected("3")
    assert list(session.grouped_menu()) == ["炒菜", "甜品"]

    session.clear()

    assert session.cart == []
    assert session.build_prep_list() is None


def test_recommend_fills_cart_and_themes_menu(api, scheduler) -> None:
    api.recommendation = MenuRecommendation(selected_ids=["1", "3"], reasoning="荤素搭配")
    session = _session(api, scheduler)
    session.set_people_count(3)

    selected = asyncio.run(session.recommend())

    assert selected == ["1", "3"]
    assert session.theme == api.theme
    assert session.busy is False


def test_theme_failure_keeps_recommended_selection(api, scheduler) -> None:
    api.recommendation = MenuRecommendation(selected_ids=["2"], reasoning="")
    api.fail.add("generate_menu_theme")
    session = _session(api, scheduler)

    selected = asyncio.run(session.recommend())

    assert selected == ["2"]
    assert session.cart == ["2"]
    assert session.theme is None
    assert session.notifications.current is not None
    assert session.notifications.current.severity is Severity.ERROR


def test_recommendation_failure_records_detail(api, scheduler) -> None:
    api.fail.add("recommend_menu")
    session = _session(api, scheduler)
    session.toggle("1")

    assert asyncio.run(session.recommend()) == []
    assert session.cart == ["1"]
    assert session.error_detail == "recommend_menu failed"


def test_ai_prep_list_and_theme_need_a_selection(api, scheduler) -> None:
    session = _session(api, scheduler)

    assert asyncio.run(session.generate_ai_prep_list()) is None
    assert asyncio.run(session.generate_theme()) is None

    session.toggle("2")

    assert asyncio.run(session.generate_ai_prep_list()) == "• 鸡蛋: 3个"
    assert asyncio.run(session.generate_theme()) == api.theme


@dataclass
class _HeldRecommendationApi(FakeChefNoteApi):
    """Holds recommend_menu open until ``release`` is set."""

    release: asyncio.Event | None = None

    async def recommend_menu(
        self, recipes: list[Recipe], people_count: int
    ) -> MenuRecommendation:
        assert self.release is not None
        await self.release.wait()
        return await super().recommend_menu(recipes, people_count)


def test_recommend_ignores_taps_while_running(api, scheduler) -> None:
    held = _HeldRecommendationApi(
        recipes=list(api.recipes),
        categories=list(api.categories),
        recommendation=MenuRecommendation(selected_ids=["2"], reasoning=""),
    )
    session = _session(held, scheduler)

    async def tap_twice() -> tuple[list[str], list[str]]:
        held.release = asyncio.Event()
        first = asyncio.create_task(session.recommend())
        await asyncio.sleep(0)
        assert session.busy is True
        second = await session.recommend()
        held.release.set()
        return await first, second

    first, second = asyncio.run(tap_twice())

    assert first == ["2"]
    assert second == []
    assert held.calls.count("recommend_menu") == 1


def test_ai_helpers_do_nothing_while_busy(api, scheduler) -> None:
    session = _session(api, scheduler)
    session.toggle("1")
    session.busy = True
    api.calls.clear()

    assert asyncio.run(session.generate_theme()) is None
    assert asyncio.run(session.generate_ai_prep_list()) is None
    assert api.calls == []

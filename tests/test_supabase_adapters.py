"""Tests for Supabase adapter implementations."""

from dataclasses import dataclass, field

from chefnote.adapters.supabase_recipe_repository import SupabaseRecipeRepository
from chefnote.adapters.supabase_state_repository import (
    SupabaseAppSettingsRepository,
    SupabaseCategoryRepository,
)
from chefnote.domain.recipes import CookingLog
from tests.conftest import make_recipe


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {
            "select": [],
            "insert": [],
            "update": [],
            "upsert": [],
            "delete": [],
        }
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def update(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "update"
        self.last_payload = payload
        return self

    def upsert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "upsert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def limit(self, _count: int) -> "FakeTable":
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _row(recipe_id: str) -> dict[str, object]:
    return {
        "id": recipe_id,
        "title": "双皮奶",
        "category": "甜品",
        "cover_image": "https://img.example/milk.jpg",
        "proficiency": 4,
        "source_link": "",
        "ingredients": [{"name": "牛奶", "amount": "250ml"}],
        "steps": ["煮奶", "蒸"],
        "logs": [{"id": "l1", "date": 5, "image": None, "note": "很嫩"}],
        "created_at": 1_000,
    }


def test_supabase_recipe_repository_parses_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    table.queue("select", [_row("r1")])

    repository = SupabaseRecipeRepository(client)  # type: ignore[arg-type]
    recipes = repository.list_recipes()

    assert table.last_order == ("created_at", True)
    recipe = recipes[0]
    assert recipe.title == "双皮奶"
    assert recipe.source_link is None
    assert recipe.ingredients[0].amount == "250ml"
    assert recipe.logs == [CookingLog(id="l1", date=5, image="", note="很嫩")]


def test_supabase_recipe_repository_writes_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("recipes")
    recipe = make_recipe("r1")
    table.queue("insert", [_row("r1")])
    table.queue("update", [_row("r1")])

    repository = SupabaseRecipeRepository(client)  # type: ignore[arg-type]
    repository.insert_recipe(recipe)
    inserted = table.last_payload
    repository.replace_recipe(recipe)

    assert isinstance(inserted, dict)
    assert inserted["id"] == "r1"
    assert inserted["ingredients"] == [
        {"name": "鸡蛋", "amount": "3个"},
        {"name": "番茄", "amount": "2个"},
    ]
    assert isinstance(table.last_payload, dict)
    assert "id" not in table.last_payload
    assert table.last_filters[-1] == ("id", "r1")


def test_supabase_recipe_repository_missing_recipe() -> None:
    client = FakeSupabaseClient()

    repository = SupabaseRecipeRepository(client)  # type: ignore[arg-type]

    assert repository.get_recipe("missing") is None


def test_supabase_category_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("app_state")
    table.queue("select", [{"value": ["炒菜", "甜品"]}])

    repository = SupabaseCategoryRepository(client)  # type: ignore[arg-type]

    assert repository.get_categories() == ["炒菜", "甜品"]
    assert repository.get_categories() is None

    repository.set_categories(["甜品"])
    assert table.last_payload == {"key": "categories", "value": ["甜品"]}


def test_supabase_app_settings_repository() -> None:
    client = FakeSupabaseClient()
    table = client.table("app_state")
    table.queue("select", [{"value": {"ai_model": "gpt-4.1"}}])

    repository = SupabaseAppSettingsRepository(client)  # type: ignore[arg-type]

    assert repository.get_settings() == {"ai_model": "gpt-4.1"}

    repository.set_settings({"ai_model": "gpt-5.2"})
    assert table.last_filters == [("key", "settings")]
    assert table.last_payload == {"key": "settings", "value": {"ai_model": "gpt-5.2"}}

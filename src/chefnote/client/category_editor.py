"""Category list editing with drag reordering."""

from dataclasses import dataclass

from chefnote.client.coordinator import MutationCoordinator
from chefnote.client.store import EntityStore
from chefnote.domain.errors import CategoryValidationError
from chefnote.domain.validation import validate_categories


@dataclass
class CategoryEditor:
    """Local editing state for the category manager.

    Reordering is previewed locally while dragging and written to the API
    once, on drop. Every other edit is written immediately.
    """

    store: EntityStore
    coordinator: MutationCoordinator
    preview: list[str] | None = None
    dragged_index: int | None = None
    processing: bool = False

    @property
    def categories(self) -> list[str]:
        if self.preview is not None:
            return list(self.preview)
        return list(self.store.categories)

    async def add(self, name: str) -> bool:
        label = name.strip()
        if not label:
            return False
        if label in self.store.categories:
            raise CategoryValidationError(f"分类已存在: {label}")
        return await self._commit([*self.store.categories, label])

    async def remove(self, index: int) -> bool:
        categories = list(self.store.categories)
        del categories[index]
        return await self._commit(categories)

    async def rename(self, index: int, new_name: str) -> bool:
        """Rename in place; recipes carrying the old label follow."""
        label = new_name.strip()
        old_name = self.store.categories[index]
        if not label or label == old_name:
            return False
        if label in self.store.categories:
            raise CategoryValidationError(f"分类已存在: {label}")
        if self.processing:
            return False
        self.processing = True
        try:
            await self.coordinator.rename_category(old_name, label)
        finally:
            self.processing = False
        return True

    def drag_start(self, index: int) -> bool:
        if self.processing:
            return False
        self.dragged_index = index
        self.preview = list(self.store.categories)
        return True

    def drag_over(self, index: int) -> None:
        """Move the dragged label to ``index`` in the local preview only."""
        if self.preview is None or self.dragged_index is None:
            return
        if index == self.dragged_index or self.processing:
            return
        label = self.preview.pop(self.dragged_index)
        self.preview.insert(index, label)
        self.dragged_index = index

    async def drop(self) -> bool:
        """Commit the previewed order, if it changed."""
        preview = self.preview
        self.preview = None
        self.dragged_index = None
        if preview is None or preview == list(self.store.categories):
            return False
        return await self._commit(preview)

    def drag_cancel(self) -> None:
        self.preview = None
        self.dragged_index = None

    async def _commit(self, categories: list[str]) -> bool:
        if self.processing:
            return False
        validate_categories(categories)
        self.processing = True
        try:
            await self.coordinator.update_categories(categories)
        finally:
            self.processing = False
        return True

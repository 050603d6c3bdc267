"""Domain error types."""


class RecipeValidationError(ValueError):
    """Raised when a recipe or cooking log draft is incomplete."""

    def __init__(self, problems: list[str]) -> None:
        super().__init__("; ".join(problems))
        self.problems = problems


class CategoryValidationError(ValueError):
    """Raised when a category list is blank or contains duplicates."""


class RecipeNotFoundError(LookupError):
    """Raised when a recipe id is unknown to the store."""

    def __init__(self, recipe_id: str) -> None:
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id


class CategoryCascadeError(RuntimeError):
    """Raised when some recipes could not follow a category rename."""

    def __init__(self, old_name: str, new_name: str, failed_ids: list[str]) -> None:
        super().__init__(
            f"Rename {old_name!r} -> {new_name!r} left {len(failed_ids)} "
            f"recipe(s) on the old label: {', '.join(failed_ids)}"
        )
        self.old_name = old_name
        self.new_name = new_name
        self.failed_ids = failed_ids


class AiUnavailableError(RuntimeError):
    """Raised when AI helpers are requested without a configured key."""

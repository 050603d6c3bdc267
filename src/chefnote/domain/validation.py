"""Validation helpers applied before any remote write."""

from chefnote.domain.errors import CategoryValidationError, RecipeValidationError
from chefnote.domain.recipes import Ingredient, RecipeDraft

MIN_PROFICIENCY = 1
MAX_PROFICIENCY = 5


def normalize_draft(draft: RecipeDraft) -> RecipeDraft:
    """Trim text fields and drop blank ingredient rows and steps."""
    source_link = (draft.source_link or "").strip() or None
    return RecipeDraft(
        title=draft.title.strip(),
        category=draft.category,
        cover_image=draft.cover_image,
        proficiency=draft.proficiency,
        ingredients=[
            Ingredient(name=item.name.strip(), amount=item.amount.strip())
            for item in draft.ingredients
            if item.name.strip()
        ],
        steps=[step.strip() for step in draft.steps if step.strip()],
        source_link=source_link,
    )


def validate_draft(draft: RecipeDraft) -> None:
    """Raise RecipeValidationError when a normalized draft is incomplete."""
    problems: list[str] = []
    if not draft.title:
        problems.append("请填写菜名")
    if not draft.ingredients:
        problems.append("至少需要一种食材")
    if not draft.steps:
        problems.append("至少需要一个步骤")
    if not MIN_PROFICIENCY <= draft.proficiency <= MAX_PROFICIENCY:
        problems.append(f"熟练度需在 {MIN_PROFICIENCY} 到 {MAX_PROFICIENCY} 之间")
    if problems:
        raise RecipeValidationError(problems)


def validate_cooking_log(image: str | None, note: str | None) -> None:
    """A cooking log needs a photo or a note."""
    if not (image or "").strip() and not (note or "").strip():
        raise RecipeValidationError(["请上传照片或填写心得"])


def validate_categories(categories: list[str]) -> None:
    """Reject blank labels and duplicates."""
    seen: set[str] = set()
    for label in categories:
        if not label.strip():
            raise CategoryValidationError("分类名称不能为空")
        if label in seen:
            raise CategoryValidationError(f"分类已存在: {label}")
        seen.add(label)

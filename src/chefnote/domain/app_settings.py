"""Domain model for user-facing app settings."""

from dataclasses import dataclass, replace

TEXT_MODELS: tuple[str, ...] = ("gpt-5.2", "gpt-5-mini", "gpt-4.1")
IMAGE_MODELS: tuple[str, ...] = ("gpt-image-1", "gpt-image-1-mini")


@dataclass(frozen=True)
class AppSettings:
    """AI model selections stored alongside the recipe data."""

    ai_model: str = TEXT_MODELS[0]
    image_model: str = IMAGE_MODELS[0]

    def merged(self, changes: dict[str, object]) -> "AppSettings":
        """Return settings with the given fields replaced."""
        known = {
            key: str(value)
            for key, value in changes.items()
            if key in {"ai_model", "image_model"} and value is not None
        }
        return replace(self, **known)


def validate_settings(settings: AppSettings) -> None:
    """Reject model names outside the supported lists."""
    if settings.ai_model not in TEXT_MODELS:
        raise ValueError(f"Unsupported text model: {settings.ai_model}")
    if settings.image_model not in IMAGE_MODELS:
        raise ValueError(f"Unsupported image model: {settings.image_model}")

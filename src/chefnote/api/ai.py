"""AI helper endpoints (menus, prep lists, search and photos)."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from chefnote.api.schemas import (
    GenerateImageRequest,
    ImageRequest,
    RecommendMenuRequest,
    SearchRequest,
    SelectedRecipesRequest,
    recipes_to_domain,
)
from chefnote.domain.errors import AiUnavailableError
from chefnote.services.ai import AiService

logger = logging.getLogger(__name__)


def require_ai(request: Request) -> AiService:
    """Return the AI service or fail with 503 when no key is configured."""
    service = request.app.state.container.ai_service
    if service is None:
        raise AiUnavailableError("AI features are not configured")
    return service


router = APIRouter(prefix="/api/ai", tags=["ai"])


def _failure(action: str, exc: Exception) -> JSONResponse:
    logger.error("AI %s failed: %s", action, exc)
    return JSONResponse(status_code=500, content={"error": str(exc) or action})


@router.post("/recommend-menu", response_model=None)
async def recommend_menu(
    body: RecommendMenuRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    """Recommend dishes for a number of people."""
    try:
        result = await service.recommend_menu(
            recipes_to_domain(body.recipes), body.people_count
        )
    except Exception as exc:
        return _failure("menu recommendation", exc)
    return result.model_dump(by_alias=True)


@router.post("/generate-menu", response_model=None)
async def generate_menu(
    body: SelectedRecipesRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    """Generate a menu poster theme for the selection."""
    try:
        theme = await service.generate_menu_theme(
            recipes_to_domain(body.recipes), body.selected_ids
        )
    except Exception as exc:
        return _failure("menu theme", exc)
    return theme.model_dump(by_alias=True)


@router.post("/generate-prep", response_model=None)
async def generate_prep(
    body: SelectedRecipesRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    try:
        text = await service.generate_prep_list(
            recipes_to_domain(body.recipes), body.selected_ids
        )
    except Exception as exc:
        return _failure("prep list", exc)
    return {"text": text}


@router.post("/search", response_model=None)
async def search(
    body: SearchRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    """Natural-language recipe search."""
    try:
        ids = await service.search_recipes(body.query, recipes_to_domain(body.recipes))
    except Exception as exc:
        return _failure("search", exc)
    return {"ids": ids}


@router.post("/optimize-image", response_model=None)
async def optimize_image(
    body: ImageRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    """Turn a phone photo into a food-magazine shot."""
    if not body.image.strip():
        raise ValueError("Missing image data")
    try:
        image = await service.optimize_image(body.image)
    except Exception as exc:
        return _failure("image optimization", exc)
    return {"image": image}


@router.post("/generate-image", response_model=None)
async def generate_image(
    body: GenerateImageRequest, service: AiService = Depends(require_ai)
) -> dict[str, object] | JSONResponse:
    if not body.prompt.strip():
        raise ValueError("Missing prompt")
    try:
        image = await service.generate_image(body.prompt)
    except Exception as exc:
        return _failure("image generation", exc)
    return {"image": image}

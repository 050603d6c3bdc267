"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chefnote.api.ai import router as ai_router
from chefnote.api.recipes import router as recipes_router
from chefnote.app_logging import configure_logging
from chefnote.config import ai_enabled
from chefnote.containers import AppContainer
from chefnote.domain.errors import AiUnavailableError, RecipeNotFoundError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "ChefNote API starting (environment=%s, ai=%s)",
            container.settings.environment,
            "on" if ai_enabled(container.settings) else "off",
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RecipeNotFoundError)
    async def not_found(_request: Request, exc: RecipeNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Recipe not found"})

    @app.exception_handler(AiUnavailableError)
    async def ai_unavailable(
        _request: Request, exc: AiUnavailableError
    ) -> JSONResponse:
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.exception_handler(ValueError)
    async def bad_request(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=400, content={"error": str(exc)})

    app.include_router(recipes_router)
    app.include_router(ai_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"status": "ok", "service": "chefnote"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app

"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from allergen_filter.api.admin import router as admin_router
from allergen_filter.api.models import (
    FilterRequest,
    FilterResponse,
    InterpretRequest,
    InterpretResponse,
)
from allergen_filter.app_logging import configure_logging
from allergen_filter.containers import AppContainer
from allergen_filter.domain.errors import MalformedInputError, MenuNotFoundError
from allergen_filter.services.restrictions import (
    normalize_custom_tags,
    normalize_restrictions,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting allergen filter (%s), AI judge %s",
            container.settings.environment,
            "enabled" if container.hybrid_filter.judge else "disabled",
        )
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(MalformedInputError)
    async def malformed_input(
        _request: Request, exc: MalformedInputError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.exception_handler(MenuNotFoundError)
    async def menu_not_found(
        _request: Request, exc: MenuNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/venues/{slug}/filter")
    async def filter_menu(
        slug: str, payload: FilterRequest, request: Request
    ) -> FilterResponse:
        """Filter a venue's menu against the diner's restrictions."""
        state_container: AppContainer = request.app.state.container
        restrictions = normalize_restrictions(
            payload.restrictions, state_container.registry
        )
        custom_tags = normalize_custom_tags(payload.custom_tags)
        menu = state_container.menu_service.get_menu(slug)
        result = await state_container.hybrid_filter.filter(
            menu, restrictions, custom_tags
        )
        logger.info(
            "Filtered %s: %s safe, %s caution, %s excluded",
            slug,
            len(result.safe_items),
            len(result.caution_items),
            result.excluded_count,
        )
        return FilterResponse.from_result(result, state_container.registry)

    @app.post("/interpret")
    async def interpret(
        payload: InterpretRequest, request: Request
    ) -> InterpretResponse:
        """Resolve free-text allergy input to cataloged allergen ids."""
        if not payload.text.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="text must not be blank"
            )
        state_container: AppContainer = request.app.state.container
        result = await state_container.interpreter.resolve(payload.text)
        return InterpretResponse.from_result(result)

    return app

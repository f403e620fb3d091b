"""FastAPI application for the Knowcards service."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from knowcards import __version__
from knowcards.core.config import configure_logging
from knowcards.core.errors import CardNotFoundError, CardValidationError, StorageError
from knowcards.web.dependencies import get_store
from knowcards.web.routes import cards_router, site_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the data file before serving; a failure here aborts startup."""
    configure_logging()
    store = get_store()
    store.ensure_initialized()
    logger.info("Serving cards from %s", store.data_file)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Knowcards",
        description="Knowledge cards for interview preparation",
        version=__version__,
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def no_cache(request: Request, call_next):
        response = await call_next(request)
        response.headers["Cache-Control"] = "no-cache"
        return response

    @app.exception_handler(CardValidationError)
    async def validation_error_handler(request: Request, exc: CardValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(CardNotFoundError)
    async def not_found_handler(request: Request, exc: CardNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": str(exc)})

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "card storage failed", "detail": str(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        """Routing errors (405 and friends) use the same error shape as the API."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=exc.headers,
        )

    @app.get("/health")
    def health() -> dict:
        """Health check endpoint."""
        return {"status": "ok", "cards": get_store().count()}

    # Routes; the static catch-all must come last
    app.include_router(cards_router, prefix="/api/cards", tags=["cards"])
    app.include_router(site_router)

    return app


# Create the app instance for uvicorn
app = create_app()

"""FastAPI application factory.

Creates the app, registers routers and error handlers, and wires up
lifespan events.

Run locally with:
    uvicorn paper_assist.api.app:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from paper_assist.api.deps import get_config_dep, get_llm_client, init_components, is_initialized
from paper_assist.api.errors import (
    AssistError,
    api_http_error_handler,
    assist_error_handler,
    validation_error_handler,
)
from paper_assist.api.models import HealthResponse
from paper_assist.api.routes_bookmarks import router as bookmarks_router
from paper_assist.api.routes_drafting import router as drafting_router
from paper_assist.config import Config, get_config

logger = logging.getLogger(__name__)

CORS_METHODS = ["POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize components on startup."""
    if not is_initialized():
        logger.info("Starting paper-assist API")
        init_components()
        logger.info("Startup complete")
    yield
    logger.info("Shutting down")


def create_app(config: Config | None = None) -> FastAPI:
    """Build and return the FastAPI application."""
    config = config or get_config()
    app = FastAPI(
        title="paper-assist",
        description="LLM text helpers for the Model UN position paper writer.",
        version="0.3.0",
        lifespan=lifespan,
    )

    # The writer tool is embedded on several sites, so CORS is open by default
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_allow_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    app.add_exception_handler(AssistError, assist_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, api_http_error_handler)

    app.include_router(bookmarks_router, prefix="/api")
    app.include_router(drafting_router, prefix="/api")

    @app.get("/api/health", response_model=HealthResponse, tags=["health"])
    def health_check(cfg: Config = Depends(get_config_dep)):
        return HealthResponse(
            status="ok",
            llm_backend=cfg.llm_backend,
            llm_configured=get_llm_client() is not None,
        )

    origins = config.cors_allow_origins
    allow_origin = "*" if "*" in origins or not origins else origins[0]

    # Bare OPTIONS requests lack the headers CORSMiddleware treats as a
    # preflight, so they are answered here.
    @app.options("/api/{full_path:path}", include_in_schema=False)
    def options_fallback(full_path: str):
        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Origin": allow_origin,
                "Access-Control-Allow-Methods": ", ".join(CORS_METHODS),
                "Access-Control-Allow-Headers": ", ".join(CORS_HEADERS),
            },
        )

    return app


app = create_app()

"""Error envelope for the writer endpoints.

Every failure is answered with the endpoint's empty result plus an ``error``
string, so the browser tool can always read the field it expects.
"""

import logging
from contextlib import contextmanager

from fastapi import Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please wait a moment."
NOT_CONFIGURED_MESSAGE = "AI service not configured"
INVALID_BODY_MESSAGE = "Invalid request body"

# Empty result per endpoint, keyed by route name under /api
EMPTY_RESULTS: dict[str, dict] = {
    "check-idea": {"matchingBookmarks": [], "suggestions": ""},
    "classify-bookmark": {"category": "other", "confidence": 0},
    "draft-conclusion": {"draft": ""},
    "polish-text": {"polishedText": ""},
    "summarize-bookmarks": {"summary": ""},
}


class AssistError(Exception):
    """Raised anywhere in a request to answer with an error envelope."""

    def __init__(
        self,
        endpoint: str,
        status_code: int,
        message: str,
        extra: dict | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code
        self.message = message
        self.extra = extra or {}
        self.headers = headers

    def envelope(self) -> dict:
        body = {"error": self.message}
        body.update(EMPTY_RESULTS.get(self.endpoint, {}))
        body.update(self.extra)
        return body


@contextmanager
def handler_boundary(endpoint: str, failure_message: str):
    """Turn any unexpected exception inside the block into a 500 envelope."""
    try:
        yield
    except AssistError:
        raise
    except Exception as exc:
        logger.exception("%s failed", endpoint)
        raise AssistError(endpoint, 500, failure_message) from exc


def endpoint_for_path(path: str) -> str:
    return path.rstrip("/").rsplit("/", 1)[-1]


async def assist_error_handler(request: Request, exc: AssistError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.envelope(),
        headers=exc.headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed JSON or wrongly typed fields are a plain 400."""
    logger.info("Invalid body for %s: %s", request.url.path, exc.errors())
    error = AssistError(endpoint_for_path(request.url.path), 400, INVALID_BODY_MESSAGE)
    return JSONResponse(status_code=400, content=error.envelope())


async def api_http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Framework errors under /api (unreadable body, wrong method) get the envelope too."""
    if not request.url.path.startswith("/api/"):
        return await http_exception_handler(request, exc)
    message = INVALID_BODY_MESSAGE if exc.status_code == 400 else str(exc.detail)
    error = AssistError(endpoint_for_path(request.url.path), exc.status_code, message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error.envelope(),
        headers=getattr(exc, "headers", None),
    )

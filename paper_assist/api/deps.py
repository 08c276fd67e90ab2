"""FastAPI dependency injection — shared component singletons.

Builds the LLM client and one rate limiter per endpoint once at startup,
then provides them via FastAPI Depends().
"""

import logging

from fastapi import Request

from paper_assist.api.errors import NOT_CONFIGURED_MESSAGE, RATE_LIMIT_MESSAGE, AssistError
from paper_assist.api.rate_limit import RateLimiter
from paper_assist.config import Config, get_config
from paper_assist.generation.llm_client import LLMClient, build_llm_client

logger = logging.getLogger(__name__)

# Requests per window, per client IP
ENDPOINT_LIMITS = {
    "check-idea": 20,
    "classify-bookmark": 30,
    "draft-conclusion": 15,
    "polish-text": 20,
    "summarize-bookmarks": 20,
}

# ── Singletons (populated by init_components) ───────────────────────

_config: Config | None = None
_llm_client: LLMClient | None = None
_limiters: dict[str, RateLimiter] | None = None


def build_limiters(config: Config) -> dict[str, RateLimiter]:
    return {
        name: RateLimiter(
            max_requests=limit,
            window_seconds=config.rate_limit_window_seconds,
            max_entries=config.rate_limit_max_entries,
        )
        for name, limit in ENDPOINT_LIMITS.items()
    }


def init_components(config: Config | None = None) -> None:
    """Initialize the LLM client and rate limiters. Call once at startup."""
    global _config, _llm_client, _limiters

    _config = config or get_config()
    _llm_client = build_llm_client(_config)
    _limiters = build_limiters(_config)
    logger.info(
        "Components initialized (llm=%s)",
        _llm_client.backend_name if _llm_client else "not configured",
    )


def is_initialized() -> bool:
    """Check if components have been initialized (or mocked for testing)."""
    return _config is not None and _limiters is not None


def get_config_dep() -> Config:
    assert _config is not None, "Components not initialized — call init_components()"
    return _config


def get_llm_client() -> LLMClient | None:
    return _llm_client


def get_limiter(endpoint: str) -> RateLimiter:
    assert _limiters is not None, "Components not initialized — call init_components()"
    return _limiters[endpoint]


def require_llm(endpoint: str):
    """Dependency factory: the endpoint's LLM client, or a 503 envelope."""

    def dependency() -> LLMClient:
        client = get_llm_client()
        if client is None:
            raise AssistError(endpoint, 503, NOT_CONFIGURED_MESSAGE)
        return client

    return dependency


def rate_limited(endpoint: str):
    """Dependency factory: count the request, or answer 429."""

    def dependency(request: Request) -> None:
        result = get_limiter(endpoint).check(request)
        if not result.allowed:
            logger.warning("Rate limit hit on %s", endpoint)
            raise AssistError(
                endpoint,
                429,
                RATE_LIMIT_MESSAGE,
                headers={"Retry-After": str(result.retry_after)},
            )

    return dependency

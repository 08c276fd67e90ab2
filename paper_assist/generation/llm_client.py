"""Single-call LLM client used by every writer endpoint.

Wraps one LLMBackend and flattens every failure into ``None`` so route
handlers can answer with a uniform 500. No retries: the student re-clicks.
"""

import logging

from paper_assist.config import Config
from paper_assist.generation.groq_backend import GroqBackend
from paper_assist.generation.llm_backend_base import LLMBackend
from paper_assist.generation.ollama_backend import OllamaBackend
from paper_assist.generation.openai_backend import OpenAICompatibleBackend

logger = logging.getLogger(__name__)

SUPPORTED_BACKENDS = ("openai", "groq", "ollama")


class LLMClient:
    """Thin wrapper: prompt in, completion text (or None) out.

    Usage:
        client = LLMClient(backend, temperature=0.7)
        text = client.call_llm(prompt, max_tokens=200)
    """

    def __init__(self, backend: LLMBackend, temperature: float = 0.7):
        self.backend = backend
        self.temperature = temperature

    @property
    def backend_name(self) -> str:
        return self.backend.backend_name

    def call_llm(self, prompt: str, max_tokens: int = 500) -> str | None:
        """Run one completion. Returns the stripped text, or None on failure."""
        try:
            result = self.backend.generate(
                prompt=prompt,
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
        except Exception:
            logger.exception("LLM call failed (backend=%s)", self.backend_name)
            return None
        if result.truncated:
            logger.warning("Completion cut off at max_tokens=%d", max_tokens)
        return (result.answer or "").strip()


def build_backend(config: Config) -> LLMBackend | None:
    """Create the configured backend, or None if it lacks credentials."""
    if config.llm_backend not in SUPPORTED_BACKENDS:
        logger.warning(
            "Unknown LLM_BACKEND=%r (expected one of %s)",
            config.llm_backend,
            ", ".join(SUPPORTED_BACKENDS),
        )
        return None

    if not config.llm_configured():
        logger.warning(
            "LLM_BACKEND=%s is missing credentials; AI endpoints will return 503",
            config.llm_backend,
        )
        return None

    if config.llm_backend == "groq":
        return GroqBackend(
            api_key=config.groq_api_key,
            model=config.llm_model,
            timeout=config.llm_timeout_seconds,
        )
    if config.llm_backend == "ollama":
        return OllamaBackend(
            host=config.ollama_host,
            model=config.llm_model,
            timeout=config.llm_timeout_seconds,
        )
    return OpenAICompatibleBackend(
        api_url=config.llm_api_url,
        api_key=config.llm_api_key,
        model=config.llm_model,
        timeout=config.llm_timeout_seconds,
    )


def build_llm_client(config: Config) -> LLMClient | None:
    backend = build_backend(config)
    if backend is None:
        return None
    logger.info("LLM backend: %s (model=%s)", backend.backend_name, backend.model)
    return LLMClient(backend, temperature=config.llm_temperature)

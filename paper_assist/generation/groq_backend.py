"""Groq cloud backend.

Uses the official groq SDK. SDK retries are switched off: a failed call is
reported straight back to the student, who can simply click again.
"""

import logging

from groq import APIConnectionError, APIStatusError, Groq

from paper_assist.generation.llm_backend_base import (
    GenerationResult,
    LLMBackend,
    build_messages,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama-3.1-8b-instant"


class GroqBackend(LLMBackend):
    """LLM backend using the Groq chat completions API."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL, timeout: float = 60.0):
        if not api_key:
            raise ValueError("Groq API key is required")
        self.model = model or DEFAULT_MODEL
        self._client = Groq(api_key=api_key, timeout=timeout, max_retries=0)

    @property
    def backend_name(self) -> str:
        return "groq"

    def is_available(self) -> bool:
        """Credentials work and the configured model is served."""
        try:
            served = {m.id for m in self._client.models.list().data}
        except Exception as exc:
            logger.warning("Groq model listing failed: %s", exc)
            return False
        if self.model not in served:
            logger.warning("Groq does not serve model %s", self.model)
            return False
        return True

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> GenerationResult:
        logger.info("Groq request: model=%s, max_tokens=%d", self.model, max_tokens)

        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=build_messages(prompt, system_prompt),
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except APIStatusError as exc:
            logger.error("Groq API error %s: %s", exc.status_code, exc.message)
            raise RuntimeError(f"Groq API error: {exc.status_code}") from exc
        except APIConnectionError as exc:
            logger.error("Groq unreachable: %s", exc)
            raise RuntimeError("Groq API unreachable") from exc

        choice = response.choices[0]
        usage = {}
        if response.usage:
            usage = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
            }

        result = GenerationResult(
            answer=choice.message.content or "",
            model=self.model,
            usage=usage,
            finish_reason=choice.finish_reason,
        )
        logger.info("Groq response: %d chars, usage=%s", len(result.answer), usage)
        return result

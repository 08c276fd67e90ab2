"""OpenAI-compatible chat completions backend.

Works with any provider exposing POST {LLM_API_URL} in the OpenAI chat
completions format (Groq, OpenRouter, Together AI, Workers AI gateways).
LLM_API_URL is the full completions URL, not a base URL.
"""

import logging

import requests

from paper_assist.generation.llm_backend_base import (
    GenerationResult,
    LLMBackend,
    build_messages,
)

logger = logging.getLogger(__name__)


class OpenAICompatibleBackend(LLMBackend):
    """LLM backend for OpenAI-style /chat/completions endpoints."""

    def __init__(self, api_url: str, api_key: str, model: str, timeout: float = 60.0):
        if not (api_url and api_key and model):
            raise ValueError("LLM_API_URL, LLM_API_KEY and LLM_MODEL are all required")
        self.api_url = api_url
        self.model = model
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        })

    @property
    def backend_name(self) -> str:
        return "openai"

    def is_available(self) -> bool:
        """Send a one-token request; any HTTP 200 counts as available."""
        try:
            resp = self._session.post(
                self.api_url,
                json={
                    "model": self.model,
                    "messages": build_messages("ping"),
                    "max_tokens": 1,
                },
                timeout=10,
            )
            return resp.status_code == 200
        except requests.RequestException:
            return False

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> GenerationResult:
        """POST a chat completion and return the first choice's content."""
        payload = {
            "model": self.model,
            "messages": build_messages(prompt, system_prompt),
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        logger.info("LLM request: model=%s, tokens=%d", self.model, max_tokens)

        try:
            resp = self._session.post(self.api_url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as exc:
            logger.error("LLM API error %s: %s", resp.status_code, resp.text[:500])
            raise RuntimeError(f"LLM API error: {exc}") from exc
        except requests.RequestException as exc:
            logger.error("LLM request failed: %s", exc)
            raise RuntimeError(f"LLM request failed: {exc}") from exc

        data = resp.json()

        choice = (data.get("choices") or [{}])[0]
        answer = (choice.get("message") or {}).get("content") or ""
        usage = data.get("usage") or {}

        logger.info("LLM response: %d chars, usage=%s", len(answer), usage)

        return GenerationResult(
            answer=answer,
            model=data.get("model", self.model),
            usage=usage,
            finish_reason=choice.get("finish_reason"),
        )

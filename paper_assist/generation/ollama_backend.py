"""Ollama backend for running the writer helpers against a local model.

Talks to the Ollama REST API (``/api/chat`` and ``/api/tags``). Small
models such as llama3.2:3b follow the writer prompts well enough for
classroom use without any API key.
"""

import logging

import requests

from paper_assist.generation.llm_backend_base import (
    GenerationResult,
    LLMBackend,
    build_messages,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.2:3b"


def _same_model(wanted: str, pulled: str) -> bool:
    """Ollama reports untagged models as ``name:latest``."""
    if ":" not in wanted:
        wanted += ":latest"
    return wanted == pulled


class OllamaBackend(LLMBackend):
    """LLM backend for a local or LAN Ollama server."""

    def __init__(
        self,
        host: str = "http://localhost:11434",
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ):
        self.host = host.rstrip("/")
        self.model = model or DEFAULT_MODEL
        self.timeout = timeout

    @property
    def backend_name(self) -> str:
        return "ollama"

    def is_available(self) -> bool:
        """Server is up and the configured model has been pulled."""
        try:
            resp = requests.get(f"{self.host}/api/tags", timeout=5)
            resp.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Ollama not reachable at %s: %s", self.host, exc)
            return False

        pulled = [m.get("name", "") for m in resp.json().get("models", [])]
        if not any(_same_model(self.model, name) for name in pulled):
            logger.warning("Model %s not pulled (run: ollama pull %s)", self.model, self.model)
            return False
        return True

    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> GenerationResult:
        payload = {
            "model": self.model,
            "messages": build_messages(prompt, system_prompt),
            "stream": False,
            "options": {"num_predict": max_tokens, "temperature": temperature},
        }
        logger.info("Ollama request: model=%s, max_tokens=%d", self.model, max_tokens)

        try:
            resp = requests.post(f"{self.host}/api/chat", json=payload, timeout=self.timeout)
        except requests.ConnectionError as exc:
            logger.error("Ollama server unreachable at %s: %s", self.host, exc)
            raise RuntimeError(f"Ollama server unreachable at {self.host}") from exc
        except requests.RequestException as exc:
            logger.error("Ollama request failed: %s", exc)
            raise RuntimeError(f"Ollama request failed: {exc}") from exc

        if resp.status_code == 404:
            raise RuntimeError(f"Ollama model {self.model} not found on {self.host}")
        if resp.status_code != 200:
            logger.error("Ollama error %s: %s", resp.status_code, resp.text[:500])
            raise RuntimeError(f"Ollama error: {resp.status_code}")

        data = resp.json()
        usage = {
            key: data[src]
            for key, src in (("prompt_tokens", "prompt_eval_count"), ("completion_tokens", "eval_count"))
            if src in data
        }
        result = GenerationResult(
            answer=data.get("message", {}).get("content", ""),
            model=self.model,
            usage=usage,
            finish_reason=data.get("done_reason"),
        )
        logger.info("Ollama response: %d chars, usage=%s", len(result.answer), usage)
        return result

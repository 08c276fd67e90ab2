"""Abstract LLM backend interface.

Every provider (OpenAI-compatible HTTP, Groq, Ollama) implements LLMBackend,
so route handlers only ever deal with LLMClient and plain strings. Backends
raise RuntimeError on transport or API failures; LLMClient turns that into
``None``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

# finish_reason value meaning the completion hit max_tokens
FINISH_LENGTH = "length"


@dataclass
class GenerationResult:
    """One completion plus what the provider reported about it."""

    answer: str
    model: str
    usage: dict = field(default_factory=dict)
    finish_reason: str | None = None

    @property
    def truncated(self) -> bool:
        return self.finish_reason == FINISH_LENGTH


class LLMBackend(ABC):
    """A chat-completion provider that can answer a single prompt."""

    model: str

    @abstractmethod
    def generate(
        self,
        prompt: str,
        system_prompt: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.1,
    ) -> GenerationResult:
        """Run one completion.

        Args:
            prompt: The full prompt, rules and student content included.
            system_prompt: Optional system message. The writer prompts carry
                their rules inline, so callers usually leave this out.
            max_tokens: Completion budget for this endpoint.
            temperature: Sampling temperature.

        Raises:
            RuntimeError: the provider could not be reached or returned an error.
        """
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """True if the provider answers and the configured model can be used."""
        ...

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short identifier matching the LLM_BACKEND setting."""
        ...


def build_messages(prompt: str, system_prompt: str | None = None) -> list[dict]:
    """Chat message list shared by all backends."""
    messages = [{"role": "user", "content": prompt}]
    if system_prompt:
        messages.insert(0, {"role": "system", "content": system_prompt})
    return messages

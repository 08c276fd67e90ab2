"""Generation module — LLM backends and the single-call client."""

from paper_assist.generation.groq_backend import GroqBackend
from paper_assist.generation.llm_backend_base import GenerationResult, LLMBackend
from paper_assist.generation.llm_client import LLMClient, build_backend, build_llm_client
from paper_assist.generation.ollama_backend import OllamaBackend
from paper_assist.generation.openai_backend import OpenAICompatibleBackend

__all__ = [
    "GenerationResult",
    "GroqBackend",
    "LLMBackend",
    "LLMClient",
    "OllamaBackend",
    "OpenAICompatibleBackend",
    "build_backend",
    "build_llm_client",
]

"""Central configuration for the paper-assist service."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Project root is the directory holding the paper_assist/ package
PROJECT_ROOT = Path(__file__).parent.parent


def _csv(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


@dataclass
class Config:
    """Application configuration loaded from environment variables."""

    # LLM
    llm_backend: str = field(
        default_factory=lambda: os.getenv("LLM_BACKEND", "openai")
    )
    llm_api_key: str = field(default_factory=lambda: os.getenv("LLM_API_KEY", ""))
    llm_api_url: str = field(default_factory=lambda: os.getenv("LLM_API_URL", ""))
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", ""))
    groq_api_key: str = field(default_factory=lambda: os.getenv("GROQ_API_KEY", ""))
    ollama_host: str = field(
        default_factory=lambda: os.getenv("OLLAMA_HOST", "http://localhost:11434")
    )
    llm_temperature: float = field(
        default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.7"))
    )
    llm_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))
    )

    # Rate limiting
    rate_limit_window_seconds: float = field(
        default_factory=lambda: float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    )
    rate_limit_max_entries: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_MAX_ENTRIES", "10000"))
    )

    # HTTP
    cors_allow_origins: list[str] = field(default=None)

    def __post_init__(self):
        if self.cors_allow_origins is None:
            self.cors_allow_origins = _csv(os.getenv("CORS_ALLOW_ORIGINS", "*"))
        self.llm_backend = self.llm_backend.strip().lower()

    def llm_configured(self) -> bool:
        """Whether the selected backend has everything it needs to run."""
        if self.llm_backend == "groq":
            return bool(self.groq_api_key)
        if self.llm_backend == "ollama":
            return bool(self.ollama_host)
        return bool(self.llm_api_key and self.llm_api_url and self.llm_model)


def get_config() -> Config:
    """Get a Config instance. Call this instead of constructing directly."""
    return Config()

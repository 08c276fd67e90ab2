"""Shared pytest fixtures for paper-assist tests."""

import pytest

from paper_assist.config import Config


@pytest.fixture
def sample_bookmarks() -> list[dict]:
    """A few bookmarks as the browser tool sends them."""
    return [
        {
            "id": "bm-1",
            "content": "About 11 million metric tons of plastic enter the ocean every year.",
            "category": "key_statistics",
        },
        {
            "id": "bm-2",
            "text": "Kenya banned single-use plastic bags in 2017.",
            "category": "past_positions",
        },
        {
            "id": "bm-3",
            "content": "UNEA resolution 5/14 launched negotiations on a plastics treaty.",
        },
    ]


@pytest.fixture
def paper_context() -> dict:
    return {"country": "Kenya", "committee": "UNEP", "topic": "Plastic pollution"}


@pytest.fixture
def test_config() -> Config:
    """A fully configured OpenAI-compatible setup that never touches the network."""
    return Config(
        llm_backend="openai",
        llm_api_key="test-key",
        llm_api_url="https://llm.example.com/v1/chat/completions",
        llm_model="test-model",
        cors_allow_origins=["*"],
    )

"""Pydantic models for API request/response schemas.

JSON bodies use camelCase keys (the browser tool's convention); Python code
uses snake_case attributes. Request fields are optional on purpose: missing
or blank values are reported by the route with a field-specific 400 rather
than a generic validation error.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Request models ───────────────────────────────────────────────────


class Bookmark(CamelModel):
    """A snippet the student saved from a background guide."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    id: str | None = None
    content: str | None = None
    text: str | None = None
    category: str | None = None


class PaperContext(CamelModel):
    country: str | None = None
    committee: str | None = None
    topic: str | None = None


class ComprehensionAnswers(CamelModel):
    key_statistics: str | None = None
    present_state: str | None = None
    past_positions: str | None = None
    country_interests: str | None = None


class PriorContext(CamelModel):
    why_important: str | None = None
    key_events: str | None = None
    country_position: str | None = None
    past_actions: str | None = None
    proposed_solutions: str | None = None


class PaperSections(CamelModel):
    background_facts: str | None = None
    position_statement: str | None = None
    solution_proposal: str | None = None


class CheckIdeaRequest(CamelModel):
    idea: str | None = None
    bookmarks: list[Bookmark] | None = None
    comprehension_answers: ComprehensionAnswers | None = None


class ClassifyBookmarkRequest(CamelModel):
    text: str | None = None


class DraftConclusionRequest(CamelModel):
    sections: PaperSections | None = None
    context: PaperContext | None = None


class PolishTextRequest(CamelModel):
    text: str | None = None
    context: PaperContext | None = None
    transform_type: str | None = None
    prior_context: PriorContext | None = None
    target_layer: str | None = None


class SummarizeBookmarksRequest(CamelModel):
    bookmarks: list[Bookmark] | None = None
    context: PaperContext | None = None


# ── Response models ──────────────────────────────────────────────────


class MatchingBookmark(CamelModel):
    bookmark: dict
    explanation: str


class CheckIdeaResponse(CamelModel):
    matching_bookmarks: list[MatchingBookmark] = Field(default_factory=list)
    suggestions: str = ""
    support_level: str | None = None
    error: str | None = None


class ClassifyBookmarkResponse(CamelModel):
    category: str = "other"
    confidence: float = 0
    error: str | None = None


class DraftConclusionResponse(CamelModel):
    draft: str = ""
    error: str | None = None


class PolishTextResponse(CamelModel):
    polished_text: str = ""
    error: str | None = None


class SummarizeBookmarksResponse(CamelModel):
    summary: str = ""
    error: str | None = None


class HealthResponse(CamelModel):
    """Service health status."""

    status: str
    llm_backend: str
    llm_configured: bool

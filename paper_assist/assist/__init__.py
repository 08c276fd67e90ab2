"""Prompt building, input sanitization and completion post-processing."""

from paper_assist.assist.prompts import (
    VALID_CATEGORIES,
    VALID_TRANSFORMS,
    build_check_idea_prompt,
    build_classify_prompt,
    build_conclusion_prompt,
    build_polish_prompt,
    build_summary_prompt,
)
from paper_assist.assist.responses import (
    IdeaCheckResult,
    clean_draft,
    clean_polished_text,
    clean_summary,
    is_refusal,
    parse_category,
    parse_idea_check,
)
from paper_assist.assist.sanitize import detects_injection_attempt, sanitize_input

__all__ = [
    "IdeaCheckResult",
    "VALID_CATEGORIES",
    "VALID_TRANSFORMS",
    "build_check_idea_prompt",
    "build_classify_prompt",
    "build_conclusion_prompt",
    "build_polish_prompt",
    "build_summary_prompt",
    "clean_draft",
    "clean_polished_text",
    "clean_summary",
    "detects_injection_attempt",
    "is_refusal",
    "parse_category",
    "parse_idea_check",
    "sanitize_input",
]

"""Bookmark endpoints — classify, summarize, and check ideas against research."""

import logging

from fastapi import APIRouter, Depends

from paper_assist.api.deps import rate_limited, require_llm
from paper_assist.api.errors import AssistError, handler_boundary
from paper_assist.api.models import (
    CheckIdeaRequest,
    CheckIdeaResponse,
    ClassifyBookmarkRequest,
    ClassifyBookmarkResponse,
    MatchingBookmark,
    SummarizeBookmarksRequest,
    SummarizeBookmarksResponse,
)
from paper_assist.assist.prompts import (
    MAX_IDEA_BOOKMARKS,
    MAX_SUMMARY_BOOKMARKS,
    build_check_idea_prompt,
    build_classify_prompt,
    build_summary_prompt,
)
from paper_assist.assist.responses import NO_MATCH_GUIDANCE, clean_summary, parse_category, parse_idea_check
from paper_assist.generation.llm_client import LLMClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookmarks"])

CHECK_IDEA = "check-idea"
CLASSIFY_BOOKMARK = "classify-bookmark"
SUMMARIZE_BOOKMARKS = "summarize-bookmarks"


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


@router.post(
    f"/{CHECK_IDEA}",
    response_model=CheckIdeaResponse,
    response_model_exclude_none=True,
)
def check_idea(
    req: CheckIdeaRequest,
    llm: LLMClient = Depends(require_llm(CHECK_IDEA)),
    _: None = Depends(rate_limited(CHECK_IDEA)),
):
    """Say which bookmarks back the student's idea and what is missing."""
    if _blank(req.idea):
        raise AssistError(CHECK_IDEA, 400, "No idea provided")
    if not req.bookmarks:
        raise AssistError(
            CHECK_IDEA,
            400,
            "No bookmarks to check against",
            extra={"suggestions": "Try bookmarking some research from the background guide first!"},
        )

    failure = "Idea checking failed"
    with handler_boundary(CHECK_IDEA, failure):
        bookmarks = [b.model_dump(by_alias=True, exclude_none=True) for b in req.bookmarks]
        answers = None
        if req.comprehension_answers is not None:
            answers = req.comprehension_answers.model_dump(by_alias=True, exclude_none=True)

        prompt = build_check_idea_prompt(req.idea, bookmarks, answers)
        raw = llm.call_llm(prompt, max_tokens=400)
        if not raw:
            raise AssistError(CHECK_IDEA, 500, failure)

        # Only the bookmarks that made it into the prompt can be cited
        parsed = parse_idea_check(raw, bookmarks[:MAX_IDEA_BOOKMARKS])
        if not parsed.matching_bookmarks and not parsed.suggestions:
            parsed.suggestions = NO_MATCH_GUIDANCE

    logger.info(
        "check-idea: %d matches, level=%s",
        len(parsed.matching_bookmarks),
        parsed.support_level,
    )
    return CheckIdeaResponse(
        matching_bookmarks=[
            MatchingBookmark(bookmark=m.bookmark, explanation=m.explanation)
            for m in parsed.matching_bookmarks
        ],
        suggestions=parsed.suggestions,
        support_level=parsed.support_level,
    )


@router.post(
    f"/{CLASSIFY_BOOKMARK}",
    response_model=ClassifyBookmarkResponse,
    response_model_exclude_none=True,
)
def classify_bookmark(
    req: ClassifyBookmarkRequest,
    llm: LLMClient = Depends(require_llm(CLASSIFY_BOOKMARK)),
    _: None = Depends(rate_limited(CLASSIFY_BOOKMARK)),
):
    """Label a bookmark with one research category."""
    if _blank(req.text):
        raise AssistError(CLASSIFY_BOOKMARK, 400, "No text provided")

    failure = "Classification failed"
    with handler_boundary(CLASSIFY_BOOKMARK, failure):
        raw = llm.call_llm(build_classify_prompt(req.text), max_tokens=50)
        if not raw:
            raise AssistError(CLASSIFY_BOOKMARK, 500, failure)
        category, confidence = parse_category(raw)

    return ClassifyBookmarkResponse(category=category, confidence=confidence)


@router.post(
    f"/{SUMMARIZE_BOOKMARKS}",
    response_model=SummarizeBookmarksResponse,
    response_model_exclude_none=True,
)
def summarize_bookmarks(
    req: SummarizeBookmarksRequest,
    llm: LLMClient = Depends(require_llm(SUMMARIZE_BOOKMARKS)),
    _: None = Depends(rate_limited(SUMMARIZE_BOOKMARKS)),
):
    """Summarize up to five bookmarks in one or two casual sentences."""
    if not req.bookmarks:
        raise AssistError(SUMMARIZE_BOOKMARKS, 400, "Need at least 1 bookmark to summarize")

    failure = "Summarization failed"
    with handler_boundary(SUMMARIZE_BOOKMARKS, failure):
        bookmarks = [
            b.model_dump(by_alias=True, exclude_none=True)
            for b in req.bookmarks[:MAX_SUMMARY_BOOKMARKS]
        ]
        context = req.context.model_dump(exclude_none=True) if req.context else None

        raw = llm.call_llm(build_summary_prompt(bookmarks, context), max_tokens=200)
        if not raw:
            raise AssistError(SUMMARIZE_BOOKMARKS, 500, failure)
        summary = clean_summary(raw)

    return SummarizeBookmarksResponse(summary=summary)

"""Drafting endpoints — polish student text and draft the conclusion."""

import logging

from fastapi import APIRouter, Depends

from paper_assist.api.deps import rate_limited, require_llm
from paper_assist.api.errors import AssistError, handler_boundary
from paper_assist.api.models import (
    DraftConclusionRequest,
    DraftConclusionResponse,
    PolishTextRequest,
    PolishTextResponse,
)
from paper_assist.assist.prompts import (
    VALID_TRANSFORMS,
    build_conclusion_prompt,
    build_polish_prompt,
)
from paper_assist.assist.responses import clean_draft, clean_polished_text, is_refusal
from paper_assist.generation.llm_client import LLMClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["drafting"])

DRAFT_CONCLUSION = "draft-conclusion"
POLISH_TEXT = "polish-text"


def _blank(value: str | None) -> bool:
    return not (value or "").strip()


@router.post(
    f"/{DRAFT_CONCLUSION}",
    response_model=DraftConclusionResponse,
    response_model_exclude_none=True,
)
def draft_conclusion(
    req: DraftConclusionRequest,
    llm: LLMClient = Depends(require_llm(DRAFT_CONCLUSION)),
    _: None = Depends(rate_limited(DRAFT_CONCLUSION)),
):
    """Draft a 2-3 sentence conclusion from the sections written so far."""
    sections = req.sections
    if sections is None:
        raise AssistError(DRAFT_CONCLUSION, 400, "No sections provided")
    if all(
        _blank(s)
        for s in (sections.background_facts, sections.position_statement, sections.solution_proposal)
    ):
        raise AssistError(
            DRAFT_CONCLUSION, 400, "Need at least one completed section to draft conclusion"
        )

    failure = "Conclusion drafting failed"
    with handler_boundary(DRAFT_CONCLUSION, failure):
        context = req.context.model_dump(exclude_none=True) if req.context else None
        prompt = build_conclusion_prompt(
            sections.model_dump(by_alias=True, exclude_none=True), context
        )
        raw = llm.call_llm(prompt, max_tokens=250)
        if not raw:
            raise AssistError(DRAFT_CONCLUSION, 500, failure)
        draft = clean_draft(raw)

    return DraftConclusionResponse(draft=draft)


@router.post(
    f"/{POLISH_TEXT}",
    response_model=PolishTextResponse,
    response_model_exclude_none=True,
)
def polish_text(
    req: PolishTextRequest,
    llm: LLMClient = Depends(require_llm(POLISH_TEXT)),
    _: None = Depends(rate_limited(POLISH_TEXT)),
):
    """Rewrite auto-filled text according to the requested transform.

    A model refusal is not an HTTP error: the caller gets an empty
    ``polishedText`` with an explanation and shows its own fallback.
    """
    if _blank(req.text):
        raise AssistError(POLISH_TEXT, 400, "No text provided")
    ctx = req.context
    if ctx is None or not (ctx.country and ctx.committee and ctx.topic):
        raise AssistError(POLISH_TEXT, 400, "Missing context (country, committee, or topic)")
    if req.transform_type not in VALID_TRANSFORMS:
        raise AssistError(POLISH_TEXT, 400, "Invalid transform type")

    failure = "AI processing failed"
    with handler_boundary(POLISH_TEXT, failure):
        prior = req.prior_context.model_dump(by_alias=True, exclude_none=True) if req.prior_context else None
        prompt = build_polish_prompt(
            req.text,
            ctx.model_dump(exclude_none=True),
            req.transform_type,
            prior,
            req.target_layer,
        )
        raw = llm.call_llm(prompt, max_tokens=500)
        if not raw:
            raise AssistError(POLISH_TEXT, 500, failure)

        if is_refusal(raw):
            logger.info("polish-text: model refused (%d chars)", len(raw))
            return PolishTextResponse(polished_text="", error="Content could not be processed")

        polished = clean_polished_text(raw)

    return PolishTextResponse(polished_text=polished)

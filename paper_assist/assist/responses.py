"""Post-processing of raw model completions.

Small instruction-tuned models like to wrap answers in quotes, open with
"Sure!" or "Here's a summary:", or refuse outright. The pattern tables below
were tuned against that phrasing and are kept as data; bump
PATTERN_TABLE_VERSION whenever one of them changes.
"""

import logging
import re
from dataclasses import dataclass, field

from paper_assist.assist.prompts import VALID_CATEGORIES

logger = logging.getLogger(__name__)

PATTERN_TABLE_VERSION = "2024.2"

_I = re.IGNORECASE

POLISH_REFUSAL_PATTERNS = [
    re.compile(r"^I cannot create content", _I),
    re.compile(r"^I can't create content", _I),
    re.compile(r"^I cannot help with", _I),
    re.compile(r"^I can't help with", _I),
    re.compile(r"^I cannot assist with", _I),
    re.compile(r"^I'm not able to", _I),
    re.compile(r"^I am not able to", _I),
    re.compile(r"^This text could not be processed", _I),
    re.compile(r"^Sorry, (but )?I (cannot|can't)", _I),
    re.compile(r"^I apologize, (but )?I (cannot|can't)", _I),
    re.compile(r"Is there anything else I can help", _I),
]

POLISH_PREAMBLE_PATTERNS = [
    re.compile(
        r"^Here['’]?s (?:a |the )?(?:paragraph|text|polished text|expanded text|"
        r"combined paragraph|sample paragraph|sample|rewritten|revised|version)[:\s]*",
        _I,
    ),
    re.compile(
        r"^(?:The )?(?:paragraph|text|polished text|expanded text|rewritten text|"
        r"revised text) (?:is|reads|would be)[:\s]*",
        _I,
    ),
    re.compile(r"^Sure[,!]?\s*", _I),
    re.compile(r"^Sure thing[,!]?\s*", _I),
    re.compile(r"^Here you go[:\s]*", _I),
    re.compile(r"^Okay[,!]?\s*", _I),
    re.compile(r"^Of course[,!]?\s*", _I),
    re.compile(r"^Certainly[,!]?\s*", _I),
    re.compile(r"^Absolutely[,!]?\s*", _I),
    re.compile(
        r"^(?:I've |I have )?(?:polished|rewritten|revised|expanded|combined|created|written)[:\s]*",
        _I,
    ),
    re.compile(r"^(?:This|The following) (?:is|would be)[:\s]*", _I),
    re.compile(r"^(?:Based on|Using) (?:the |your )?(?:information|text|input)[,:\s]*", _I),
    re.compile(r"^Here (?:is|are) (?:a |the |your )?(?:polished|rewritten|revised|expanded)?[:\s]*", _I),
    re.compile(r"^(?:Polished|Rewritten|Revised|Expanded|Combined) (?:text|paragraph|version)[:\s]*", _I),
    re.compile(r"^(?:A |Here's a )?(?:sample|example) (?:paragraph|text|sentence)[:\s]*", _I),
    re.compile(r"^(?:Let me|I'll|I will) (?:help you |)(?:rewrite|polish|expand|combine)[:\s]*", _I),
]

CONCLUSION_PREAMBLE_PATTERNS = [
    re.compile(r"^Here['’]?s (?:a |the |your )?(?:conclusion|draft)[:\s]*", _I),
    re.compile(r"^(?:The |Your )?conclusion[:\s]*", _I),
    re.compile(r"^Sure[,!]?\s*", _I),
    re.compile(r"^Okay[,!]?\s*", _I),
]

SUMMARY_PREAMBLE_PATTERNS = [
    re.compile(r"^Here['’]?s (?:a |the )?summary[:\s]*", _I),
    re.compile(r"^Sure[,!]?\s*", _I),
]

SUMMARY_LEAD_INS = ("it sounds like", "so basically")
SUMMARY_DEFAULT_PREFIX = "So basically, "

# check-idea section parsing
_SUPPORTED_SECTION = re.compile(r"SUPPORTED BY[:\s]*\n?([\s\S]*?)(?=GAPS TO CONSIDER|\Z)", _I)
_GAPS_SECTION = re.compile(r"GAPS TO CONSIDER[:\s]*\n?([\s\S]*?)\Z", _I)
_BOOKMARK_REF = re.compile(r"\[(\d+)\]")
_EXPLANATION_END = re.compile(r"\n|\[")
_EXPLANATION_LEAD = re.compile(r"^[\s—\-:]+")
_GAPS_LEAD = re.compile(r"^[:\s-]+")
_LOOSE_SUGGESTION = re.compile(r"(?:suggestion|you might|tip|consider)[:\s]+([\s\S]+?)(?:\n\n|\Z)", _I)

NO_GAP_PHRASES = ("looks good!", "none")
NO_GAP_SUBSTRINGS = ("everything checks out",)

DEFAULT_EXPLANATION = "Relates to your idea"

NO_MATCH_GUIDANCE = """Your writing doesn't directly connect to any of your bookmarked research yet. Here's what you can do:

• Go back to the background guide and bookmark sections that relate to this idea
• Look for statistics, facts, or expert opinions that support your point
• Consider if you need to adjust your idea to match what the research actually says
• Make sure your claim uses specific evidence, not just general statements

Remember: Strong position papers tie every claim back to research!"""

WELL_SUPPORTED = "well-supported"
PARTIALLY_SUPPORTED = "partially-supported"
NOT_SUPPORTED = "not-supported"


# ── Generic cleanup ──────────────────────────────────────────────────


def strip_quotes(text: str) -> str:
    """Drop one pair of matching surrounding quotes; a lone quote is empty."""
    if text in ("'", '"'):
        return ""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"'):
        return text[1:-1].strip()
    return text


def strip_preambles(text: str, patterns: list[re.Pattern]) -> str:
    """Apply each pattern once, in order, to the front of the text."""
    for pattern in patterns:
        text = pattern.sub("", text, count=1)
    return text


# ── polish-text ──────────────────────────────────────────────────────


def is_refusal(raw: str) -> bool:
    """True if the completion is the model declining rather than rewriting."""
    stripped = raw.strip()
    return any(p.search(stripped) for p in POLISH_REFUSAL_PATTERNS)


def clean_polished_text(raw: str) -> str:
    text = strip_quotes(raw.strip())
    text = strip_preambles(text, POLISH_PREAMBLE_PATTERNS)
    return strip_quotes(text).strip()


# ── draft-conclusion ─────────────────────────────────────────────────


def clean_draft(raw: str) -> str:
    draft = strip_quotes(raw.strip())
    draft = strip_preambles(draft, CONCLUSION_PREAMBLE_PATTERNS)
    return strip_quotes(draft).strip()


# ── summarize-bookmarks ──────────────────────────────────────────────


def clean_summary(raw: str) -> str:
    """Strip artifacts and make sure the summary opens with a lead-in phrase."""
    summary = strip_quotes(raw.strip())
    summary = strip_preambles(summary, SUMMARY_PREAMBLE_PATTERNS).strip()
    if any(c.isalnum() for c in summary) and not summary.lower().startswith(SUMMARY_LEAD_INS):
        summary = SUMMARY_DEFAULT_PREFIX + summary[0].lower() + summary[1:]
    return summary


# ── classify-bookmark ────────────────────────────────────────────────


def parse_category(raw: str | None) -> tuple[str, float]:
    """Map a completion onto VALID_CATEGORIES and attach a fixed confidence.

    Never returns a label outside the enum: unknown output becomes "other".
    """
    category = (raw or "").strip().lower()
    category = category.replace('"', "").replace("'", "")
    category = re.sub(r"\.$", "", category).strip()

    if category not in VALID_CATEGORIES:
        found = None
        if category:
            found = next(
                (c for c in VALID_CATEGORIES if c in category or category in c),
                None,
            )
        if found is None:
            logger.info("Unrecognized category %r, falling back to 'other'", raw)
        category = found or "other"

    return category, 0.3 if category == "other" else 0.7


# ── check-idea ───────────────────────────────────────────────────────


@dataclass
class BookmarkMatch:
    """A bookmark the model cited, with the reason it gave."""

    bookmark: dict
    explanation: str


@dataclass
class IdeaCheckResult:
    """Parsed check-idea completion."""

    matching_bookmarks: list[BookmarkMatch] = field(default_factory=list)
    suggestions: str = ""
    support_level: str = NOT_SUPPORTED


def _is_no_gap(gaps: str) -> bool:
    lower = gaps.lower()
    return lower in NO_GAP_PHRASES or any(s in lower for s in NO_GAP_SUBSTRINGS)


def support_level(match_count: int, has_gaps: bool) -> str:
    if match_count >= 2 and not has_gaps:
        return WELL_SUPPORTED
    if match_count >= 1:
        return PARTIALLY_SUPPORTED
    return NOT_SUPPORTED


def parse_idea_check(raw: str | None, bookmarks: list[dict]) -> IdeaCheckResult:
    """Extract cited bookmarks, gaps and a support level from a completion.

    Bookmark references are 1-based ``[n]`` tags in the SUPPORTED BY section
    (the whole completion when that header is missing). Out-of-range and
    repeated references are ignored.
    """
    result = IdeaCheckResult()
    if not raw:
        return result

    supported = _SUPPORTED_SECTION.search(raw)
    gaps_match = _GAPS_SECTION.search(raw)
    section = supported.group(1) if supported else raw

    seen: set[int] = set()
    for ref in _BOOKMARK_REF.finditer(section):
        index = int(ref.group(1)) - 1
        if index < 0 or index >= len(bookmarks) or index in seen:
            continue
        seen.add(index)

        after = section[ref.end():]
        explanation = _EXPLANATION_END.split(after, maxsplit=1)[0]
        explanation = _EXPLANATION_LEAD.sub("", explanation).strip()[:200]
        result.matching_bookmarks.append(
            BookmarkMatch(bookmark=bookmarks[index], explanation=explanation or DEFAULT_EXPLANATION)
        )

    has_gaps = False
    if gaps_match:
        gaps = _GAPS_LEAD.sub("", gaps_match.group(1).strip()).strip()
        if gaps and not _is_no_gap(gaps):
            result.suggestions = gaps[:400]
            has_gaps = True
    else:
        # Model ignored the output format; look for advice phrased loosely
        loose = _LOOSE_SUGGESTION.search(raw)
        if loose:
            result.suggestions = loose.group(1).strip()[:300]
            has_gaps = True

    result.support_level = support_level(len(result.matching_bookmarks), has_gaps)
    return result

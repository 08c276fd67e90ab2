"""Input sanitization for text that gets interpolated into LLM prompts.

Two helpers:
  - sanitize_input strips chat-template control markers and bounds length
  - detects_injection_attempt flags text trying to override the prompt rules
"""

import re

DEFAULT_MAX_LENGTH = 10_000

# Chat-template markers used by Llama-family models. Removing them keeps user
# text from opening its own instruction block inside our prompt.
_CONTROL_MARKERS = [
    re.compile(r"\[INST\]", re.IGNORECASE),
    re.compile(r"\[/INST\]", re.IGNORECASE),
    re.compile(r"<\|.*?\|>"),
    re.compile(r"<<SYS>>", re.IGNORECASE),
    re.compile(r"<</SYS>>", re.IGNORECASE),
]

INJECTION_PATTERNS = [
    re.compile(r"ignore\s+(all\s+)?(previous|prior|above)\s+instructions", re.IGNORECASE),
    re.compile(r"disregard\s+(all\s+)?(previous|prior|above)\s+instructions", re.IGNORECASE),
    re.compile(r"forget\s+(all\s+)?(previous|prior|above)\s+instructions", re.IGNORECASE),
    re.compile(r"new\s+instructions?:", re.IGNORECASE),
    re.compile(r"you\s+are\s+now\s+a", re.IGNORECASE),
    re.compile(r"pretend\s+(you\s+are|to\s+be)", re.IGNORECASE),
    re.compile(r"act\s+as\s+(if|a)", re.IGNORECASE),
    re.compile(r"from\s+now\s+on,?\s+you", re.IGNORECASE),
    re.compile(r"instead,?\s+(please\s+)?give\s+me", re.IGNORECASE),
    re.compile(r"actually,?\s+(please\s+)?(just\s+)?give\s+me", re.IGNORECASE),
    re.compile(r"do\s+not\s+follow\s+the\s+(above|previous)", re.IGNORECASE),
    re.compile(r"override\s+(the\s+)?(system|instructions)", re.IGNORECASE),
    re.compile(r"system\s*prompt", re.IGNORECASE),
    re.compile(r"jailbreak", re.IGNORECASE),
    re.compile(r"dan\s+mode", re.IGNORECASE),
]


def sanitize_input(text: str | None, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Trim, strip control markers, and truncate to at most max_length chars."""
    cleaned = (text or "").strip()
    for pattern in _CONTROL_MARKERS:
        cleaned = pattern.sub("", cleaned)
    return cleaned[: max(max_length, 0)]


def detects_injection_attempt(text: str | None) -> bool:
    """Return True if the text looks like an attempt to override the prompt."""
    if not text:
        return False
    return any(pattern.search(text) for pattern in INJECTION_PATTERNS)

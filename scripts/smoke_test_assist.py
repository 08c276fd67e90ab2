"""Smoke test for the writer helpers against a live LLM backend.

Usage:
    python scripts/smoke_test_assist.py                        # backend from .env
    python scripts/smoke_test_assist.py --backend groq         # override backend
    python scripts/smoke_test_assist.py --backend-only         # only ping the backend
    python scripts/smoke_test_assist.py --only classify        # run one helper
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from paper_assist.assist.prompts import (
    build_check_idea_prompt,
    build_classify_prompt,
    build_conclusion_prompt,
    build_polish_prompt,
    build_summary_prompt,
)
from paper_assist.assist.responses import (
    clean_draft,
    clean_polished_text,
    clean_summary,
    is_refusal,
    parse_category,
    parse_idea_check,
)
from paper_assist.config import get_config
from paper_assist.generation.llm_client import LLMClient, build_backend

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

CONTEXT = {"country": "Kenya", "committee": "UNEP", "topic": "Plastic pollution in oceans"}

BOOKMARKS = [
    {
        "content": "About 11 million metric tons of plastic enter the ocean every year.",
        "category": "key_statistics",
    },
    {
        "content": "Kenya banned single-use plastic bags in 2017 with fines up to $40,000.",
        "category": "past_positions",
    },
    {
        "content": "UNEA resolution 5/14 started negotiations on a global plastics treaty.",
        "category": "un_actions",
    },
]


def banner(title: str) -> None:
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def run_classify(client: LLMClient) -> None:
    banner("CLASSIFY BOOKMARK")
    raw = client.call_llm(build_classify_prompt(BOOKMARKS[0]["content"]), max_tokens=50)
    print(f"Raw:    {raw!r}")
    print(f"Parsed: {parse_category(raw)}")


def run_summary(client: LLMClient) -> None:
    banner("SUMMARIZE BOOKMARKS")
    raw = client.call_llm(build_summary_prompt(BOOKMARKS, CONTEXT), max_tokens=200)
    print(f"Raw:     {raw!r}")
    print(f"Summary: {clean_summary(raw or '')}")


def run_check_idea(client: LLMClient) -> None:
    banner("CHECK IDEA")
    idea = "Kenya has already shown that national plastic bans can work."
    raw = client.call_llm(build_check_idea_prompt(idea, BOOKMARKS), max_tokens=400)
    print(f"Raw:\n{raw}")
    parsed = parse_idea_check(raw, BOOKMARKS)
    print(f"\nSupport level: {parsed.support_level}")
    for match in parsed.matching_bookmarks:
        print(f"  - {match.bookmark['content'][:50]}... -> {match.explanation}")
    print(f"Suggestions: {parsed.suggestions}")


def run_polish(client: LLMClient) -> None:
    banner("POLISH TEXT")
    text = "- plastic bad for fish\n- kenya banned bags\n- need global treaty"
    prompt = build_polish_prompt(text, CONTEXT, "bullets-to-paragraph", target_layer="ideaFormation")
    raw = client.call_llm(prompt, max_tokens=500)
    print(f"Raw:      {raw!r}")
    if raw and is_refusal(raw):
        print("Model refused.")
    else:
        print(f"Polished: {clean_polished_text(raw or '')}")


def run_conclusion(client: LLMClient) -> None:
    banner("DRAFT CONCLUSION")
    sections = {
        "backgroundFacts": "11 million tons of plastic reach the ocean each year.",
        "positionStatement": "Kenya believes every country must cut single-use plastic.",
        "solutionProposal": "A binding treaty with funding for waste systems in developing nations.",
    }
    raw = client.call_llm(build_conclusion_prompt(sections, CONTEXT), max_tokens=250)
    print(f"Raw:   {raw!r}")
    print(f"Draft: {clean_draft(raw or '')}")


HELPERS = {
    "classify": run_classify,
    "summary": run_summary,
    "check-idea": run_check_idea,
    "polish": run_polish,
    "conclusion": run_conclusion,
}


def main():
    parser = argparse.ArgumentParser(description="Smoke test for the writer helpers")
    parser.add_argument("--backend", choices=["openai", "groq", "ollama"], help="Override LLM_BACKEND")
    parser.add_argument("--backend-only", action="store_true", help="Only check the LLM backend")
    parser.add_argument("--only", choices=sorted(HELPERS), help="Run a single helper")
    args = parser.parse_args()

    config = get_config()
    if args.backend:
        config.llm_backend = args.backend

    backend = build_backend(config)
    if backend is None:
        print(f"ERROR: LLM_BACKEND={config.llm_backend} is not configured (check .env)")
        sys.exit(1)

    banner(f"BACKEND — {backend.backend_name} ({backend.model})")
    available = backend.is_available()
    print(f"Available: {available}")
    if not available:
        sys.exit(1)
    if args.backend_only:
        return

    client = LLMClient(backend, temperature=config.llm_temperature)
    helpers = [HELPERS[args.only]] if args.only else HELPERS.values()
    for helper in helpers:
        helper(client)


if __name__ == "__main__":
    main()

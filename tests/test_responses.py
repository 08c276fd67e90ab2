"""Tests for completion post-processing."""

import pytest

from paper_assist.assist.responses import (
    DEFAULT_EXPLANATION,
    NOT_SUPPORTED,
    PARTIALLY_SUPPORTED,
    WELL_SUPPORTED,
    clean_draft,
    clean_polished_text,
    clean_summary,
    is_refusal,
    parse_category,
    parse_idea_check,
    strip_quotes,
    support_level,
)


class TestStripQuotes:
    def test_removes_matching_pair(self):
        assert strip_quotes('"hello"') == "hello"
        assert strip_quotes("'hello'") == "hello"

    def test_keeps_mismatched_quotes(self):
        assert strip_quotes("\"hello'") == "\"hello'"

    def test_single_quote_char_is_empty(self):
        assert strip_quotes('"') == ""
        assert strip_quotes("'") == ""


# ── polish-text ──────────────────────────────────────────────────────


class TestPolishCleanup:
    @pytest.mark.parametrize(
        "raw",
        [
            "I cannot help with that request.",
            "I'm not able to rewrite this.",
            "Sorry, but I can't do that.",
            "This text could not be processed.",
            "Here is the text. Is there anything else I can help with?",
        ],
    )
    def test_detects_refusals(self, raw):
        assert is_refusal(raw) is True

    def test_ordinary_text_is_not_refusal(self):
        assert is_refusal("Kenya supports a global plastics treaty.") is False

    def test_strips_wrapping_quotes_and_filler(self):
        assert clean_polished_text('"Sure, Kenya wants a treaty."') == "Kenya wants a treaty."

    def test_strips_here_is_preamble(self):
        raw = "Here's the polished text: Kenya wants a treaty."
        assert clean_polished_text(raw) == "Kenya wants a treaty."

    def test_handles_typographic_apostrophe(self):
        assert clean_polished_text("Here’s the text: We need action.") == "We need action."

    def test_leaves_clean_text_alone(self):
        text = "Plastic waste threatens Kenya's fisheries."
        assert clean_polished_text(text) == text


# ── draft-conclusion ─────────────────────────────────────────────────


class TestDraftCleanup:
    def test_strips_conclusion_preamble(self):
        raw = "Here's your conclusion: In conclusion, Kenya will lead."
        assert clean_draft(raw) == "In conclusion, Kenya will lead."

    def test_strips_quotes(self):
        assert clean_draft('  "Kenya will lead."  ') == "Kenya will lead."


# ── summarize-bookmarks ──────────────────────────────────────────────


class TestSummaryCleanup:
    def test_adds_lead_in(self):
        assert clean_summary("Plastic is bad for fish.") == "So basically, plastic is bad for fish."

    def test_strips_preamble_before_lead_in(self):
        raw = "Here's a summary: Plastic is bad."
        assert clean_summary(raw) == "So basically, plastic is bad."

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ('"It sounds like fish are in trouble."', "It sounds like fish are in trouble."),
            ("so basically, bags got banned.", "so basically, bags got banned."),
        ],
    )
    def test_keeps_existing_lead_in(self, raw, expected):
        assert clean_summary(raw) == expected

    def test_empty_stays_empty(self):
        assert clean_summary("   ") == ""

    @pytest.mark.parametrize("raw", ['"', "'", "..."])
    def test_no_lead_in_without_words(self, raw):
        assert not clean_summary(raw).startswith("So basically")


# ── classify-bookmark ────────────────────────────────────────────────


class TestParseCategory:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("key_statistics.", "key_statistics"),
            ("Key_Statistics", "key_statistics"),
            ('"timeline"', "timeline"),
            ("  allies\n", "allies"),
        ],
    )
    def test_exact_categories(self, raw, expected):
        assert parse_category(raw) == (expected, 0.7)

    def test_partial_match(self):
        assert parse_category("The category is power_dynamics") == ("power_dynamics", 0.7)

    @pytest.mark.parametrize("raw", ["banana", "", None, "other"])
    def test_unknown_becomes_other(self, raw):
        assert parse_category(raw) == ("other", 0.3)


# ── check-idea ───────────────────────────────────────────────────────


class TestSupportLevel:
    @pytest.mark.parametrize(
        "count, has_gaps, expected",
        [
            (0, False, NOT_SUPPORTED),
            (0, True, NOT_SUPPORTED),
            (1, False, PARTIALLY_SUPPORTED),
            (1, True, PARTIALLY_SUPPORTED),
            (2, True, PARTIALLY_SUPPORTED),
            (2, False, WELL_SUPPORTED),
            (5, False, WELL_SUPPORTED),
        ],
    )
    def test_levels(self, count, has_gaps, expected):
        assert support_level(count, has_gaps) == expected


class TestParseIdeaCheck:
    def test_two_matches_and_no_gaps_is_well_supported(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[1] explanation\n[3] other\nGAPS TO CONSIDER:\nLooks good!"
        result = parse_idea_check(raw, sample_bookmarks)
        assert [m.bookmark["id"] for m in result.matching_bookmarks] == ["bm-1", "bm-3"]
        assert [m.explanation for m in result.matching_bookmarks] == ["explanation", "other"]
        assert result.suggestions == ""
        assert result.support_level == WELL_SUPPORTED

    def test_gaps_make_it_partial(self, sample_bookmarks):
        raw = (
            "SUPPORTED BY:\n[1] shows scale\n[2] shows Kenya acted\n"
            "GAPS TO CONSIDER:\nYou have no data on fishing jobs."
        )
        result = parse_idea_check(raw, sample_bookmarks)
        assert len(result.matching_bookmarks) == 2
        assert result.suggestions == "You have no data on fishing jobs."
        assert result.support_level == PARTIALLY_SUPPORTED

    def test_out_of_range_and_repeated_refs_ignored(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[0] zero\n[2] yes\n[7] nope\n[2] again\nGAPS TO CONSIDER:\nNone"
        result = parse_idea_check(raw, sample_bookmarks)
        assert [m.bookmark["id"] for m in result.matching_bookmarks] == ["bm-2"]
        assert result.support_level == PARTIALLY_SUPPORTED

    def test_refs_bounded_by_given_bookmarks(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[3] third\nGAPS TO CONSIDER:\nLooks good!"
        result = parse_idea_check(raw, sample_bookmarks[:2])
        assert result.matching_bookmarks == []
        assert result.support_level == NOT_SUPPORTED

    def test_explanation_lead_punctuation_stripped(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[1] — shows scale\n[2]: Kenya acted\n"
        result = parse_idea_check(raw, sample_bookmarks)
        assert [m.explanation for m in result.matching_bookmarks] == ["shows scale", "Kenya acted"]

    def test_default_explanation(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[1][2]\nGAPS TO CONSIDER:\nEverything checks out."
        result = parse_idea_check(raw, sample_bookmarks)
        assert result.matching_bookmarks[0].explanation == DEFAULT_EXPLANATION
        assert result.support_level == WELL_SUPPORTED

    def test_explanation_truncated(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[1] " + "e" * 500 + "\nGAPS TO CONSIDER:\nNone"
        result = parse_idea_check(raw, sample_bookmarks)
        assert len(result.matching_bookmarks[0].explanation) == 200

    def test_suggestions_truncated(self, sample_bookmarks):
        raw = "SUPPORTED BY:\n[1] ok\nGAPS TO CONSIDER:\n" + "g" * 900
        result = parse_idea_check(raw, sample_bookmarks)
        assert len(result.suggestions) == 400

    def test_no_matches_with_gaps(self, sample_bookmarks):
        raw = (
            "SUPPORTED BY:\nNone of your bookmarks directly support this.\n"
            "GAPS TO CONSIDER:\nFind data on ocean plastic."
        )
        result = parse_idea_check(raw, sample_bookmarks)
        assert result.matching_bookmarks == []
        assert result.suggestions == "Find data on ocean plastic."
        assert result.support_level == NOT_SUPPORTED

    def test_unformatted_completion_uses_loose_advice(self, sample_bookmarks):
        raw = "I think [2] fits. Consider: adding data about fish."
        result = parse_idea_check(raw, sample_bookmarks)
        assert [m.bookmark["id"] for m in result.matching_bookmarks] == ["bm-2"]
        assert result.suggestions == "adding data about fish."
        assert result.support_level == PARTIALLY_SUPPORTED

    @pytest.mark.parametrize("raw", [None, ""])
    def test_empty_completion(self, raw, sample_bookmarks):
        result = parse_idea_check(raw, sample_bookmarks)
        assert result.matching_bookmarks == []
        assert result.suggestions == ""
        assert result.support_level == NOT_SUPPORTED

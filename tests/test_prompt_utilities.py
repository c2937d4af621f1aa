"""Unit tests for prompt assembly, keyword extraction and the location screen."""

import pytest

from legal_intake.api.prompt_utilities import (
    FALLBACK_MESSAGES,
    INTAKE_INSTRUCTIONS,
    QA_INSTRUCTIONS,
    build_system_prompt,
    extract_keywords,
    is_within_jurisdiction,
    localized,
)

KNOWLEDGE = [{
    "title": "Tenant deposits",
    "content": "A deposit must be returned at the end of the lease.",
    "category": "Real Estate",
    "law_reference": "Civil Code",
    "article_number": "590",
}]
CATEGORIES = [{"name": "Real Estate", "display_name": "Immobilien", "description": None}]


class TestLocalized:

    def test_known_language(self):
        assert localized(FALLBACK_MESSAGES, "ar") == FALLBACK_MESSAGES["ar"]

    def test_unknown_language_falls_back_to_english(self):
        assert localized(FALLBACK_MESSAGES, "fr") == FALLBACK_MESSAGES["en"]


class TestExtractKeywords:

    def test_lowercases_and_skips_short_words(self):
        assert extract_keywords("My Landlord kept the deposit") == ["landlord", "kept", "deposit"]

    def test_deduplicates_and_caps(self):
        message = "contract contract lease lease tenant owner rental agreement"
        assert extract_keywords(message) == ["contract", "lease", "tenant", "owner", "rental"]

    def test_skips_numbers(self):
        assert extract_keywords("Since 2019 unpaid") == ["since", "unpaid"]

    def test_arabic_words(self):
        assert extract_keywords("طلاق زوجتي") == ["طلاق", "زوجتي"]

    def test_empty(self):
        assert extract_keywords("") == []


class TestBuildSystemPrompt:

    def test_intake_has_knowledge_and_categories(self):
        prompt = build_system_prompt("intake", "en", KNOWLEDGE, CATEGORIES)

        assert prompt.startswith(INTAKE_INSTRUCTIONS["en"])
        assert "RELEVANT LEGAL KNOWLEDGE:\n- Tenant deposits (Civil Code art. 590)" in prompt
        assert "AVAILABLE CASE CATEGORIES:\nImmobilien" in prompt
        assert "CASE CONTEXT:" not in prompt

    def test_qa_has_no_categories(self):
        prompt = build_system_prompt("qa", "de", KNOWLEDGE, CATEGORIES)

        assert prompt.startswith(QA_INSTRUCTIONS["de"])
        assert "AVAILABLE CASE CATEGORIES:" not in prompt

    def test_qa_lawyer_includes_case_context(self):
        context = {"case_number": "LC-1", "category": "Real Estate", "urgency": "low",
                   "description": "Deposit withheld", "ai_summary": "Tenant seeks deposit."}

        prompt = build_system_prompt("qa_lawyer", "en", [], case_context=context)

        assert "CASE CONTEXT:" in prompt
        assert "Description: Deposit withheld" in prompt
        assert "Summary: Tenant seeks deposit." in prompt

    def test_empty_knowledge_renders_empty_section(self):
        prompt = build_system_prompt("qa", "en", [])

        assert prompt.endswith("RELEVANT LEGAL KNOWLEDGE:\n")


class TestJurisdiction:

    @pytest.mark.parametrize("location", [
        None,
        "",
        "Cairo",
        "Alexandria, Egypt",
        "القاهرة",
        "Kairo, Ägypten",
        "Somewhere unspecified",
        "Romania",
    ])
    def test_accepted(self, location):
        assert is_within_jurisdiction(location) is True

    @pytest.mark.parametrize("location", [
        "Kuwait City, Kuwait",
        "Dubai, UAE",
        "Riyadh, Saudi Arabia",
        "Berlin, Deutschland",
        "الكويت",
        "Muscat, Oman",
    ])
    def test_declined(self, location):
        assert is_within_jurisdiction(location) is False

    def test_served_location_wins_over_foreign_mention(self):
        assert is_within_jurisdiction("Cairo, Egypt (employer based in Dubai)") is True

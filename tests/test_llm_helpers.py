"""Unit tests for LLM output parsing and the pipeline helpers."""

import json

import pytest

from conftest import FakeChatModel, SAMPLE_EXTRACTION, api_status_error
from legal_intake.api.llm_pipeline import (
    IntakePipeline,
    case_fields_from_extraction,
    case_update_fields,
    parse_extraction,
)
from legal_intake.api.models import CaseExtraction, ConversationSummary, NoExtraction
from legal_intake.api.utils import lc_text_from_content, parse_llm_json


class TestParseLlmJson:

    def test_plain_object(self):
        assert parse_llm_json('{"summary": "ok"}') == {"summary": "ok"}

    def test_strips_code_fences(self):
        assert parse_llm_json('```json\n{"summary": "ok"}\n```') == {"summary": "ok"}

    def test_repairs_trailing_comma(self):
        assert parse_llm_json('{"summary": "ok", "goals": ["refund",],}') == {"summary": "ok", "goals": ["refund"]}

    def test_rejects_non_object(self):
        with pytest.raises(ValueError):
            parse_llm_json('["a", "b"]')


class TestLcTextFromContent:

    def test_parts(self):
        content = [{"type": "text", "text": "Hello "}, {"type": "image_url"}, {"type": "text", "text": "there"}]
        assert lc_text_from_content(content) == "Hello there"

    def test_none(self):
        assert lc_text_from_content(None) == ""


class TestParseExtraction:

    def test_no_function_call(self):
        assert parse_extraction(None) == NoExtraction()

    def test_other_function(self):
        result = parse_extraction({"name": "something_else", "arguments": "{}"})
        assert isinstance(result, NoExtraction)
        assert "something_else" in result.reason

    def test_valid_arguments(self):
        result = parse_extraction({"name": "extract_case_data", "arguments": json.dumps(SAMPLE_EXTRACTION)})

        assert isinstance(result, CaseExtraction)
        assert result.entities.location == "Cairo, Egypt"
        assert result.legalClassification.applicableLaws == ["Labour Law 12/2003"]

    def test_legacy_personal_details_name(self):
        result = parse_extraction({
            "name": "extract_case_data",
            "arguments": '{"category": "Criminal Law", "urgency": "low", "summary": "s", "personalDetailsNeeded": true}',
        })

        assert isinstance(result, CaseExtraction)
        assert result.needsPersonalDetails is True

    def test_schema_mismatch(self):
        result = parse_extraction({"name": "extract_case_data", "arguments": '{"category": "X", "urgency": "tomorrow", "summary": "s"}'})

        assert isinstance(result, NoExtraction)
        assert result.reason.startswith("arguments do not match schema")

    def test_missing_required_field(self):
        result = parse_extraction({"name": "extract_case_data", "arguments": '{"category": "X", "urgency": "low"}'})

        assert isinstance(result, NoExtraction)


class TestCaseFields:

    def test_new_case_fields(self):
        extraction = CaseExtraction.model_validate(SAMPLE_EXTRACTION)
        fields = case_fields_from_extraction(extraction, "ar", ConversationSummary(summary="s"))

        assert fields["title"] == "Employment Law"
        assert fields["language"] == "ar"
        assert fields["legal_analysis"]["classification"]["area"] == "Labour"
        assert fields["legal_analysis"]["readyForNextStep"] is False
        assert fields["client_responses_summary"]["summary"] == "s"

    def test_update_keeps_title_and_language(self):
        fields = {"title": "t", "language": "en", "category": "c", "urgency": "low"}

        assert case_update_fields(fields) == {"category": "c", "urgency": "low"}


class TestClientSummary:

    def _pipeline(self, *responses):
        model = FakeChatModel(responses=list(responses))
        return IntakePipeline(lambda **overrides: model), model

    def test_structured_summary(self):
        pipeline, _ = self._pipeline(
            '{"summary": "Dismissed", "timeline": [{"date": "2024-03-01", "event": "dismissal"}], "parties": ["ACME"]}'
        )

        summary = pipeline.generate_client_summary(["I was dismissed"], "en")

        assert summary.summary == "Dismissed"
        assert summary.timeline == [{"date": "2024-03-01", "event": "dismissal"}]
        assert summary.parties == ["ACME"]

    def test_unparseable_output_kept_as_raw_text(self):
        pipeline, _ = self._pipeline("The client was dismissed.")

        summary = pipeline.generate_client_summary(["I was dismissed"], "en")

        assert summary.summary == "The client was dismissed."
        assert summary.keyPoints == []
        assert summary.goals == []

    def test_upstream_error_yields_empty_summary(self):
        pipeline, _ = self._pipeline(api_status_error())

        assert pipeline.generate_client_summary(["I was dismissed"], "en") == ConversationSummary()

    def test_prompt_names_the_language(self):
        pipeline, model = self._pipeline('{"summary": "s"}')

        pipeline.generate_client_summary(["first", "second"], "de")

        prompt = model.calls[0]["messages"][0].content
        assert "German" in prompt
        assert "first\n\nsecond" in prompt

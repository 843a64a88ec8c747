"""
Unit tests for trendscope/ai/base_provider.py

Tests reply parsing and the LLMReasoner prompting contract with a fake
completion function.
"""

import json

import pytest

from trendscope.ai.base_provider import LLMReasoner, parse_items, strip_code_fences
from trendscope.ai.prompts import FALLBACK_SUMMARY
from trendscope.core.errors import ReasonerError
from trendscope.models.trend_models import Effort, Impact, SuggestionType
from tests.fixtures import make_candidate, make_signal, make_suggestion, make_trend


class FakeReasoner(LLMReasoner):
    name = "fake"

    def __init__(self, reply="", available=True, error=None):
        self.reply = reply
        self.available = available
        self.error = error
        self.calls = []

    def is_available(self) -> bool:
        return self.available

    async def _complete(self, system_prompt, user_prompt, temperature, max_tokens, json_output):
        self.calls.append(
            {
                "system": system_prompt,
                "user": user_prompt,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "json": json_output,
            }
        )
        if self.error:
            raise self.error
        return self.reply


class TestParsing:
    def test_strip_code_fences(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'

    def test_wrapped_list(self):
        assert parse_items('{"trends": [{"title": "A"}]}', "trends") == [{"title": "A"}]

    def test_bare_list(self):
        assert parse_items('[{"title": "A"}]', "trends") == [{"title": "A"}]

    def test_single_object(self):
        assert parse_items('{"title": "A"}', "trends") == [{"title": "A"}]

    def test_empty_object(self):
        assert parse_items("{}", "trends") == []

    def test_invalid_json(self):
        with pytest.raises(ReasonerError, match="Unparseable trends response"):
            parse_items("not json", "trends")

    def test_wrong_shape(self):
        with pytest.raises(ReasonerError):
            parse_items('{"trends": "none"}', "trends")


class TestExtractTrends:
    @pytest.mark.asyncio
    async def test_maps_camel_case_fields(self):
        reply = json.dumps(
            {
                "trends": [
                    {
                        "title": "Quiet Luxury",
                        "description": "Logo-free staples.",
                        "category": "fashion",
                        "confidence": 88.6,
                        "trendScore": 140,
                        "changePercentage": 35,
                        "impact": "HIGH",
                    },
                    {"description": "missing title"},
                ]
            }
        )
        reasoner = FakeReasoner(reply)
        trends = await reasoner.extract_trends([make_signal()])

        assert len(trends) == 1
        assert trends[0].confidence == 89
        assert trends[0].trend_score == 100
        assert trends[0].change_percentage == 35
        assert trends[0].impact == Impact.HIGH
        call = reasoner.calls[0]
        assert call["json"] is True
        assert "Thrift haul" in call["user"]
        assert "confidence > 70" in call["user"]

    @pytest.mark.asyncio
    async def test_unavailable_provider_raises(self):
        with pytest.raises(ReasonerError, match="not configured"):
            await FakeReasoner(available=False).extract_trends([make_signal()])

    @pytest.mark.asyncio
    async def test_client_errors_are_wrapped(self):
        reasoner = FakeReasoner(error=RuntimeError("boom"))
        with pytest.raises(ReasonerError, match="Failed to generate trend analysis with AI: boom"):
            await reasoner.extract_trends([make_signal()])


class TestGenerateSuggestions:
    @pytest.mark.asyncio
    async def test_normalizes_enums(self):
        reply = '```json\n{"suggestions": [{"title": "Capsule drop", "description": "Limited run", "impact": "High", "effort": "LOW", "type": "Quick-Win"}]}\n```'
        reasoner = FakeReasoner(reply)
        suggestions = await reasoner.generate_suggestions([make_candidate()])

        assert suggestions[0].impact == Impact.HIGH
        assert suggestions[0].effort == Effort.LOW
        assert suggestions[0].type == SuggestionType.QUICK_WIN
        assert reasoner.calls[0]["temperature"] == 0.8
        assert "Quiet Luxury" in reasoner.calls[0]["user"]

    @pytest.mark.asyncio
    async def test_invalid_type_skipped(self):
        reply = '{"suggestions": [{"title": "Odd", "type": "viral-stunt"}, {"title": "Fine"}]}'
        suggestions = await FakeReasoner(reply).generate_suggestions([make_candidate()])
        assert [s.title for s in suggestions] == ["Fine"]


class TestSummarize:
    @pytest.mark.asyncio
    async def test_plain_text(self):
        reasoner = FakeReasoner("  Quiet luxury leads.  ")
        summary = await reasoner.summarize([make_trend()], [make_suggestion()])

        assert summary == "Quiet luxury leads."
        assert reasoner.calls[0]["json"] is False

    @pytest.mark.asyncio
    async def test_empty_reply_falls_back(self):
        summary = await FakeReasoner("").summarize([make_trend()], [])
        assert summary == FALLBACK_SUMMARY

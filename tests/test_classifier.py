"""
Tests for prompt construction, completion handling and analysis parsing.
"""

import json

import httpx
import pytest

from conftest import DEFAULT_ANALYSIS, completion
from office_mood.classifier import (
    EXCERPT_LENGTH,
    SYSTEM_PROMPT,
    MoodClassifier,
    OpenAIClient,
    build_prompt,
    parse_analysis,
)
from office_mood.emoji import EmojiDirectory
from office_mood.errors import (
    AnalysisValidationError,
    EmptyContentError,
    ResponseParseError,
    UpstreamAPIError,
)
from office_mood.slack import SlackClient


class TestBuildPrompt:
    def test_lists_messages_in_order(self):
        prompt = build_prompt(["first message", "first message", "second message"])

        assert prompt.startswith("Return JSON ONLY with:")
        assert prompt.endswith("- first message\n- first message\n- second message")

    def test_describes_recency_tiers(self):
        prompt = build_prompt([], recent_hours=1, medium_hours=6, lookback_hours=24)

        assert "appear 3 times are from the last 1 hour(s)" in prompt
        assert "appear 2 times are from the last 6 hours" in prompt
        assert "All messages are from the last 24 hours only." in prompt

    def test_empty_message_list(self):
        prompt = build_prompt([])
        assert prompt.endswith(
            "Analyze these Slack messages (with recency weighting applied):"
        )

    def test_braces_in_messages_are_literal(self):
        prompt = build_prompt(["config is {broken}"])
        assert prompt.endswith("- config is {broken}")


class TestParseAnalysis:
    def test_valid(self):
        analysis = parse_analysis(json.dumps(DEFAULT_ANALYSIS))
        assert analysis.mood_label == "Good"
        assert analysis.mood_score == 65

    def test_optional_fields_default(self):
        analysis = parse_analysis('{"mood_score": 50, "mood_label": "Neutral"}')
        assert analysis.summary == ""
        assert analysis.top_emojis == []

    @pytest.mark.parametrize("content", [None, ""])
    def test_no_content(self, content):
        with pytest.raises(EmptyContentError, match="OpenAI returned no content"):
            parse_analysis(content)

    def test_invalid_json_reports_truncated_excerpt(self):
        content = "not json " + "x" * 1000

        with pytest.raises(ResponseParseError) as exc_info:
            parse_analysis(content)

        assert exc_info.value.excerpt == content[:EXCERPT_LENGTH]
        assert len(str(exc_info.value)) < len(content)

    @pytest.mark.parametrize(
        "payload",
        [
            {"mood_label": "Good"},
            {"mood_score": 50},
            {"mood_score": 50, "mood_label": "Ecstatic"},
            {"mood_score": "high", "mood_label": "Good"},
            ["not", "an", "object"],
        ],
    )
    def test_invalid_shape(self, payload):
        with pytest.raises(AnalysisValidationError):
            parse_analysis(json.dumps(payload))

    def test_out_of_range_score_passes_through(self):
        # Scores are not clamped to 0-100.
        analysis = parse_analysis('{"mood_score": 140, "mood_label": "Vibes"}')
        assert analysis.mood_score == 140


class TestOpenAIClient:
    def setup_method(self):
        self.requests: list[httpx.Request] = []
        self.body: dict = completion(DEFAULT_ANALYSIS)
        self.status = 200

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, json=self.body)

    async def _complete(self) -> str | None:
        transport = httpx.MockTransport(self._handler)
        async with httpx.AsyncClient(transport=transport) as http:
            client = OpenAIClient(http, "sk-test")
            return await client.complete_json(SYSTEM_PROMPT, "user prompt")

    async def test_request_payload(self):
        content = await self._complete()

        assert json.loads(content) == DEFAULT_ANALYSIS
        request = self.requests[0]
        assert request.url == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        payload = json.loads(request.content)
        assert payload["model"] == "gpt-4o-mini"
        assert payload["temperature"] == 0.2
        assert payload["response_format"] == {"type": "json_object"}
        assert [m["role"] for m in payload["messages"]] == ["system", "user"]
        assert payload["messages"][1]["content"] == "user prompt"

    async def test_api_error(self):
        self.status = 429
        self.body = {"error": {"message": "rate limited", "type": "rate_limit"}}

        with pytest.raises(UpstreamAPIError, match="^OpenAI API error: rate limited$"):
            await self._complete()

    async def test_api_error_without_message(self):
        self.body = {"error": {"code": "boom"}}

        expected = 'OpenAI API error: {"code": "boom"}'
        with pytest.raises(UpstreamAPIError, match=expected):
            await self._complete()

    async def test_no_choices(self):
        self.body = {"choices": []}
        assert await self._complete() is None


class TestMoodClassifier:
    async def test_classify_translates_emojis(self, upstream):
        upstream.emoji_response = {
            "ok": True,
            "emoji": {"shipit": "https://img/shipit.png"},
        }
        upstream.completion_response = completion(
            {**DEFAULT_ANALYSIS, "top_emojis": [":tada:", ":shipit:", ":unknown:"]}
        )

        async with httpx.AsyncClient(transport=upstream.transport) as http:
            classifier = MoodClassifier(
                OpenAIClient(http, "sk-test"),
                EmojiDirectory(),
                SlackClient(http, "xoxb-test"),
            )
            analysis = await classifier.classify(["we shipped :tada:"])

        assert analysis.top_emojis == ["🎊", ":shipit:", ":unknown:"]
        assert upstream.last_prompt().endswith("- we shipped :tada:")

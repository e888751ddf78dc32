"""
Shared fixtures: a fake Slack + OpenAI upstream served through
``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from office_mood.settings import Settings

NOW = 1_700_000_000.0


def slack_message(text: str, ts: float, **extra) -> dict:
    """Build a raw conversations.history entry."""
    return {"type": "message", "user": "U123", "text": text, "ts": f"{ts:.6f}", **extra}


def completion(analysis: dict) -> dict:
    """Wrap an analysis dict as a chat completions response body."""
    message = {"role": "assistant", "content": json.dumps(analysis)}
    return {"choices": [{"message": message}]}


DEFAULT_ANALYSIS = {
    "mood_score": 65,
    "mood_label": "Good",
    "summary": "Steady progress with a couple of wins.",
    "positive_signals": ["shipped the release"],
    "negative_signals": [],
    "top_emojis": [":tada:", ":fire:"],
}


class FakeUpstream:
    """Answers Slack and OpenAI calls from canned bodies and records requests."""

    def __init__(self) -> None:
        self.histories: dict[str, list[dict] | dict] = {}
        self.emoji_response: dict = {"ok": True, "emoji": {}}
        self.completion_response: dict = completion(DEFAULT_ANALYSIS)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path.endswith("/conversations.history"):
            channel = request.url.params["channel"]
            if channel not in self.histories:
                body = {"ok": False, "error": "channel_not_found"}
                return httpx.Response(200, json=body)
            page = self.histories[channel]
            if isinstance(page, dict):
                return httpx.Response(200, json=page)
            return httpx.Response(200, json={"ok": True, "messages": page})

        if path.endswith("/emoji.list"):
            return httpx.Response(200, json=self.emoji_response)

        if path.endswith("/chat/completions"):
            return httpx.Response(200, json=self.completion_response)

        return httpx.Response(404, json={"ok": False, "error": "unknown_method"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(suffix)]

    def last_prompt(self) -> str:
        request = self.requests_to("/chat/completions")[-1]
        return json.loads(request.content)["messages"][1]["content"]


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        slack_bot_token="xoxb-test",
        openai_api_key="sk-test",
        slack_channel_ids="C_A, C_B",
    )

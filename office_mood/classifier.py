"""
Mood classification through the OpenAI chat completions API.

Renders the weighted messages into the analysis prompt, requests a JSON-only
completion, validates it into a ``MoodAnalysis`` and translates the reported
emoji codes to Unicode.
"""

import json
import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .emoji import EmojiDirectory
from .errors import (
    AnalysisValidationError,
    EmptyContentError,
    ResponseParseError,
    UpstreamAPIError,
)
from .models import MoodAnalysis
from .slack import SlackClient

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 200

SYSTEM_PROMPT = (
    "You are an office mood analyzer. Provide a balanced, accurate assessment "
    "of team sentiment by weighing positive, negative, and neutral signals "
    "proportionally. Be sensitive to both celebrations and concerns. You must "
    "respond with valid JSON only."
)

RESPONSE_SHAPE = """Return JSON ONLY with:
{
  "mood_score": number (0-100),
  "mood_label": "Chaos" | "Stressed" | "Neutral" | "Good" | "Vibes",
  "summary": string,
  "positive_signals": string[],
  "negative_signals": string[],
  "top_emojis": string[]
}"""

ANALYSIS_TEMPLATE = """Analyze the OVERALL mood of the office by considering ALL types of content:

POSITIVE indicators (should increase mood score):
- Celebrations, achievements, wins, milestones
- Excitement, enthusiasm, humor, laughter
- Collaboration, support, helping each other
- Positive reactions: :fire:, :tada:, :clap:, :heart:, :100:, :rocket:
- Gratitude, appreciation, encouragement

NEGATIVE indicators (should decrease mood score):
- Distressing events (accidents, incidents, safety concerns)
- Stress signals (deadlines, pressure, overwhelm)
- Frustration, complaints, blockers
- Negative reactions: :sob:, :disappointed:, :broken_heart:, :weary:
- Words indicating grief, shock, trauma, or distress

NEUTRAL indicators:
- General updates, status reports, routine work
- Questions, clarifications, neutral discussions
- Planning, scheduling, logistics

Balance your analysis:
- Weight recent messages (appearing 2-3 times) more heavily
- Consider the PROPORTION of positive vs negative vs neutral content
- If mostly positive with some neutral -> "Good" or "Vibes" (70-100)
- If balanced or mixed -> "Neutral" (40-60)
- If concerning/stressful content -> "Stressed" (20-40)
- If critical incidents or widespread distress -> "Chaos" (0-20)

IMPORTANT: Recent messages appear multiple times in the list to indicate recency importance.
Messages that appear 3 times are from the last {recent_hours:g} hour(s) (highest priority).
Messages that appear 2 times are from the last {medium_hours:g} hours (medium priority).
Messages that appear 1 time are older than {medium_hours:g} hours but within the last {lookback_hours:g} hours (lower priority).
NOTE: All messages are from the last {lookback_hours:g} hours only.

Analyze these Slack messages (with recency weighting applied):
{messages}"""


def build_prompt(
    messages: list[str],
    recent_hours: float = 1,
    medium_hours: float = 6,
    lookback_hours: float = 24,
) -> str:
    """Render the user prompt: response shape, instructions, then messages."""
    analysis = ANALYSIS_TEMPLATE.format(
        recent_hours=recent_hours,
        medium_hours=medium_hours,
        lookback_hours=lookback_hours,
        messages="\n".join(f"- {m}" for m in messages),
    ).strip()
    return f"{RESPONSE_SHAPE}\n\n{analysis}"


def parse_analysis(content: str | None) -> MoodAnalysis:
    """
    Parse completion content into a ``MoodAnalysis``.

    Raises:
        EmptyContentError: No content was returned.
        ResponseParseError: Content is not JSON.
        AnalysisValidationError: JSON does not match the analysis schema.
    """
    if not content:
        raise EmptyContentError("OpenAI returned no content")

    try:
        parsed = json.loads(content)
    except json.JSONDecodeError as e:
        excerpt = content[:EXCERPT_LENGTH]
        raise ResponseParseError(
            f"OpenAI returned invalid JSON ({e.msg}): {excerpt}", excerpt
        )

    try:
        return MoodAnalysis.model_validate(parsed)
    except ValidationError as e:
        raise AnalysisValidationError(f"OpenAI returned an invalid analysis: {e}")


class OpenAIClient:
    """Minimal async client for ``/chat/completions``."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
    ) -> None:
        self._http = http
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self.model = model
        self.temperature = temperature

    async def complete_json(self, system_prompt: str, user_prompt: str) -> str | None:
        """
        Request a JSON-mode completion and return the message content.

        Raises:
            UpstreamAPIError: The API reported an error.
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        response = await self._http.post(
            f"{self._base_url}/chat/completions",
            json=payload,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        try:
            data = response.json()
        except ValueError:
            raise UpstreamAPIError(
                f"OpenAI API error: HTTP {response.status_code} with a non-JSON body"
            )

        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else None
            raise UpstreamAPIError(f"OpenAI API error: {message or json.dumps(error)}")

        choices = data.get("choices") or []
        if not choices:
            return None
        return (choices[0].get("message") or {}).get("content")


class MoodClassifier:
    """Turns a weighted message sequence into a ``MoodAnalysis``."""

    def __init__(
        self,
        openai: OpenAIClient,
        emoji_directory: EmojiDirectory,
        slack: SlackClient,
        recent_hours: float = 1,
        medium_hours: float = 6,
        lookback_hours: float = 24,
    ) -> None:
        self._openai = openai
        self._emoji_directory = emoji_directory
        self._slack = slack
        self._recent_hours = recent_hours
        self._medium_hours = medium_hours
        self._lookback_hours = lookback_hours

    async def classify(self, messages: list[str]) -> MoodAnalysis:
        prompt = build_prompt(
            messages, self._recent_hours, self._medium_hours, self._lookback_hours
        )

        logger.info("Analyzing %d weighted messages with OpenAI", len(messages))
        content = await self._openai.complete_json(SYSTEM_PROMPT, prompt)
        analysis = parse_analysis(content)

        analysis.top_emojis = await self._emoji_directory.translate(
            analysis.top_emojis, self._slack
        )
        logger.info(
            "Mood classified as %s (%d)", analysis.mood_label, analysis.mood_score
        )
        return analysis

"""
The mood pipeline: aggregate, classify, recommend.

``MoodService`` owns the process-wide emoji directory and builds the per-run
HTTP clients. One call to ``run`` is one full pipeline evaluation; the first
failure anywhere propagates to the caller.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone

import httpx

from .aggregator import HOUR, MessageAggregator
from .classifier import MoodClassifier, OpenAIClient
from .emoji import EmojiDirectory
from .models import MoodResponse
from .playlists import playlist_for_mood
from .settings import Settings
from .slack import SlackClient

logger = logging.getLogger(__name__)


class MoodService:
    """Runs the mood pipeline against Slack and OpenAI."""

    def __init__(
        self,
        settings: Settings,
        emoji_directory: EmojiDirectory | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings
        self.emoji_directory = emoji_directory or EmojiDirectory(
            max_age=settings.emoji_cache_seconds, clock=clock
        )
        self._transport = transport
        self._clock = clock

    async def run(self) -> MoodResponse:
        """
        Evaluate the pipeline once.

        Raises:
            MoodPipelineError: Configuration, upstream, parse or validation failure.
            httpx.HTTPError: A call could not complete.
        """
        settings = self.settings
        slack_token = settings.require_slack_token()
        openai_key = settings.require_openai_key()
        channel_ids = settings.require_channel_ids()

        async with httpx.AsyncClient(
            transport=self._transport, timeout=settings.http_timeout
        ) as http:
            slack = SlackClient(http, slack_token, settings.slack_api_url)
            aggregator = MessageAggregator(
                slack,
                lookback_seconds=settings.lookback_hours * HOUR,
                recent_seconds=settings.recent_tier_hours * HOUR,
                medium_seconds=settings.medium_tier_hours * HOUR,
                page_size=settings.history_page_size,
                max_pages=settings.max_history_pages,
            )
            openai = OpenAIClient(
                http,
                openai_key,
                base_url=settings.openai_api_url,
                model=settings.openai_model,
                temperature=settings.openai_temperature,
            )
            classifier = MoodClassifier(
                openai,
                self.emoji_directory,
                slack,
                recent_hours=settings.recent_tier_hours,
                medium_hours=settings.medium_tier_hours,
                lookback_hours=settings.lookback_hours,
            )

            messages = await aggregator.weighted_messages(channel_ids, self._clock())
            if not messages:
                logger.warning("No messages in the lookback window; classifying anyway")
            analysis = await classifier.classify(messages)

        return MoodResponse(
            **analysis.model_dump(),
            playlist=playlist_for_mood(analysis.mood_label),
            sample_size=len(messages),
            generated_at=datetime.fromtimestamp(self._clock(), tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
        )

"""
Message aggregation for the mood pipeline.

Fetches recent history from every configured channel concurrently, filters out
system, bot and file messages, strips Slack markup, and expands the result into
a recency-weighted sequence of texts. Repetition is how priority reaches the
classifier: the newest messages appear three times, the middle tier twice and
everything else once.
"""

import asyncio
import logging
import re

from .models import CleanedMessage
from .slack import SlackClient

logger = logging.getLogger(__name__)

HOUR = 60 * 60

MIN_TEXT_LENGTH = 3

_USER_MENTION = re.compile(r"<@[^>]+>")
_LINK = re.compile(r"<http[^>]+>")
_ANGLE_TOKEN = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")


def _clean_once(text: str) -> str:
    text = _USER_MENTION.sub("", text)
    text = _LINK.sub("", text)
    text = _ANGLE_TOKEN.sub("", text)
    text = text.replace("&amp;", "&").replace("&lt;", "<").replace("&gt;", ">")
    return _WHITESPACE.sub(" ", text).strip()


def clean_slack_text(text: str) -> str:
    """
    Strip mentions, links, other ``<...>`` tokens and HTML escapes.

    Emoji codes such as ``:fire:`` are kept; the classifier reads them.
    Decoded entities can form new markup, so cleaning repeats until the text
    stops changing.
    """
    while True:
        cleaned = _clean_once(text)
        if cleaned == text:
            return cleaned
        text = cleaned


def filter_messages(
    raw_messages: list[dict], channel_id: str = ""
) -> list[CleanedMessage]:
    """Apply the message filter chain and clean the survivors."""
    type_filtered = [m for m in raw_messages if m.get("type") == "message"]
    subtype_filtered = [
        m
        for m in type_filtered
        if not m.get("subtype") or m.get("subtype") == "thread_broadcast"
    ]
    bot_filtered = [m for m in subtype_filtered if not m.get("bot_id")]
    file_filtered = [m for m in bot_filtered if not m.get("files")]
    text_messages = [m for m in file_filtered if m.get("text")]

    cleaned = [
        CleanedMessage(
            text=clean_slack_text(m["text"]),
            timestamp=float(m.get("ts") or 0),
        )
        for m in text_messages
    ]
    cleaned = [msg for msg in cleaned if len(msg.text) > MIN_TEXT_LENGTH]

    logger.info(
        "Channel %s after filtering: %d messages "
        "(%d -> %d -> %d -> %d -> %d -> %d -> %d)",
        channel_id,
        len(cleaned),
        len(raw_messages),
        len(type_filtered),
        len(subtype_filtered),
        len(bot_filtered),
        len(file_filtered),
        len(text_messages),
        len(cleaned),
    )
    return cleaned


def tier_weight(
    timestamp: float,
    now: float,
    recent_seconds: float = 1 * HOUR,
    medium_seconds: float = 6 * HOUR,
) -> int:
    """Return 3, 2 or 1. A message exactly on a threshold gets the lower tier."""
    if timestamp > now - recent_seconds:
        return 3
    if timestamp > now - medium_seconds:
        return 2
    return 1


def weight_messages(
    messages: list[CleanedMessage],
    now: float,
    recent_seconds: float = 1 * HOUR,
    medium_seconds: float = 6 * HOUR,
) -> list[str]:
    """Expand messages into the weighted text sequence, preserving order."""
    weighted: list[str] = []
    for msg in messages:
        weight = tier_weight(msg.timestamp, now, recent_seconds, medium_seconds)
        weighted.extend([msg.text] * weight)
    return weighted


class MessageAggregator:
    """Collects and weights messages across channels for one request."""

    def __init__(
        self,
        slack: SlackClient,
        lookback_seconds: float = 24 * HOUR,
        recent_seconds: float = 1 * HOUR,
        medium_seconds: float = 6 * HOUR,
        page_size: int = 200,
        max_pages: int = 5,
    ) -> None:
        self._slack = slack
        self._lookback_seconds = lookback_seconds
        self._recent_seconds = recent_seconds
        self._medium_seconds = medium_seconds
        self._page_size = page_size
        self._max_pages = max_pages

    async def fetch_channel(self, channel_id: str, now: float) -> list[CleanedMessage]:
        raw = await self._slack.conversation_history(
            channel_id,
            oldest=now - self._lookback_seconds,
            page_size=self._page_size,
            max_pages=self._max_pages,
        )
        logger.info("Fetched %d raw messages from channel %s", len(raw), channel_id)
        return filter_messages(raw, channel_id)

    async def collect(self, channel_ids: list[str], now: float) -> list[CleanedMessage]:
        """
        Fetch all channels concurrently and merge them newest-first.

        The first failing channel cancels its siblings and its error
        propagates; no partial result is returned.
        """
        tasks = [
            asyncio.create_task(
                self.fetch_channel(channel_id, now), name=f"history-{channel_id}"
            )
            for channel_id in channel_ids
        ]
        try:
            per_channel = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        merged = [msg for messages in per_channel for msg in messages]
        merged.sort(key=lambda msg: msg.timestamp, reverse=True)
        return merged

    async def weighted_messages(self, channel_ids: list[str], now: float) -> list[str]:
        messages = await self.collect(channel_ids, now)
        weighted = weight_messages(
            messages, now, self._recent_seconds, self._medium_seconds
        )
        logger.info(
            "Aggregated %d messages into %d weighted entries across %d channels",
            len(messages),
            len(weighted),
            len(channel_ids),
        )
        return weighted

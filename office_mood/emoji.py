"""
Slack emoji code translation.

The classifier reports emojis as Slack codes (``:fire:``,
``:clap::skin-tone-3:``). This module turns them into Unicode using a
workspace directory built from ``emoji.list`` and cached process-wide, with a
static table of common codes as the fallback.
"""

import logging
import time
from collections.abc import Callable

import httpx
from pydantic import BaseModel, ConfigDict

from .errors import UpstreamAPIError
from .slack import SlackClient

logger = logging.getLogger(__name__)

ALIAS_PREFIX = "alias:"

SKIN_TONES = {
    2: "\U0001f3fb",
    3: "\U0001f3fc",
    4: "\U0001f3fd",
    5: "\U0001f3fe",
    6: "\U0001f3ff",
}


def _with_skin_tones(name: str, glyph: str) -> dict[str, str]:
    codes = {f":{name}:": glyph}
    for tone, modifier in SKIN_TONES.items():
        codes[f":{name}::skin-tone-{tone}:"] = glyph + modifier
    return codes


BASIC_EMOJI_MAP: dict[str, str] = {
    **_with_skin_tones("pray", "🙏"),
    ":cry:": "😢",
    ":sob:": "😭",
    ":disappointed:": "😞",
    ":broken_heart:": "💔",
    ":heart:": "❤️",
    ":white_heart:": "🤍",
    **_with_skin_tones("clap", "👏"),
    ":party_blob:": "🎉",
    ":partying_face:": "🥳",
    ":joy:": "😂",
    **_with_skin_tones("raised_hands", "🙌"),
    ":fire:": "🔥",
    **_with_skin_tones("thumbsup", "👍"),
    **_with_skin_tones("+1", "👍"),
    **_with_skin_tones("thumbsdown", "👎"),
    **_with_skin_tones("-1", "👎"),
    ":tada:": "🎊",
    ":star:": "⭐",
    ":100:": "💯",
    **_with_skin_tones("muscle", "💪"),
    ":sparkles:": "✨",
    ":rocket:": "🚀",
    ":eyes:": "👀",
    ":thinking_face:": "🤔",
    ":thinking:": "🤔",
    ":sweat_smile:": "😅",
    ":scream:": "😱",
    ":worried:": "😟",
    ":fearful:": "😨",
    ":weary:": "😩",
    ":pensive:": "😔",
    ":relieved:": "😌",
    ":triumph:": "😤",
    ":persevere:": "😣",
    ":confounded:": "😖",
    ":rage:": "😡",
    ":angry:": "😠",
    ":smile:": "😊",
    ":grin:": "😁",
    ":laughing:": "😆",
    ":blush:": "😊",
    ":wink:": "😉",
    ":heart_eyes:": "😍",
    ":kissing_heart:": "😘",
    ":sunglasses:": "😎",
    ":smirk:": "😏",
    ":innocent:": "😇",
    ":nerd_face:": "🤓",
    ":face_with_monocle:": "🧐",
    ":star_struck:": "🤩",
    ":upside_down_face:": "🙃",
    ":slightly_smiling_face:": "🙂",
    ":grimacing:": "😬",
    ":neutral_face:": "😐",
    ":expressionless:": "😑",
    ":confused:": "😕",
    ":frowning:": "☹️",
    ":slightly_frowning_face:": "🙁",
    ":unamused:": "😒",
    ":taco:": "🌮",
    ":kudosity-logo:": "🔮",
    ":rolling_on_the_floor_laughing:": "🤣",
    ":arrow_up:": "⬆️",
}


def unicode_for_name(name: str) -> str:
    """Best guess for a bare emoji name; falls back to the ``:name:`` code."""
    code = f":{name}:"
    return BASIC_EMOJI_MAP.get(code, code)


def build_emoji_map(emoji: dict[str, str]) -> dict[str, str]:
    """
    Build a code -> glyph map from an ``emoji.list`` payload.

    Aliases resolve to their target when it has already been seen, otherwise
    to the static table. Custom image emojis map to their own code.
    """
    built: dict[str, str] = {}
    for name, value in emoji.items():
        if not isinstance(value, str):
            continue
        code = f":{name}:"
        if value.startswith(ALIAS_PREFIX):
            target = value[len(ALIAS_PREFIX):]
            built[code] = built.get(f":{target}:") or unicode_for_name(target)
        elif value.startswith("http"):
            built[code] = code
        else:
            built[code] = unicode_for_name(name)
    return {**BASIC_EMOJI_MAP, **built}


def translate_emojis(codes: list[str], emoji_map: dict[str, str]) -> list[str]:
    """
    Translate every code; unknown codes pass through unchanged.

    Blank entries are dropped so every returned string is non-empty.
    """
    return [
        emoji_map.get(code) or BASIC_EMOJI_MAP.get(code) or code
        for code in codes
        if code and code.strip()
    ]


class EmojiSnapshot(BaseModel):
    """An immutable emoji map and the time it was fetched."""

    model_config = ConfigDict(frozen=True)

    value: dict[str, str]
    fetched_at: float


def is_fresh(snapshot: EmojiSnapshot | None, now: float, max_age: float) -> bool:
    return snapshot is not None and now - snapshot.fetched_at < max_age


class EmojiDirectory:
    """
    Process-wide emoji map cache.

    Requests that see a stale snapshot each rebuild it; the last rebuild wins.
    A failed fetch serves the static table for that call and caches nothing.
    """

    def __init__(
        self,
        max_age: float = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.max_age = max_age
        self._clock = clock
        self._snapshot: EmojiSnapshot | None = None

    @property
    def snapshot(self) -> EmojiSnapshot | None:
        return self._snapshot

    async def get_map(self, slack: SlackClient) -> dict[str, str]:
        snapshot = self._snapshot
        if is_fresh(snapshot, self._clock(), self.max_age):
            return snapshot.value

        try:
            emoji = await slack.emoji_list()
        except (UpstreamAPIError, httpx.HTTPError) as e:
            logger.warning("Failed to fetch Slack emojis, using basic map: %s", e)
            return BASIC_EMOJI_MAP

        snapshot = EmojiSnapshot(value=build_emoji_map(emoji), fetched_at=self._clock())
        self._snapshot = snapshot
        logger.info("Cached %d emoji codes", len(snapshot.value))
        return snapshot.value

    async def translate(self, codes: list[str], slack: SlackClient) -> list[str]:
        emoji_map = await self.get_map(slack)
        return translate_emojis(codes, emoji_map)

"""
Dashboard presentation rules.

Pure functions deciding which decorative effects a front end shows for a mood
reading, given the previous score. The CLI watcher uses them to describe each
reading.
"""

from pydantic import BaseModel

CONFETTI_MIN_SCORE = 80
EMOJI_RAIN_MAX_LOW_SCORE = 30

MOOD_COLORS: dict[str, str] = {
    "Chaos": "red",
    "Stressed": "orange",
    "Neutral": "yellow",
    "Good": "green",
    "Vibes": "blue",
}

PULSE_INTENSITY: dict[str, float] = {
    "Chaos": 2,
    "Stressed": 1.5,
    "Neutral": 1,
    "Good": 1.2,
    "Vibes": 1.8,
}

CREDENTIALS_HINT = (
    "Make sure your .env file has the correct Slack and OpenAI credentials."
)


class Effects(BaseModel):
    """Effects to trigger for one reading."""

    confetti: bool = False
    emoji_rain: bool = False
    color: str = "gray"
    heartbeat_speed: float = 1.0
    pulse_intensity: float = 1.0


def should_confetti(score: int) -> bool:
    return score >= CONFETTI_MIN_SCORE


def should_emoji_rain(score: int, previous_score: int | None) -> bool:
    """
    Rain on a low score unless it is unchanged, and on any change that lands
    in the middle band.
    """
    changed = previous_score is None or previous_score != score
    if score <= EMOJI_RAIN_MAX_LOW_SCORE:
        return changed
    if previous_score is None:
        return False
    return changed and score < CONFETTI_MIN_SCORE


def mood_color(label: str) -> str:
    return MOOD_COLORS.get(label, "gray")


def heartbeat_speed(score: int) -> float:
    if score < 20:
        return 0.5
    if score < 40:
        return 0.7
    if score < 60:
        return 1.0
    if score < 80:
        return 1.3
    return 1.5


def pulse_intensity(label: str) -> float:
    return PULSE_INTENSITY.get(label, 1)


def plan_effects(score: int, label: str, previous_score: int | None = None) -> Effects:
    return Effects(
        confetti=should_confetti(score),
        emoji_rain=should_emoji_rain(score, previous_score),
        color=mood_color(label),
        heartbeat_speed=heartbeat_speed(score),
        pulse_intensity=pulse_intensity(label),
    )

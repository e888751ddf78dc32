"""
Shared data models for the Office Mood service.

This module defines the domain models used across the aggregation pipeline,
the classifier adapter, the HTTP API and the CLI.
"""

from typing import Literal

from pydantic import BaseModel, Field

MoodLabel = Literal["Chaos", "Stressed", "Neutral", "Good", "Vibes"]

MOOD_LABELS: tuple[str, ...] = ("Chaos", "Stressed", "Neutral", "Good", "Vibes")


class CleanedMessage(BaseModel):
    """A Slack message that survived filtering and markup stripping."""

    text: str = Field(..., description="Normalized message text")
    timestamp: float = Field(..., description="Unix timestamp of the message")


class MoodAnalysis(BaseModel):
    """Mood classification returned by the language model."""

    mood_score: int = Field(..., description="Overall mood score, nominally 0-100")
    mood_label: MoodLabel = Field(..., description="Mood band for the score")
    summary: str = Field("", description="One-paragraph summary of the mood")
    positive_signals: list[str] = Field(default_factory=list)
    negative_signals: list[str] = Field(default_factory=list)
    top_emojis: list[str] = Field(default_factory=list)


class Playlist(BaseModel):
    """A music recommendation."""

    name: str
    url: str


class MoodResponse(MoodAnalysis):
    """Wire payload for the mood endpoint."""

    playlist: Playlist
    sample_size: int = Field(
        ..., description="Length of the recency-weighted message sequence"
    )
    generated_at: str = Field(..., description="ISO-8601 generation timestamp")


class ErrorResponse(BaseModel):
    """Wire payload for a failed pipeline run."""

    error: str

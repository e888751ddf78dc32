"""
Office Mood - a Slack sentiment dashboard backend.

This package aggregates recent messages from a set of Slack channels, asks an
OpenAI chat model to classify the overall mood, and serves the result together
with a mood-matched playlist recommendation.
"""

__version__ = "0.1.0"

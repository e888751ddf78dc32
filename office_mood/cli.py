"""
Command-line interface tools for the Office Mood service.
"""

import asyncio
import json
import logging
from collections.abc import Coroutine
from datetime import datetime
from typing import Any

import httpx
import typer

from .effects import CREDENTIALS_HINT, plan_effects
from .errors import MoodPipelineError
from .models import MoodResponse
from .pipeline import MoodService
from .settings import get_settings

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_WATCH_INTERVAL = 300.0

app = typer.Typer(help="Office Mood CLI tools")


# MARK: - CLI Entry Points


def cli_get_mood() -> None:
    """Entry point for mood-get CLI command."""
    typer.run(get_mood)


def cli_analyze() -> None:
    """Entry point for mood-analyze CLI command."""
    typer.run(analyze)


def cli_watch() -> None:
    """Entry point for mood-watch CLI command."""
    typer.run(watch)


# MARK: - Commands


@app.command()
def get_mood(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Office Mood service"
    ),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Get the current office mood from a running service."""

    async def _get_mood() -> None:
        async with httpx.AsyncClient(timeout=None) as client:
            result = await _fetch_mood(client, base_url)

            if json_output:
                print(json.dumps(result, indent=2, ensure_ascii=False))
                return

            print(_format_mood(MoodResponse.model_validate(result)))

    _run_with_error_handling(_get_mood(), base_url)


@app.command()
def analyze(
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline steps"),
) -> None:
    """Run the mood pipeline once in-process, without a server."""
    _configure_logging(verbose)

    async def _analyze() -> None:
        mood = await MoodService(get_settings()).run()
        if json_output:
            print(json.dumps(mood.model_dump(), indent=2, ensure_ascii=False))
        else:
            print(_format_mood(mood))

    _run_with_error_handling(_analyze(), "Slack/OpenAI")


@app.command()
def watch(
    base_url: str = typer.Option(
        DEFAULT_BASE_URL, "--url", "-u", help="Base URL of the Office Mood service"
    ),
    interval: float = typer.Option(
        DEFAULT_WATCH_INTERVAL, "--interval", "-i", help="Seconds between readings"
    ),
    count: int = typer.Option(
        0, "--count", "-n", help="Stop after this many polls (0 polls forever)"
    ),
) -> None:
    """Poll the mood endpoint and show the dashboard effects of each reading."""

    async def _watch() -> None:
        print(f"Watching {base_url}/api/mood every {interval:g}s... (Ctrl+C to stop)")
        previous_score: int | None = None
        polls = 0

        async with httpx.AsyncClient(timeout=None) as client:
            while True:
                polls += 1
                try:
                    result = await _fetch_mood(client, base_url)
                except (MoodPipelineError, httpx.HTTPError) as e:
                    print(f"Error: {e}")
                    print(CREDENTIALS_HINT)
                else:
                    mood = MoodResponse.model_validate(result)
                    print(_format_reading(mood, previous_score))
                    previous_score = mood.mood_score

                if count and polls >= count:
                    return
                await asyncio.sleep(interval)

    _run_with_error_handling(_watch(), base_url)


# MARK: - Private Helpers


async def _fetch_mood(client: httpx.AsyncClient, base_url: str) -> dict[str, Any]:
    """GET /api/mood, turning an error payload into a MoodPipelineError."""
    response = await client.get(f"{base_url}/api/mood")
    try:
        result = response.json()
    except ValueError:
        response.raise_for_status()
        raise MoodPipelineError(f"HTTP {response.status_code} response was not JSON")
    if "error" in result:
        raise MoodPipelineError(result["error"])
    response.raise_for_status()
    return result


def _format_reading(mood: MoodResponse, previous_score: int | None) -> str:
    """Format a watched reading with the dashboard effects it triggers."""
    effects = plan_effects(mood.mood_score, mood.mood_label, previous_score)
    triggered = [name for name in ("confetti", "emoji_rain") if getattr(effects, name)]

    line = _format_mood_timestamp(mood)
    if triggered:
        line += f"  [{', '.join(triggered)}]"
    return line


def _format_mood(mood: MoodResponse) -> str:
    """Format a mood reading as a short human-readable block."""
    emojis = " ".join(mood.top_emojis)
    lines = [
        f"{mood.mood_label} ({mood.mood_score}/100) {emojis}".rstrip(),
        mood.summary,
        f"Playlist: {mood.playlist.name} - {mood.playlist.url}",
        f"Based on {mood.sample_size} weighted messages at {mood.generated_at}",
    ]
    return "\n".join(line for line in lines if line)


def _format_mood_timestamp(mood: MoodResponse) -> str:
    """Format mood with the local time it was generated."""
    generated_at = datetime.fromisoformat(mood.generated_at.replace("Z", "+00:00"))
    dt = generated_at.astimezone()
    timestamp = dt.strftime("%H:%M:%S")
    return f"{timestamp} > {mood.mood_label} ({mood.mood_score})"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], target: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {target}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except MoodPipelineError as e:
        print(f"Error: {e}")
        print(CREDENTIALS_HINT)
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()

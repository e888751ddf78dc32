"""
FastAPI server for the Office Mood service.

This module exposes the mood pipeline as a single read endpoint. Every failure
inside the pipeline is caught here, once, and reported as ``{"error": ...}``
with status 500.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .errors import ConfigurationError
from .models import ErrorResponse, MoodResponse
from .pipeline import MoodService
from .settings import get_settings

logger = logging.getLogger(__name__)


def create_app(mood_service: MoodService) -> FastAPI:
    """
    Create a FastAPI application around the given mood service.

    Args:
        mood_service: The MoodService instance to use for the application

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Report the configured channels at startup."""
        try:
            channel_ids = mood_service.settings.require_channel_ids()
        except ConfigurationError as e:
            logger.warning("%s; /api/mood will fail until it is set", e)
        else:
            logger.info(
                "Reading %d Slack channels: %s",
                len(channel_ids),
                ", ".join(channel_ids),
            )
        yield

    app = FastAPI(
        title="Office Mood",
        description="Slack sentiment analysis with playlist recommendations",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "office-mood"}

    @app.get(
        "/api/mood",
        response_model=MoodResponse,
        responses={500: {"model": ErrorResponse}},
    )
    async def get_mood() -> MoodResponse | JSONResponse:
        """
        Run the mood pipeline and return the result.

        Returns:
            The mood analysis with playlist, sample size and timestamp, or an
            error payload with status 500
        """
        try:
            return await mood_service.run()
        except Exception as e:
            logger.exception("Mood pipeline failed")
            error_msg = str(e) or f"Unknown error of type {type(e).__name__}"
            return JSONResponse(status_code=500, content={"error": error_msg})

    return app


# Default app instance for `uvicorn office_mood.server:app`
app = create_app(MoodService(get_settings()))


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "office_mood.server:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    main()

"""
Thin async client for the Slack Web API methods used by the service.

Only ``conversations.history`` and ``emoji.list`` are needed. The client
borrows an ``httpx.AsyncClient`` owned by the caller so that one request's
calls share a connection pool and tests can swap in a mock transport.
"""

import logging
from typing import Any

import httpx

from .errors import UpstreamAPIError

logger = logging.getLogger(__name__)


class SlackClient:
    """Bearer-authenticated Slack Web API client."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        token: str,
        base_url: str = "https://slack.com/api",
    ) -> None:
        self._http = http
        self._token = token
        self._base_url = base_url.rstrip("/")

    async def _get(self, method: str, params: dict[str, Any] | None = None) -> dict:
        response = await self._http.get(
            f"{self._base_url}/{method}",
            params=params,
            headers={"Authorization": f"Bearer {self._token}"},
        )
        try:
            return response.json()
        except ValueError:
            raise UpstreamAPIError(
                f"Slack {method} returned HTTP {response.status_code} "
                "with a non-JSON body"
            )

    async def conversation_history(
        self,
        channel_id: str,
        oldest: float,
        page_size: int = 200,
        max_pages: int = 5,
    ) -> list[dict]:
        """
        Fetch raw messages for a channel newer than ``oldest``.

        Follows ``response_metadata.next_cursor`` for at most ``max_pages``
        pages.

        Raises:
            UpstreamAPIError: Slack answered ``ok: false`` for the channel.
        """
        messages: list[dict] = []
        cursor = None

        for _ in range(max_pages):
            params: dict[str, Any] = {
                "channel": channel_id,
                "oldest": f"{oldest:.6f}",
                "limit": page_size,
            }
            if cursor:
                params["cursor"] = cursor

            data = await self._get("conversations.history", params)
            if not data.get("ok"):
                raise UpstreamAPIError(
                    f"Slack error for channel {channel_id}: {data.get('error')}"
                )

            messages.extend(data.get("messages") or [])

            cursor = (data.get("response_metadata") or {}).get("next_cursor")
            if not cursor:
                break
        else:
            if cursor:
                logger.warning(
                    "Channel %s has more than %d pages of history; truncating",
                    channel_id,
                    max_pages,
                )

        return messages

    async def emoji_list(self) -> dict[str, str]:
        """
        Fetch the workspace emoji directory (name -> alias or image URL).

        Raises:
            UpstreamAPIError: Slack answered ``ok: false``.
        """
        data = await self._get("emoji.list")
        if not data.get("ok"):
            raise UpstreamAPIError(f"Slack emoji.list error: {data.get('error')}")
        return data.get("emoji") or {}

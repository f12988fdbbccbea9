"""Slack Web API client adapter."""

from dataclasses import dataclass
from typing import Protocol

import httpx

SLACK_API_BASE = "https://slack.com/api"


class SlackApiError(Exception):
    """Raised when the Slack Web API answers with ``ok: false``."""

    def __init__(self, method: str, error: str) -> None:
        super().__init__(f"{method} failed: {error}")
        self.method = method
        self.error = error


class SlackClient(Protocol):
    """Interface for Slack Web API interactions."""

    async def post_message(
        self,
        channel: str,
        text: str,
        blocks: list[dict[str, object]] | None = None,
        unfurl_links: bool | None = None,
    ) -> None:
        """Post a message to a Slack channel."""

    async def upload_file(
        self, channel: str, filename: str, content: bytes, title: str | None = None
    ) -> None:
        """Upload a file and share it in a Slack channel."""


@dataclass
class HttpxSlackClient:
    """Slack client implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient
    base_url: str = SLACK_API_BASE

    @classmethod
    def create(cls, bot_token: str) -> "HttpxSlackClient":
        """Create a Slack client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def post_message(
        self,
        channel: str,
        text: str,
        blocks: list[dict[str, object]] | None = None,
        unfurl_links: bool | None = None,
    ) -> None:
        """Send a message using Slack's chat.postMessage API."""
        payload: dict[str, object] = {"channel": channel, "text": text}
        if blocks is not None:
            payload["blocks"] = blocks
        if unfurl_links is not None:
            payload["unfurl_links"] = unfurl_links
        await self._call("chat.postMessage", json=payload)

    async def upload_file(
        self, channel: str, filename: str, content: bytes, title: str | None = None
    ) -> None:
        """Upload a file with the external upload flow and share it."""
        ticket = await self._call(
            "files.getUploadURLExternal",
            data={"filename": filename, "length": str(len(content))},
        )
        upload_url = str(ticket["upload_url"])
        response = await self.http_client.post(
            upload_url, files={"file": (filename, content)}, timeout=30
        )
        response.raise_for_status()
        await self._call(
            "files.completeUploadExternal",
            json={
                "files": [{"id": ticket["file_id"], "title": title or filename}],
                "channel_id": channel,
            },
        )

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _call(
        self,
        method: str,
        json: dict[str, object] | None = None,
        data: dict[str, str] | None = None,
    ) -> dict[str, object]:
        response = await self.http_client.post(
            f"{self.base_url}/{method}",
            json=json,
            data=data,
            headers={"Authorization": f"Bearer {self.bot_token}"},
            timeout=10,
        )
        response.raise_for_status()
        body = response.json()
        if not body.get("ok"):
            raise SlackApiError(method, str(body.get("error", "unknown_error")))
        return body

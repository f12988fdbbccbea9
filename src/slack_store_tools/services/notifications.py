"""Fire-and-forget Slack notifications."""

import logging
from dataclasses import dataclass

import httpx

from slack_store_tools.adapters.slack_client import SlackApiError, SlackClient

_logger = logging.getLogger(__name__)


@dataclass
class Notifier:
    """Deliver workflow outcomes to Slack without surfacing failures.

    The webhook has already been acknowledged when these run, so a failed
    delivery is logged and dropped.
    """

    slack_client: SlackClient

    async def send(
        self,
        channel: str,
        text: str,
        blocks: list[dict[str, object]] | None = None,
        unfurl_links: bool | None = None,
    ) -> bool:
        """Post a message and return whether Slack accepted it."""
        try:
            await self.slack_client.post_message(
                channel=channel, text=text, blocks=blocks, unfurl_links=unfurl_links
            )
        except (httpx.HTTPError, SlackApiError):
            _logger.exception(
                "Failed to deliver Slack notification", extra={"channel": channel}
            )
            return False
        return True

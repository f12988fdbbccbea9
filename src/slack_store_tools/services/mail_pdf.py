"""Render logged transactional emails to PDF."""

import logging
import re
from dataclasses import dataclass

import httpx

from slack_store_tools.adapters.pdf_renderer import PdfRenderer
from slack_store_tools.adapters.slack_client import SlackApiError, SlackClient
from slack_store_tools.adapters.woo_client import WooClient
from slack_store_tools.domain.errors import ValidationFailure
from slack_store_tools.domain.interactions import (
    ActionReference,
    ActionRequest,
    CommandRequest,
)
from slack_store_tools.services import blocks
from slack_store_tools.services.guards import require_reference
from slack_store_tools.services.notifications import Notifier

_logger = logging.getLogger(__name__)

GENERATE_PDF_ACTION = "orderpdf_generate"
SEARCH_LIMIT = 10
SEARCH_DAYS = 30
MAX_FILENAME_LENGTH = 60

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\- ]+", re.ASCII)


@dataclass
class OrderPdfWorkflow:
    """Search mail logs by subject and turn a chosen one into a PDF."""

    woo_client: WooClient
    slack_client: SlackClient
    pdf_renderer: PdfRenderer
    notifier: Notifier

    async def search(self, command: CommandRequest) -> None:
        """List matching mail logs with a generate button each."""
        subject = command.argument
        try:
            response = await self.woo_client.get(
                "/mail-log/search",
                {"subject": subject, "limit": SEARCH_LIMIT, "days": SEARCH_DAYS},
            )
        except httpx.HTTPError:
            _logger.exception("Mail log search failed", extra={"subject": subject})
            await self.notifier.send(
                command.channel_id, "❌ Failed to search email logs."
            )
            return
        results = response.get("results") if isinstance(response, dict) else None
        if not results:
            await self.notifier.send(
                command.channel_id,
                f"❌ No email logs found matching subject: *{subject}*",
            )
            return

        rows = results[:SEARCH_LIMIT]
        message_blocks = [
            blocks.section(
                f"📨 Found *{len(results)}* email log(s) matching:\n*{subject}*\n\n"
                "Select one to generate a PDF:"
            )
        ]
        for row in rows:
            row_block = blocks.section(
                f"*{row.get('subject')}*\n*To:* {row.get('receiver')}\n"
                f"*Date:* {row.get('timestamp')}\n*Mail ID:* {row.get('mail_id')}"
            )
            row_block["accessory"] = blocks.button(
                "📄 Generate PDF",
                GENERATE_PDF_ACTION,
                ActionReference(command.user_id, str(row.get("mail_id"))).encode(),
                style="primary",
            )
            message_blocks.append(row_block)
        await self.notifier.send(
            command.channel_id,
            f"Email logs found for {subject}",
            blocks=message_blocks,
        )

    async def generate(self, action: ActionRequest) -> None:
        """Fetch the mail log HTML, render it and upload the PDF."""
        reference = require_reference(action)
        if reference is None or not reference.object_id.isdigit():
            raise ValidationFailure("❌ Invalid mail log selection.")
        mail_id = int(reference.object_id)
        if mail_id <= 0:
            raise ValidationFailure("❌ Invalid mail log selection.")

        await self.notifier.send(
            action.channel_id, f"🛠 Generating PDF for mail log ID *{mail_id}*..."
        )
        try:
            mail = await self.woo_client.get(f"/mail-log/{mail_id}")
        except httpx.HTTPError:
            _logger.exception("Mail log fetch failed", extra={"mail_id": mail_id})
            await self.notifier.send(
                action.channel_id, "❌ Failed to generate/upload PDF."
            )
            return
        html = mail.get("html") if isinstance(mail, dict) else None
        if not html:
            await self.notifier.send(
                action.channel_id, "❌ No HTML content found for that log."
            )
            return

        filename = pdf_filename(mail.get("subject"), mail_id)
        try:
            pdf_bytes = await self.pdf_renderer.render(str(html))
        except Exception:
            _logger.exception("PDF rendering failed", extra={"mail_id": mail_id})
            await self.notifier.send(
                action.channel_id, "❌ Could not render that email to PDF."
            )
            return
        try:
            await self.slack_client.upload_file(
                channel=action.channel_id,
                filename=filename,
                content=pdf_bytes,
                title=filename,
            )
        except (httpx.HTTPError, SlackApiError):
            _logger.exception("PDF upload failed", extra={"mail_id": mail_id})
            await self.notifier.send(
                action.channel_id, "❌ Failed to generate/upload PDF."
            )
            return
        await self.notifier.send(action.channel_id, f"✅ PDF uploaded: *{filename}*")


def pdf_filename(subject: object, mail_id: int) -> str:
    """Build a filesystem-safe PDF name from an email subject."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("", str(subject or ""))
    safe_name = cleaned[:MAX_FILENAME_LENGTH].strip() or f"mail-{mail_id}"
    return f"{safe_name}.pdf"

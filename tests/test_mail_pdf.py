"""Tests for the order email PDF workflow."""

import asyncio

import pytest

from slack_store_tools.adapters.slack_client import SlackApiError
from slack_store_tools.domain.errors import ActorMismatch, ValidationFailure
from slack_store_tools.domain.interactions import CommandRequest
from slack_store_tools.services.mail_pdf import (
    GENERATE_PDF_ACTION,
    OrderPdfWorkflow,
    pdf_filename,
)
from slack_store_tools.services.notifications import Notifier
from tests.conftest import (
    FakePdfRenderer,
    FakeSlackClient,
    FakeWooClient,
    button_action,
    http_error,
)

MAIL_ROW = {
    "mail_id": 314,
    "subject": "New Order #4105",
    "receiver": "orders@example.com",
    "timestamp": "2026-01-02 10:00:00",
}


@pytest.fixture
def workflow(
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
    pdf_renderer: FakePdfRenderer,
    notifier: Notifier,
) -> OrderPdfWorkflow:
    return OrderPdfWorkflow(
        woo_client=woo_client,
        slack_client=slack_client,
        pdf_renderer=pdf_renderer,
        notifier=notifier,
    )


class _FailingUploadSlackClient(FakeSlackClient):
    async def upload_file(
        self, channel: str, filename: str, content: bytes, title: str | None = None
    ) -> None:
        raise SlackApiError("files.completeUploadExternal", "not_in_channel")


def test_search_lists_rows_with_generate_buttons(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
) -> None:
    woo_client.responses["/mail-log/search"] = {"results": [MAIL_ROW]}

    asyncio.run(workflow.search(CommandRequest("U1", "C1", "New Order #4105")))

    assert woo_client.gets == [
        ("/mail-log/search", {"subject": "New Order #4105", "limit": 10, "days": 30})
    ]
    _, _, message_blocks = slack_client.messages[0]
    assert message_blocks is not None
    accessory = message_blocks[1]["accessory"]
    assert accessory["action_id"] == GENERATE_PDF_ACTION
    assert accessory["value"] == "U1|314"


def test_search_with_no_results(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
) -> None:
    woo_client.responses["/mail-log/search"] = {"results": []}

    asyncio.run(workflow.search(CommandRequest("U1", "C1", "Missing")))

    assert slack_client.texts == ["❌ No email logs found matching subject: *Missing*"]


def test_search_failure(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
) -> None:
    woo_client.responses["/mail-log/search"] = http_error(500, "/mail-log/search")

    asyncio.run(workflow.search(CommandRequest("U1", "C1", "New Order")))

    assert slack_client.texts == ["❌ Failed to search email logs."]


def test_generate_renders_and_uploads_pdf(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
    pdf_renderer: FakePdfRenderer,
) -> None:
    woo_client.responses["/mail-log/314"] = {
        "subject": "New Order #4105",
        "html": "<html><body>Order</body></html>",
    }

    asyncio.run(workflow.generate(button_action("U1", GENERATE_PDF_ACTION, "U1|314")))

    assert pdf_renderer.rendered == ["<html><body>Order</body></html>"]
    assert slack_client.uploads == [("C1", "New Order 4105.pdf", pdf_renderer.content)]
    assert slack_client.texts == [
        "🛠 Generating PDF for mail log ID *314*...",
        "✅ PDF uploaded: *New Order 4105.pdf*",
    ]


def test_generate_without_html(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
) -> None:
    woo_client.responses["/mail-log/314"] = {"subject": "Empty", "html": ""}

    asyncio.run(workflow.generate(button_action("U1", GENERATE_PDF_ACTION, "U1|314")))

    assert slack_client.texts[-1] == "❌ No HTML content found for that log."
    assert slack_client.uploads == []


def test_generate_reports_render_failure(
    workflow: OrderPdfWorkflow,
    woo_client: FakeWooClient,
    slack_client: FakeSlackClient,
    pdf_renderer: FakePdfRenderer,
) -> None:
    woo_client.responses["/mail-log/314"] = {"subject": "S", "html": "<p>x</p>"}
    pdf_renderer.error = RuntimeError("browser crashed")

    asyncio.run(workflow.generate(button_action("U1", GENERATE_PDF_ACTION, "U1|314")))

    assert slack_client.texts[-1] == "❌ Could not render that email to PDF."
    assert slack_client.uploads == []


def test_generate_reports_upload_failure(
    woo_client: FakeWooClient, pdf_renderer: FakePdfRenderer
) -> None:
    slack_client = _FailingUploadSlackClient()
    workflow = OrderPdfWorkflow(
        woo_client=woo_client,
        slack_client=slack_client,
        pdf_renderer=pdf_renderer,
        notifier=Notifier(slack_client),
    )
    woo_client.responses["/mail-log/314"] = {"subject": "S", "html": "<p>x</p>"}

    asyncio.run(workflow.generate(button_action("U1", GENERATE_PDF_ACTION, "U1|314")))

    assert slack_client.texts[-1] == "❌ Failed to generate/upload PDF."


def test_generate_by_other_user_is_rejected(
    workflow: OrderPdfWorkflow, woo_client: FakeWooClient
) -> None:
    with pytest.raises(ActorMismatch):
        asyncio.run(
            workflow.generate(button_action("U2", GENERATE_PDF_ACTION, "U1|314"))
        )

    assert woo_client.gets == []


@pytest.mark.parametrize("value", ["U1|0", "U1|abc", "U1"])
def test_generate_rejects_invalid_mail_id(
    workflow: OrderPdfWorkflow, value: str
) -> None:
    with pytest.raises(ValidationFailure):
        asyncio.run(workflow.generate(button_action("U1", GENERATE_PDF_ACTION, value)))


@pytest.mark.parametrize(
    ("subject", "expected"),
    [
        ("New Order #4105", "New Order 4105.pdf"),
        ("Café ✓ receipt", "Caf  receipt.pdf"),
        ("!!!", "mail-9.pdf"),
        (None, "mail-9.pdf"),
        ("x" * 80, "x" * 60 + ".pdf"),
    ],
)
def test_pdf_filename(subject: object, expected: str) -> None:
    assert pdf_filename(subject, 9) == expected

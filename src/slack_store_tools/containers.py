"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from slack_store_tools.adapters.pdf_renderer import PdfRenderer, PlaywrightPdfRenderer
from slack_store_tools.adapters.slack_client import HttpxSlackClient, SlackClient
from slack_store_tools.adapters.woo_client import HttpxWooClient, WooClient
from slack_store_tools.config import Settings
from slack_store_tools.services.customers import CustomerMetaWorkflow
from slack_store_tools.services.dispatcher import WorkflowDispatcher
from slack_store_tools.services.mail_pdf import OrderPdfWorkflow
from slack_store_tools.services.notifications import Notifier
from slack_store_tools.services.orders import OrderLookupService, OrderStatusWorkflow
from slack_store_tools.services.products import ProductWorkflows
from slack_store_tools.services.sessions import SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    slack_client: SlackClient
    woo_client: WooClient
    pdf_renderer: PdfRenderer
    session_store: SessionStore
    dispatcher: WorkflowDispatcher
    close_resources: Callable[[], Awaitable[None]]


def build_dispatcher(
    settings: Settings,
    slack_client: SlackClient,
    woo_client: WooClient,
    pdf_renderer: PdfRenderer,
    session_store: SessionStore,
) -> WorkflowDispatcher:
    """Wire every workflow service around shared clients and sessions."""
    notifier = Notifier(slack_client)
    return WorkflowDispatcher(
        products=ProductWorkflows(woo_client, session_store, notifier),
        customers=CustomerMetaWorkflow(woo_client, session_store, notifier),
        order_lookup=OrderLookupService(
            woo_client, notifier, admin_edit_url=settings.admin_edit_url
        ),
        order_status=OrderStatusWorkflow(woo_client, notifier),
        order_pdf=OrderPdfWorkflow(
            woo_client=woo_client,
            slack_client=slack_client,
            pdf_renderer=pdf_renderer,
            notifier=notifier,
        ),
        notifier=notifier,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    slack_client = HttpxSlackClient.create(resolved_settings.slack_bot_token)
    woo_client = HttpxWooClient.create(
        base_url=resolved_settings.woo_api_base,
        username=resolved_settings.woo_username,
        password=resolved_settings.woo_password,
        timeout_seconds=resolved_settings.woo_timeout_seconds,
        retries=resolved_settings.woo_get_retries,
        backoff_seconds=resolved_settings.woo_retry_backoff_seconds,
    )
    pdf_renderer = PlaywrightPdfRenderer()
    session_store = SessionStore(ttl_seconds=resolved_settings.session_ttl_seconds)
    dispatcher = build_dispatcher(
        resolved_settings, slack_client, woo_client, pdf_renderer, session_store
    )

    async def close_resources() -> None:
        await slack_client.close()
        await woo_client.close()

    return AppContainer(
        settings=resolved_settings,
        slack_client=slack_client,
        woo_client=woo_client,
        pdf_renderer=pdf_renderer,
        session_store=session_store,
        dispatcher=dispatcher,
        close_resources=close_resources,
    )

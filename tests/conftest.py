"""Shared test fixtures."""

import time
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from slack_store_tools.adapters.pdf_renderer import PdfRenderer
from slack_store_tools.adapters.slack_client import SlackClient
from slack_store_tools.adapters.woo_client import WooClient
from slack_store_tools.config import Settings
from slack_store_tools.containers import AppContainer, build_dispatcher
from slack_store_tools.domain.interactions import ActionRequest
from slack_store_tools.services.notifications import Notifier
from slack_store_tools.services.sessions import SessionStore
from slack_store_tools.services.signature import compute_signature

SIGNING_SECRET = "test-signing-secret"


@dataclass
class FakeSlackClient(SlackClient):
    """Fake Slack client that records messages and uploads."""

    messages: list[tuple[str, str, list[dict[str, object]] | None]] = field(
        default_factory=list
    )
    uploads: list[tuple[str, str, bytes]] = field(default_factory=list)

    async def post_message(
        self,
        channel: str,
        text: str,
        blocks: list[dict[str, object]] | None = None,
        unfurl_links: bool | None = None,
    ) -> None:
        self.messages.append((channel, text, blocks))

    async def upload_file(
        self, channel: str, filename: str, content: bytes, title: str | None = None
    ) -> None:
        self.uploads.append((channel, filename, content))

    @property
    def texts(self) -> list[str]:
        return [text for _, text, _ in self.messages]


def http_error(status_code: int, path: str = "/") -> httpx.HTTPStatusError:
    """Build an httpx status error like raise_for_status would."""
    request = httpx.Request("GET", f"https://store.test/wp-json/wc/v3{path}")
    response = httpx.Response(status_code, request=request)
    return httpx.HTTPStatusError(
        f"HTTP {status_code}", request=request, response=response
    )


@dataclass
class FakeWooClient(WooClient):
    """Fake WooCommerce client with canned GET responses by path."""

    responses: dict[str, object] = field(default_factory=dict)
    put_error: Exception | None = None
    gets: list[tuple[str, dict[str, object] | None]] = field(default_factory=list)
    puts: list[tuple[str, dict[str, object]]] = field(default_factory=list)

    async def get(self, path: str, params: dict[str, object] | None = None) -> object:
        self.gets.append((path, params))
        if path not in self.responses:
            raise http_error(404, path)
        response = self.responses[path]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(params)
        return response

    async def put(self, path: str, body: dict[str, object]) -> object:
        self.puts.append((path, body))
        if self.put_error is not None:
            raise self.put_error
        return {"id": 1, **body}


@dataclass
class FakePdfRenderer(PdfRenderer):
    """Fake renderer returning static bytes."""

    content: bytes = b"%PDF-1.4 fake"
    rendered: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def render(self, html: str) -> bytes:
        self.rendered.append(html)
        if self.error is not None:
            raise self.error
        return self.content


@dataclass
class FakeClock:
    """Controllable clock for session expiry tests."""

    now: datetime = field(default_factory=lambda: datetime(2026, 1, 1, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def button_action(
    user_id: str,
    action_id: str,
    value: str,
    state_values: dict[str, dict[str, dict[str, object]]] | None = None,
    channel_id: str = "C1",
) -> ActionRequest:
    return ActionRequest(
        user_id=user_id,
        channel_id=channel_id,
        action_id=action_id,
        value=value,
        state_values=state_values or {},
    )


def signed_headers(
    body: bytes,
    secret: str = SIGNING_SECRET,
    timestamp: int | None = None,
    content_type: str = "application/x-www-form-urlencoded",
) -> dict[str, str]:
    """Build Slack signature headers for a request body."""
    ts = str(int(time.time()) if timestamp is None else timestamp)
    return {
        "X-Slack-Request-Timestamp": ts,
        "X-Slack-Signature": compute_signature(secret, ts, body),
        "Content-Type": content_type,
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(
        slack_bot_token="xoxb-test",
        slack_signing_secret=SIGNING_SECRET,
        woo_url="https://store.test",
        woo_username="ck_user",
        woo_password="cs_secret",
    )


@pytest.fixture
def slack_client() -> FakeSlackClient:
    return FakeSlackClient()


@pytest.fixture
def woo_client() -> FakeWooClient:
    return FakeWooClient()


@pytest.fixture
def pdf_renderer() -> FakePdfRenderer:
    return FakePdfRenderer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(clock: FakeClock) -> SessionStore:
    return SessionStore(ttl_seconds=900, clock=clock)


@pytest.fixture
def notifier(slack_client: FakeSlackClient) -> Notifier:
    return Notifier(slack_client)


@pytest.fixture
def container(
    settings: Settings,
    slack_client: FakeSlackClient,
    woo_client: FakeWooClient,
    pdf_renderer: FakePdfRenderer,
    session_store: SessionStore,
) -> AppContainer:
    dispatcher = build_dispatcher(
        settings, slack_client, woo_client, pdf_renderer, session_store
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        slack_client=slack_client,
        woo_client=woo_client,
        pdf_renderer=pdf_renderer,
        session_store=session_store,
        dispatcher=dispatcher,
        close_resources=close_resources,
    )

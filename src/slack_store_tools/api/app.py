"""FastAPI application factory."""

import asyncio
import contextlib
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from urllib.parse import parse_qsl

from fastapi import BackgroundTasks, Depends, FastAPI, Header, HTTPException, Request
from fastapi import status as http_status
from pydantic import ValidationError

from slack_store_tools.api.slack_models import InteractionPayload, SlashCommandPayload
from slack_store_tools.app_logging import configure_logging
from slack_store_tools.containers import AppContainer
from slack_store_tools.domain.interactions import ActionRequest, CommandRequest
from slack_store_tools.services.signature import verify_slack_signature
from slack_store_tools.slack_commands import SlashCommand

_logger = logging.getLogger(__name__)


async def require_slack_signature(
    request: Request,
    x_slack_request_timestamp: str | None = Header(default=None),
    x_slack_signature: str | None = Header(default=None),
) -> bytes:
    """Verify the Slack signature and return the raw request body."""
    container: AppContainer = request.app.state.container
    body = await request.body()
    if not verify_slack_signature(
        container.settings.slack_signing_secret,
        x_slack_request_timestamp,
        x_slack_signature,
        body,
    ):
        raise HTTPException(
            status_code=http_status.HTTP_401_UNAUTHORIZED, detail="Unauthorized"
        )
    return body


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        sweeper = asyncio.create_task(
            app.state.container.session_store.run_sweeper()
        )
        yield
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    for command in SlashCommand:
        app.add_api_route(
            command.value.route,
            _command_endpoint(command),
            methods=["POST"],
            name=f"slack_{command.name.lower()}",
        )

    @app.post("/slack/interact")
    async def slack_interact(
        request: Request,
        background_tasks: BackgroundTasks,
        body: bytes = Depends(require_slack_signature),
    ) -> dict[str, str]:
        """Acknowledge a button click and handle it in the background."""
        state_container: AppContainer = request.app.state.container
        form = _decode_body(body, request.headers.get("content-type"))
        raw_payload = form.get("payload")
        try:
            if isinstance(raw_payload, str):
                payload = InteractionPayload.model_validate_json(raw_payload)
            elif isinstance(raw_payload, dict):
                payload = InteractionPayload.model_validate(raw_payload)
            else:
                raise _bad_request("Invalid payload")
        except ValidationError as exc:
            raise _bad_request("Invalid payload") from exc
        if not payload.actions or not payload.actions[0].action_id:
            raise _bad_request("Invalid action")
        if payload.channel is None:
            raise _bad_request("Invalid channel")

        action = payload.actions[0]
        action_request = ActionRequest(
            user_id=payload.user.id,
            channel_id=payload.channel.id,
            action_id=action.action_id,
            value=action.value or "",
            state_values=payload.state.values,
        )
        background_tasks.add_task(
            state_container.dispatcher.run_action, action_request
        )
        return {"status": "ok"}

    return app


def _command_endpoint(
    command: SlashCommand,
) -> Callable[..., Awaitable[dict[str, str]]]:
    async def endpoint(
        request: Request,
        background_tasks: BackgroundTasks,
        body: bytes = Depends(require_slack_signature),
    ) -> dict[str, str]:
        state_container: AppContainer = request.app.state.container
        form = _decode_body(body, request.headers.get("content-type"))
        try:
            payload = SlashCommandPayload.model_validate(form)
        except ValidationError as exc:
            raise _bad_request("Invalid command payload") from exc
        command_request = CommandRequest(
            user_id=payload.user_id,
            channel_id=payload.channel_id,
            text=payload.text,
        )
        dispatcher = state_container.dispatcher
        acknowledgement = dispatcher.acknowledge(command, command_request)
        if acknowledgement.accepted:
            background_tasks.add_task(dispatcher.run_command, command, command_request)
        return {"response_type": "ephemeral", "text": acknowledgement.text}

    endpoint.__doc__ = command.value.description
    return endpoint


def _decode_body(body: bytes, content_type: str | None) -> dict[str, object]:
    """Decode a form-encoded or JSON webhook body."""
    text = body.decode("utf-8", errors="replace")
    if (content_type or "").startswith("application/json"):
        try:
            decoded = json.loads(text)
        except ValueError as exc:
            raise _bad_request("Invalid payload") from exc
        return decoded if isinstance(decoded, dict) else {}
    return dict(parse_qsl(text, keep_blank_values=True))


def _bad_request(detail: str) -> HTTPException:
    _logger.warning("Rejected Slack request: %s", detail)
    return HTTPException(status_code=http_status.HTTP_400_BAD_REQUEST, detail=detail)

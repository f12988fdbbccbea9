"""Pydantic models for Slack webhook payloads."""

from pydantic import BaseModel, Field


class SlashCommandPayload(BaseModel):
    """Slash command form fields."""

    command: str | None = None
    text: str = ""
    user_id: str
    channel_id: str
    response_url: str | None = None


class SlackUser(BaseModel):
    """Slack user reference."""

    id: str
    username: str | None = None


class SlackChannel(BaseModel):
    """Slack channel reference."""

    id: str
    name: str | None = None


class SlackAction(BaseModel):
    """A single block action."""

    action_id: str
    block_id: str | None = None
    value: str | None = None


class SlackState(BaseModel):
    """Input values captured from the message's blocks."""

    values: dict[str, dict[str, dict[str, object]]] = Field(default_factory=dict)


class InteractionPayload(BaseModel):
    """Block actions payload sent to the interactivity endpoint."""

    type: str | None = None
    user: SlackUser
    channel: SlackChannel | None = None
    actions: list[SlackAction] = Field(default_factory=list)
    state: SlackState = Field(default_factory=SlackState)

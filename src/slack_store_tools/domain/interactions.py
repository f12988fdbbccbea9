"""Domain models for Slack commands and button actions."""

from dataclasses import dataclass, field

REFERENCE_SEPARATOR = "|"


@dataclass(frozen=True)
class CommandRequest:
    """A slash command invocation."""

    user_id: str
    channel_id: str
    text: str = ""

    @property
    def argument(self) -> str:
        return self.text.strip()


@dataclass(frozen=True)
class ActionRequest:
    """A button click delivered to the interactivity endpoint.

    ``user_id`` comes from the platform's own callback identity and is the
    only value trusted for authorization.
    """

    user_id: str
    channel_id: str
    action_id: str
    value: str = ""
    state_values: dict[str, dict[str, dict[str, object]]] = field(
        default_factory=dict
    )

    def input_value(self, block_id: str, action_id: str) -> str | None:
        """Return the value of a named input element, if present."""
        element = self.state_values.get(block_id, {}).get(action_id)
        if not isinstance(element, dict):
            return None
        value = element.get("value")
        return value if isinstance(value, str) else None

    def first_input_value(self) -> str | None:
        """Return the first non-empty input value across all blocks."""
        for block in self.state_values.values():
            for element in block.values():
                if isinstance(element, dict):
                    value = element.get("value")
                    if isinstance(value, str) and value:
                        return value
        return None


@dataclass(frozen=True)
class ActionReference:
    """Workflow context embedded in a button value.

    Encoded as ``issuing_user|object_id[|target_state]``.
    """

    issuing_user_id: str
    object_id: str
    target_state: str | None = None

    def encode(self) -> str:
        parts = [self.issuing_user_id, self.object_id]
        if self.target_state is not None:
            parts.append(self.target_state)
        return REFERENCE_SEPARATOR.join(parts)

    @classmethod
    def parse(cls, value: str | None) -> "ActionReference | None":
        """Parse a button value, returning None when it is malformed."""
        parts = (value or "").split(REFERENCE_SEPARATOR)
        if len(parts) not in {2, 3}:
            return None
        issuing_user_id, object_id, *rest = (part.strip() for part in parts)
        if not issuing_user_id or not object_id:
            return None
        target_state = rest[0] if rest and rest[0] else None
        return cls(issuing_user_id, object_id, target_state)

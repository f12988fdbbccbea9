"""Slack Block Kit payload helpers."""


def section(text: str) -> dict[str, object]:
    return {"type": "section", "text": {"type": "mrkdwn", "text": text}}


def button(
    label: str, action_id: str, value: str, style: str | None = None
) -> dict[str, object]:
    """Build a button element; ``style`` is omitted when unset."""
    element: dict[str, object] = {
        "type": "button",
        "text": {"type": "plain_text", "text": label},
        "value": value,
        "action_id": action_id,
    }
    if style is not None:
        element["style"] = style
    return element


def actions(
    *elements: dict[str, object], block_id: str | None = None
) -> dict[str, object]:
    block: dict[str, object] = {"type": "actions", "elements": list(elements)}
    if block_id is not None:
        block["block_id"] = block_id
    return block


def text_input(
    block_id: str, action_id: str, label: str, initial_value: str | None = None
) -> dict[str, object]:
    """Build a plain-text input block."""
    element: dict[str, object] = {"type": "plain_text_input", "action_id": action_id}
    if initial_value:
        element["initial_value"] = initial_value
    return {
        "type": "input",
        "block_id": block_id,
        "label": {"type": "plain_text", "text": label},
        "element": element,
    }


def confirm_cancel(
    user_id: str,
    confirm_action: str,
    cancel_action: str,
    confirm_label: str = "✅ Confirm",
    cancel_label: str = "❌ Cancel",
) -> dict[str, object]:
    """Confirm/cancel buttons carrying the issuing user's id."""
    return actions(
        button(confirm_label, confirm_action, user_id, style="primary"),
        button(cancel_label, cancel_action, user_id, style="danger"),
    )

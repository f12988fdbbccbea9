"""Checks shared by confirm and cancel actions."""

from collections.abc import Iterable

from slack_store_tools.domain.errors import ActorMismatch, SessionMissing
from slack_store_tools.domain.interactions import ActionReference, ActionRequest
from slack_store_tools.services.sessions import SessionStore

NO_SESSION_MESSAGE = "❌ No session found."
SESSION_EXPIRED_MESSAGE = "❌ Session expired. Please run the command again."


def require_issuer(action: ActionRequest) -> None:
    """Reject clicks on session-backed buttons issued to someone else."""
    if action.value.strip() != action.user_id:
        raise ActorMismatch()


def require_reference(action: ActionRequest) -> ActionReference | None:
    """Parse an embedded reference and reject clicks by anyone else.

    Returns None when the value is malformed so callers can report it.
    """
    reference = ActionReference.parse(action.value)
    if reference is None:
        return None
    if reference.issuing_user_id != action.user_id:
        raise ActorMismatch()
    return reference


def require_session(
    store: SessionStore,
    action: ActionRequest,
    workflow: str,
    required_fields: Iterable[str],
) -> dict[str, object]:
    """Return the clicking user's live session for ``workflow``.

    The session is looked up by the platform-supplied user id, never by a
    value echoed in the button.
    """
    require_issuer(action)
    session = store.get(action.user_id)
    if session is None:
        raise SessionMissing(NO_SESSION_MESSAGE)
    if session.get("workflow") != workflow:
        raise SessionMissing(SESSION_EXPIRED_MESSAGE)
    for name in required_fields:
        if session.get(name) is None:
            raise SessionMissing(SESSION_EXPIRED_MESSAGE)
    return session

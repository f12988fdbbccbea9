"""Workflow errors reported back to the Slack user."""

ACTOR_MISMATCH_MESSAGE = "❌ This button can only be used by the original requester."


class WorkflowError(Exception):
    """A failure with a message safe to show in Slack."""

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class ValidationFailure(WorkflowError):
    """User-supplied input is missing or malformed."""


class SessionMissing(WorkflowError):
    """No live session holds the state a confirming action needs."""


class ActorMismatch(WorkflowError):
    """A button was clicked by someone other than the user who issued it."""

    def __init__(self, user_message: str = ACTOR_MISMATCH_MESSAGE) -> None:
        super().__init__(user_message)

"""ASGI entrypoint for the Slack store tools API."""

from slack_store_tools.api.app import create_app
from slack_store_tools.containers import build_container

app = create_app(build_container())

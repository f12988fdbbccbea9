"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_ADMIN_EDIT_URL = (
    "https://www.pathwaybookstore.com/wp-admin/admin.php"
    "?page=wc-orders&action=edit&id="
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    slack_bot_token: str
    slack_signing_secret: str
    woo_url: str
    woo_username: str
    woo_password: str
    woo_timeout_seconds: float = 15.0
    woo_get_retries: int = 2
    woo_retry_backoff_seconds: float = 0.25
    session_ttl_seconds: int = 900
    admin_edit_url: str = DEFAULT_ADMIN_EDIT_URL
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def woo_api_base(self) -> str:
        """Return the WooCommerce REST API base URL."""
        return f"{self.woo_url.rstrip('/')}/wp-json/wc/v3"

"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).
Each external collaborator (orders API, mail transport, Sentry) gets its own
sub-config so it can be instantiated and tested in isolation.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class WebhookSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Shared secret the scheduler sends in the secret-authorization-string header.
    # Empty means every invocation is rejected.
    webhook_secret: str = ""


class OrdersApiSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    orders_api_url: str = ""
    orders_api_admin_secret: str = ""
    orders_api_auth_header: str = "x-hasura-admin-secret"
    orders_api_timeout_seconds: float = 10.0


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    email_transport: Literal["smtp", "zeptomail"] = "smtp"
    email_from_address: str = "reviews@example.com"
    email_from_name: str = "Review Requests"
    email_max_concurrency: int = 5
    email_timeout_seconds: float = 10.0

    # SMTP transport
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = True
    # e.g. "https://ethereal.email/message/{message_id}" for test inboxes
    smtp_preview_url_template: str = ""

    # ZeptoMail HTTP transport
    zepto_api_token: str = ""

    @property
    def is_configured(self) -> bool:
        if self.email_transport == "zeptomail":
            return bool(self.zepto_api_token)
        return bool(self.smtp_host)


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1
    sentry_profile_sample_rate: float = 0.05


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_name: str = "review-request-webhook"
    host: str = "0.0.0.0"
    port: int = 8000

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    webhook: Optional[WebhookSettings] = None
    orders_api: Optional[OrdersApiSettings] = None
    email: Optional[EmailSettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        # Populate sub-configs from the same env/dotenv source
        if self.webhook is None:
            self.webhook = WebhookSettings()
        if self.orders_api is None:
            self.orders_api = OrdersApiSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"

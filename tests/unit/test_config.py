"""Unit tests for AppSettings and sub-configs."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from config import (
    AppSettings,
    EmailSettings,
    OrdersApiSettings,
    WebhookSettings,
)


# ---------------------------------------------------------------------------
# WebhookSettings
# ---------------------------------------------------------------------------


class TestWebhookSettings:
    def test_secret_defaults_to_empty(self, monkeypatch):
        monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
        assert WebhookSettings().webhook_secret == ""

    def test_secret_loaded(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_SECRET", "s3cret")
        assert WebhookSettings().webhook_secret == "s3cret"


# ---------------------------------------------------------------------------
# OrdersApiSettings
# ---------------------------------------------------------------------------


class TestOrdersApiSettings:
    def test_defaults(self, monkeypatch):
        for var in (
            "ORDERS_API_URL",
            "ORDERS_API_ADMIN_SECRET",
            "ORDERS_API_AUTH_HEADER",
            "ORDERS_API_TIMEOUT_SECONDS",
        ):
            monkeypatch.delenv(var, raising=False)
        s = OrdersApiSettings()
        assert s.orders_api_url == ""
        assert s.orders_api_auth_header == "x-hasura-admin-secret"
        assert s.orders_api_timeout_seconds == 10.0

    def test_loads_endpoint_and_credential(self, monkeypatch):
        monkeypatch.setenv("ORDERS_API_URL", "https://orders.example.com/v1/graphql")
        monkeypatch.setenv("ORDERS_API_ADMIN_SECRET", "admin")
        s = OrdersApiSettings()
        assert s.orders_api_url == "https://orders.example.com/v1/graphql"
        assert s.orders_api_admin_secret == "admin"


# ---------------------------------------------------------------------------
# EmailSettings
# ---------------------------------------------------------------------------


class TestEmailSettings:
    def test_smtp_is_default_transport(self, monkeypatch):
        monkeypatch.delenv("EMAIL_TRANSPORT", raising=False)
        s = EmailSettings()
        assert s.email_transport == "smtp"
        assert s.smtp_port == 587
        assert s.smtp_starttls is True
        assert s.email_max_concurrency == 5

    def test_unknown_transport_rejected(self, monkeypatch):
        monkeypatch.setenv("EMAIL_TRANSPORT", "carrier-pigeon")
        with pytest.raises(PydanticValidationError):
            EmailSettings()

    def test_smtp_port_parsed(self, monkeypatch):
        monkeypatch.setenv("SMTP_PORT", "2525")
        assert EmailSettings().smtp_port == 2525


@pytest.mark.parametrize(
    "transport, host, token, expected",
    [
        ("smtp", "smtp.example.com", "", True),
        ("smtp", "", "token", False),
        ("zeptomail", "", "token", True),
        ("zeptomail", "smtp.example.com", "", False),
    ],
    ids=["smtp_ok", "smtp_missing_host", "zepto_ok", "zepto_missing_token"],
)
def test_email_is_configured(transport, host, token, expected):
    s = EmailSettings(email_transport=transport, smtp_host=host, zepto_api_token=token)
    assert s.is_configured is expected


# ---------------------------------------------------------------------------
# AppSettings
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "env, expected",
    [("production", True), ("development", False)],
    ids=["production", "development"],
)
def test_is_production(monkeypatch, env, expected):
    monkeypatch.setenv("ENV", env)
    assert AppSettings().is_production is expected


class TestAppSettings:
    def test_sub_configs_populated(self):
        s = AppSettings()
        for attr in ("webhook", "orders_api", "email", "logging", "sentry"):
            assert getattr(s, attr) is not None, f"sub-config '{attr}' is None"

    def test_listening_port(self, monkeypatch):
        monkeypatch.setenv("PORT", "3000")
        assert AppSettings().port == 3000

    def test_default_port(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        assert AppSettings().port == 8000

    def test_explicit_sub_config_kept(self):
        webhook = WebhookSettings(webhook_secret="given")
        assert AppSettings(webhook=webhook).webhook.webhook_secret == "given"

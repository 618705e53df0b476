"""Integration tests for POST /review-request."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings, EmailSettings, OrdersApiSettings, WebhookSettings
from dependencies import SECRET_HEADER, get_review_request_service
from errors import UpstreamFetchError
from services.review_request_service import ReviewRequestService

from fakes import FakeEmailProvider, FakeOrderSource

SECRET = "s3cret"
NOW = datetime(2024, 3, 15, tzinfo=timezone.utc)


def _settings() -> AppSettings:
    return AppSettings(
        webhook=WebhookSettings(webhook_secret=SECRET),
        orders_api=OrdersApiSettings(orders_api_url="https://orders.test/v1/graphql"),
        email=EmailSettings(smtp_host="smtp.test", email_from_address="reviews@shop.test"),
    )


def _build_test_app(source: FakeOrderSource, provider: FakeEmailProvider):
    settings = _settings()
    app = create_app(settings)
    service = ReviewRequestService(source, provider, settings.email, clock=lambda: NOW)
    app.dependency_overrides[get_review_request_service] = lambda: service
    return app


@pytest.fixture
def source(orders):
    return FakeOrderSource(orders)


@pytest.fixture
def provider():
    return FakeEmailProvider()


@pytest.fixture
def client(source, provider):
    with TestClient(_build_test_app(source, provider)) as c:
        yield c


class TestAuthentication:
    @pytest.mark.parametrize(
        "headers",
        [{}, {SECRET_HEADER: "wrong"}, {SECRET_HEADER: ""}, {SECRET_HEADER: SECRET.upper()}],
        ids=["missing", "wrong", "empty", "case_mismatch"],
    )
    def test_rejected_without_side_effects(self, client, source, provider, headers):
        resp = client.post("/review-request", json={"trigger_type": "cron"}, headers=headers)
        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized"}
        assert source.windows == []
        assert provider.sent == []

    def test_rejected_before_body_is_parsed(self, client, source):
        resp = client.post(
            "/review-request",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 401
        assert source.windows == []

    def test_header_name_case_insensitive(self, client):
        resp = client.post(
            "/review-request", headers={"Secret-Authorization-String": SECRET}
        )
        assert resp.status_code == 200

    def test_unconfigured_secret_rejects_everything(self, source, provider):
        settings = _settings()
        settings.webhook.webhook_secret = ""
        app = create_app(settings)
        app.dependency_overrides[get_review_request_service] = (
            lambda: ReviewRequestService(source, provider, settings.email)
        )
        with TestClient(app) as c:
            resp = c.post("/review-request", headers={SECRET_HEADER: ""})
        assert resp.status_code == 401
        assert source.windows == []


class TestReviewRequest:
    def test_sends_one_email_per_order(self, client, source, provider, orders):
        resp = client.post(
            "/review-request",
            json={"trigger_type": "review_request"},
            headers={SECRET_HEADER: SECRET},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "Review requests sent!"
        assert len(body["outcomes"]) == len(orders)
        for order, outcome in zip(orders, body["outcomes"]):
            assert outcome["messageId"] == f"<{order.user.email}@test>"
            assert outcome["previewUrl"] == f"https://preview.test/{order.user.email}"
            assert "error" not in outcome
        assert [m.to.address for m in provider.sent] == [o.user.email for o in orders]

    def test_window_is_seven_days_back(self, client, source):
        client.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert source.windows[0].as_variables() == {
            "after": "2024-03-08T00:00:00.000Z",
            "before": "2024-03-08T23:59:00.000Z",
        }

    def test_body_optional(self, client):
        resp = client.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.status_code == 200

    @pytest.mark.parametrize(
        "content",
        [b"{not json", b"[1, 2, 3]", b'"just a string"', b'{"trigger_type": 5}'],
        ids=["invalid_json", "array", "string", "wrong_type"],
    )
    def test_unusable_body_ignored(self, client, provider, orders, content):
        resp = client.post(
            "/review-request",
            content=content,
            headers={SECRET_HEADER: SECRET, "Content-Type": "application/json"},
        )
        assert resp.status_code == 200
        assert len(provider.sent) == len(orders)

    def test_deeply_nested_body_ignored(self, client, provider, orders):
        resp = client.post(
            "/review-request",
            content=b"[" * 100_000 + b"]" * 100_000,
            headers={SECRET_HEADER: SECRET, "Content-Type": "application/json"},
        )
        assert resp.status_code == 200
        assert len(resp.json()["outcomes"]) == len(orders)
        assert len(provider.sent) == len(orders)

    def test_partial_failure_still_200(self, source, orders):
        provider = FakeEmailProvider(fail_for=(orders[1].user.email,))
        with TestClient(_build_test_app(source, provider)) as c:
            resp = c.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.status_code == 200
        outcomes = resp.json()["outcomes"]
        assert len(outcomes) == 3
        assert "messageId" in outcomes[0]
        assert outcomes[1].keys() == {"error"}
        assert "mailbox unavailable" in outcomes[1]["error"]
        assert "messageId" in outcomes[2]

    def test_zero_orders(self, provider):
        with TestClient(_build_test_app(FakeOrderSource([]), provider)) as c:
            resp = c.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Review requests sent!", "outcomes": []}
        assert provider.sent == []

    def test_fetch_failure_returns_502_and_sends_nothing(self, provider):
        source = FakeOrderSource(error=UpstreamFetchError("Orders API request failed"))
        with TestClient(_build_test_app(source, provider)) as c:
            resp = c.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.status_code == 502
        assert resp.json() == {"error": "Orders API request failed", "code": "upstream_error"}
        assert provider.sent == []

    def test_unexpected_error_returns_500(self, provider):
        source = FakeOrderSource(error=RuntimeError("kaboom"))
        app = _build_test_app(source, provider)
        with TestClient(app) as c:
            resp = c.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.status_code == 500
        assert resp.json()["code"] == "internal_error"
        assert resp.headers["X-Request-ID"].startswith("req_")
        assert provider.sent == []

    def test_request_id_header(self, client):
        resp = client.post("/review-request", headers={SECRET_HEADER: SECRET})
        assert resp.headers["X-Request-ID"].startswith("req_")

    def test_get_not_allowed(self, client):
        assert client.get("/review-request").status_code == 405

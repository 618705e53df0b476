"""GraphQL implementation of OrderSource.

Sends ``ReviewRequestQuery`` to a Hasura-style GraphQL endpoint using the
admin credential header. Any failure (transport, status, body shape) is raised
as ``UpstreamFetchError`` so the webhook aborts before sending anything.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from config import OrdersApiSettings
from errors import UpstreamFetchError
from infrastructure.http_client import HttpClient
from schemas.models.order import Order
from shared.datetime_utils import DeliveryWindow
from shared.logging import get_logger

log = get_logger(__name__)

REVIEW_REQUEST_OPERATION = "ReviewRequestQuery"

REVIEW_REQUEST_QUERY = """
query ReviewRequestQuery($after: timestamptz!, $before: timestamptz!) {
  orders(
    where: {
      is_reviewed: { _eq: false }
      delivery_date: { _gte: $after, _lte: $before }
    }
  ) {
    id
    delivery_date
    is_reviewed
    user {
      id
      name
      email
    }
    product {
      id
      name
    }
  }
}
"""


class GraphQLOrderSource:
    def __init__(self, settings: OrdersApiSettings, http_client: HttpClient) -> None:
        self._settings = settings
        self._http = http_client

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.orders_api_admin_secret:
            headers[self._settings.orders_api_auth_header] = (
                self._settings.orders_api_admin_secret
            )
        return headers

    async def fetch_unreviewed_orders(self, window: DeliveryWindow) -> list[Order]:
        if not self._settings.orders_api_url:
            log.error("orders_fetch_failed", reason="endpoint_not_configured")
            raise UpstreamFetchError("Orders API endpoint is not configured")

        variables = window.as_variables()
        body = {
            "query": REVIEW_REQUEST_QUERY,
            "operationName": REVIEW_REQUEST_OPERATION,
            "variables": variables,
        }

        try:
            response = await self._http.post(
                self._settings.orders_api_url, json=body, headers=self._headers()
            )
        except httpx.HTTPError as e:
            log.error(
                "orders_fetch_failed",
                reason="transport_error",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise UpstreamFetchError("Orders API request failed") from e

        if not response.is_success:
            log.error(
                "orders_fetch_failed",
                reason="bad_status",
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise UpstreamFetchError(
                "Orders API returned an error status",
                details={"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            log.error("orders_fetch_failed", reason="invalid_json")
            raise UpstreamFetchError("Orders API returned invalid JSON") from e

        orders = self._extract_orders(payload)
        log.info(
            "review_requests_fetched",
            count=len(orders),
            after=variables["after"],
            before=variables["before"],
        )
        return orders

    @staticmethod
    def _extract_orders(payload: Any) -> list[Order]:
        if not isinstance(payload, dict):
            log.error("orders_fetch_failed", reason="unexpected_shape")
            raise UpstreamFetchError("Orders API returned an unexpected body")

        if payload.get("errors"):
            messages = [
                err.get("message", "unknown error") if isinstance(err, dict) else str(err)
                for err in payload["errors"]
            ]
            log.error("orders_fetch_failed", reason="graphql_errors", errors=messages)
            raise UpstreamFetchError(
                "Orders API query failed", details={"errors": messages}
            )

        data = payload.get("data")
        records = data.get("orders") if isinstance(data, dict) else None
        if not isinstance(records, list):
            log.error("orders_fetch_failed", reason="missing_orders")
            raise UpstreamFetchError("Orders API response has no data.orders")

        try:
            return [Order.model_validate(record) for record in records]
        except ValidationError as e:
            log.error(
                "orders_fetch_failed",
                reason="invalid_order_record",
                error_count=e.error_count(),
            )
            raise UpstreamFetchError("Orders API returned malformed orders") from e

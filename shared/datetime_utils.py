"""
Date/time helpers for the review request delivery window.

The window covers the single UTC calendar date seven days before the
invocation: ``[YYYY-MM-DD 00:00:00.000Z, YYYY-MM-DD 23:59:00.000Z]``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone
from typing import Optional

REVIEW_DELAY = timedelta(days=7)

WINDOW_START_TIME = time(0, 0, 0)
# Legacy behaviour: the window ends at 23:59:00, not 23:59:59.999. Orders
# delivered during the last minute of the day are never selected.
WINDOW_END_TIME = time(23, 59, 0)


@dataclass(frozen=True)
class DeliveryWindow:
    start: datetime
    end: datetime

    def as_variables(self) -> dict[str, str]:
        """GraphQL variables for ``ReviewRequestQuery``."""
        return {"after": to_iso_z(self.start), "before": to_iso_z(self.end)}


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return *value* as an aware UTC datetime; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_z(value: datetime) -> str:
    """Render an ISO 8601 UTC timestamp with millisecond precision and ``Z``.

    >>> to_iso_z(datetime(2024, 3, 8, tzinfo=timezone.utc))
    '2024-03-08T00:00:00.000Z'
    """
    return ensure_utc(value).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def compute_delivery_window(now: Optional[datetime] = None) -> DeliveryWindow:
    """Compute the delivery window for orders due a review request.

    Args:
        now: Invocation time. Defaults to the current UTC time.

    Returns:
        A ``DeliveryWindow`` whose bounds fall on the UTC date seven calendar
        days before *now*.
    """
    current = ensure_utc(now) if now is not None else utc_now()
    target_date = (current - REVIEW_DELAY).date()
    return DeliveryWindow(
        start=datetime.combine(target_date, WINDOW_START_TIME, tzinfo=timezone.utc),
        end=datetime.combine(target_date, WINDOW_END_TIME, tzinfo=timezone.utc),
    )

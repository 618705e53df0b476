"""
Request DTO for scheduled-trigger invocations.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class TriggerInvocation(BaseModel):
    """Body sent by the scheduler on each cron tick.

    Nothing here changes handler behaviour; the fields are only logged.
    Unknown keys are ignored so scheduler payload changes never break calls.
    """

    model_config = ConfigDict(extra="ignore")

    trigger_type: Optional[str] = None
    # Cron-trigger envelope fields (Hasura-style schedulers)
    id: Optional[str] = None
    name: Optional[str] = None
    scheduled_time: Optional[str] = None
    comment: Optional[str] = None
    payload: Optional[Any] = None

    def log_context(self) -> dict[str, Any]:
        context = {
            "trigger_type": self.trigger_type,
            "trigger_name": self.name,
            "scheduled_time": self.scheduled_time,
        }
        return {k: v for k, v in context.items() if v is not None}

"""Canonical alert event handed to the fault center.

Webhook ingestion produces only the initial snapshot of an alert; lifecycle
fields are fixed so the fault center treats it as firing immediately.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AlertState(str, Enum):
    PENDING = "pending_alert"
    ALERTING = "alerting"
    PENDING_RECOVERY = "pending_recovery"
    RECOVERED = "recovered"


class AlertEvent(BaseModel):
    """A normalized alert event."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    tenant_id: str = Field(default="", description="Owning tenant")
    event_id: str = Field(description="Unique id of this event")
    datasource_type: str = Field(description="Datasource type tag, e.g. Webhook")
    datasource_id: str
    fingerprint: str = Field(description="Dedup key for alert correlation")
    severity: str = "P2"
    rule_name: str = "Webhook Alert"
    rule_id: str
    labels: dict[str, Any] = Field(default_factory=dict)
    annotations: str = ""
    fault_center_id: str
    status: AlertState = AlertState.ALERTING
    for_duration: int = 0
    eval_interval: int = 0

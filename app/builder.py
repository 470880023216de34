"""Build canonical alert events from mapped webhook fields."""

import uuid
from typing import Any, Callable

from app.models.datasource import WEBHOOK_DATASOURCE_TYPE, Datasource
from app.models.event import AlertEvent, AlertState

DEFAULT_SEVERITY = "P2"
DEFAULT_RULE_NAME = "Webhook Alert"
RULE_ID_PREFIX = "webhook_"


def new_event_id() -> str:
    return uuid.uuid4().hex


def get_string_value(data: dict[str, Any], key: str, default: str) -> str:
    """Return data[key] if it is a string, otherwise the default."""
    value = data.get(key)
    if isinstance(value, str):
        return value
    return default


def build_alert_event(
    datasource: Datasource,
    data: dict[str, Any],
    fault_center_id: str,
    fingerprint: str,
    id_factory: Callable[[], str] = new_event_id,
) -> AlertEvent:
    """Build the initial alert snapshot for a webhook payload.

    Mapped fields of the wrong type fall back to their defaults so that a
    malformed payload still produces an event.
    """
    labels = data.get("labels")
    if not isinstance(labels, dict):
        labels = {}

    return AlertEvent(
        tenant_id=datasource.tenant_id,
        event_id=id_factory(),
        datasource_type=WEBHOOK_DATASOURCE_TYPE,
        datasource_id=datasource.id,
        fingerprint=fingerprint,
        severity=get_string_value(data, "severity", DEFAULT_SEVERITY),
        rule_name=get_string_value(data, "rule_name", DEFAULT_RULE_NAME),
        rule_id=RULE_ID_PREFIX + datasource.id,
        labels=dict(labels),
        annotations=get_string_value(data, "annotations", ""),
        fault_center_id=fault_center_id,
        status=AlertState.ALERTING,
        for_duration=0,
        eval_interval=0,
    )

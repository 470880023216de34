"""Generic webhook datasource adapter."""

from typing import Any

from app.fingerprint import calculate_fingerprint
from app.models.datasource import WEBHOOK_DATASOURCE_TYPE, WebhookConfig
from app.sources.base import BaseSource

LABELS_FIELD = "labels"
LABELS_PREFIX = "labels."

# Payload keys that never contribute to a full-payload fingerprint
RESERVED_FIELDS = frozenset({"faultCenterId", "fingerprint"})


class WebhookSource(BaseSource):
    """Adapter for user-configured webhook datasources."""

    @property
    def name(self) -> str:
        return WEBHOOK_DATASOURCE_TYPE

    @property
    def config(self) -> WebhookConfig:
        return self.datasource.webhook_config or WebhookConfig()

    def check(self) -> bool:
        # Webhooks are pushed to us, there is nothing to probe.
        return True

    def map_fields(self, payload: dict[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}

        for source_field, target_field in self.config.field_mapping.items():
            if source_field not in payload:
                continue
            value = payload[source_field]

            if target_field.startswith(LABELS_PREFIX):
                label_key = target_field[len(LABELS_PREFIX):]
                labels = result.get(LABELS_FIELD)
                # copy so a payload dict mapped onto "labels" is never mutated
                labels = dict(labels) if isinstance(labels, dict) else {}
                labels[label_key] = value
                result[LABELS_FIELD] = labels
            else:
                result[target_field] = value

        return result

    def generate_fingerprint(
        self, payload: dict[str, Any], datasource_id: str, fault_center_id: str
    ) -> str:
        supplied = payload.get("fingerprint")
        if isinstance(supplied, str) and supplied:
            return supplied

        data: dict[str, Any] = {
            "datasource_id": datasource_id,
            "fault_center_id": fault_center_id,
        }

        fields = self.config.fingerprint_fields
        if fields:
            for field in fields:
                if field in payload:
                    data[field] = payload[field]
        else:
            for key, value in payload.items():
                if key not in RESERVED_FIELDS:
                    data[key] = value

        return calculate_fingerprint(data)

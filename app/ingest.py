"""Webhook ingestion: validate, map, fingerprint and build one alert event."""

import logging
from typing import Any, Callable

from app.builder import build_alert_event, new_event_id
from app.datasources import DatasourceStore
from app.errors import BadPayloadError, MissingFieldError, WrongDatasourceTypeError
from app.models.datasource import WEBHOOK_DATASOURCE_TYPE, Datasource
from app.models.event import AlertEvent
from app.sources.base import BaseSource
from app.sources.webhook import WebhookSource

logger = logging.getLogger(__name__)

FAULT_CENTER_FIELD = "faultCenterId"

# Datasource type -> adapter class
SOURCE_TYPES: dict[str, type[BaseSource]] = {
    WEBHOOK_DATASOURCE_TYPE: WebhookSource,
}


def create_source(datasource: Datasource) -> BaseSource:
    """Create the adapter for a datasource."""
    source_cls = SOURCE_TYPES.get(datasource.type)
    if source_cls is None:
        raise WrongDatasourceTypeError(datasource.type)
    return source_cls(datasource)


class WebhookIngestor:
    """Turns raw webhook payloads into alert events."""

    def __init__(
        self,
        store: DatasourceStore,
        id_factory: Callable[[], str] = new_event_id,
    ):
        self._store = store
        self._id_factory = id_factory

    def source_for(self, datasource_id: str) -> BaseSource:
        """Look up a datasource and create its adapter."""
        return create_source(self._store.get(datasource_id))

    def ingest(self, datasource_id: str, payload: Any) -> AlertEvent:
        return self.build(self.source_for(datasource_id), payload)

    def build(self, source: BaseSource, payload: Any) -> AlertEvent:
        """Validate a decoded payload and build its alert event."""
        datasource = source.datasource

        if not isinstance(payload, dict):
            raise BadPayloadError(f"expected a JSON object, got {type(payload).__name__}")

        fault_center_id = payload.get(FAULT_CENTER_FIELD)
        if not isinstance(fault_center_id, str) or not fault_center_id:
            raise MissingFieldError(FAULT_CENTER_FIELD)

        mapped = source.map_fields(payload)
        fingerprint = source.generate_fingerprint(payload, datasource.id, fault_center_id)

        event = build_alert_event(
            datasource, mapped, fault_center_id, fingerprint, id_factory=self._id_factory
        )
        logger.info(
            f"Built event {event.event_id} for datasource={datasource.id} "
            f"faultCenter={fault_center_id} fingerprint={fingerprint}"
        )
        return event

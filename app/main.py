"""Inlet - FastAPI application for webhook alert ingestion."""

import asyncio
import logging
from contextlib import asynccontextmanager, suppress
from typing import Any, AsyncGenerator

import uvicorn
from fastapi import BackgroundTasks, FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from app.config import Settings, get_settings
from app.datasources import DatasourceStore, load_datasources_config
from app.errors import BadPayloadError, IngestError
from app.ingest import WebhookIngestor, create_source
from app.models.datasource import DatasourcesConfig
from app.models.event import AlertEvent
from app.publishers.base import BasePublisher
from app.publishers.http import HttpPublisher
from app.publishers.queue import QueuePublisher

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global instances, set up in lifespan
store: DatasourceStore | None = None
ingestor: WebhookIngestor | None = None
publisher: BasePublisher | None = None
consumer: asyncio.Task[None] | None = None


def create_publisher(settings: Settings) -> BasePublisher:
    """Create the fault center publisher from settings."""
    if settings.fault_center_url:
        return HttpPublisher(
            url=settings.fault_center_url,
            secret=settings.fault_center_secret or None,
            timeout=settings.fault_center_timeout,
        )
    return QueuePublisher(maxsize=settings.queue_maxsize)


async def handle_event(event: AlertEvent) -> None:
    """Final stop for events on the in-process queue."""
    logger.info(
        f"Fault center {event.fault_center_id} received event {event.event_id} "
        f"(rule={event.rule_name}, severity={event.severity}, fingerprint={event.fingerprint})"
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    global store, ingestor, publisher, consumer

    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    # Load datasource configuration
    try:
        config = load_datasources_config(settings.datasources_config_path)
        logger.info(
            f"Loaded {len(config.datasources)} datasource(s) from {settings.datasources_config}"
        )
    except FileNotFoundError:
        logger.error(
            f"Datasources config not found: {settings.datasources_config}. "
            "Create a datasources.yaml file or set DATASOURCES_CONFIG environment variable."
        )
        config = DatasourcesConfig()
    except Exception as e:
        logger.exception(f"Failed to load datasources config: {e}")
        config = DatasourcesConfig()

    store = DatasourceStore(config)
    ingestor = WebhookIngestor(store)
    publisher = create_publisher(settings)
    logger.info(f"Publishing events via {publisher.name}")

    if isinstance(publisher, QueuePublisher):
        consumer = asyncio.create_task(publisher.consume(handle_event))

    logger.info("Inlet started")

    yield

    # Cleanup on shutdown
    if consumer is not None:
        consumer.cancel()
        with suppress(asyncio.CancelledError):
            await consumer
        consumer = None
    store = None
    ingestor = None
    publisher = None
    logger.info("Inlet stopped")


app = FastAPI(
    title="Inlet",
    description="Webhook ingestion service that normalizes third-party payloads into alert events",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/datasources")
async def list_datasources() -> dict[str, list[dict[str, Any]]]:
    """List configured datasources."""
    if not store:
        return {"datasources": []}

    datasources = []
    for ds in store.datasources:
        try:
            healthy = create_source(ds).check()
        except IngestError:
            healthy = False
        datasources.append(
            {
                "id": ds.id,
                "name": ds.name,
                "type": ds.type,
                "enabled": ds.enabled,
                "healthy": healthy,
            }
        )
    return {"datasources": datasources}


async def _read_payload(request: Request) -> Any:
    try:
        return await request.json()
    except (ValueError, RecursionError) as e:
        raise BadPayloadError(str(e)) from e


@app.post("/webhook/{datasource_id}")
async def receive_webhook(
    datasource_id: str, request: Request, background_tasks: BackgroundTasks
) -> JSONResponse:
    """Receive a webhook payload for a datasource."""
    logger.info(f"Received webhook for datasource: {datasource_id}")

    if not ingestor or not publisher:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )

    try:
        source = ingestor.source_for(datasource_id)
        payload = await _read_payload(request)
        event = ingestor.build(source, payload)
    except IngestError as e:
        logger.warning(f"Rejected webhook for datasource {datasource_id}: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.message)

    # Delivery happens after the response; failures are logged by the publisher
    background_tasks.add_task(publisher.publish_safe, event)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "ok",
            "message": "Alert received",
            "eventId": event.event_id,
            "fingerprint": event.fingerprint,
        },
    )


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()

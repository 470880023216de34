import time
from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

import app.main as main
from app.config import get_settings
from app.fingerprint import calculate_fingerprint
from app.models.event import AlertEvent
from app.publishers.queue import QueuePublisher

CONFIG_YAML = """
datasources:
  - id: ds1
    tenantId: t1
    name: Bridge
    type: Webhook
    webhookConfig:
      fieldMapping:
        severity: severity
        host: labels.host
  - id: prom
    name: Prometheus
    type: Prometheus
"""


@pytest.fixture
def handled(monkeypatch: pytest.MonkeyPatch) -> list[AlertEvent]:
    events: list[AlertEvent] = []

    async def record(event: AlertEvent) -> None:
        events.append(event)

    monkeypatch.setattr(main, "handle_event", record)
    return events


@pytest.fixture
def client(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, handled: list[AlertEvent]
) -> Iterator[TestClient]:
    path = tmp_path / "datasources.yaml"
    path.write_text(CONFIG_YAML, encoding="utf-8")
    monkeypatch.setenv("DATASOURCES_CONFIG", str(path))
    monkeypatch.setenv("FAULT_CENTER_URL", "")
    get_settings.cache_clear()

    with TestClient(main.app) as test_client:
        yield test_client

    get_settings.cache_clear()


def wait_until(condition: Callable[[], bool], timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_list_datasources(client: TestClient) -> None:
    data = client.get("/datasources").json()["datasources"]
    assert data == [
        {"id": "ds1", "name": "Bridge", "type": "Webhook", "enabled": True, "healthy": True},
        {"id": "prom", "name": "Prometheus", "type": "Prometheus", "enabled": True, "healthy": False},
    ]


def test_webhook_accepted_and_published(client: TestClient, handled: list[AlertEvent]) -> None:
    payload = {"faultCenterId": "fc1", "severity": "P1", "host": "node-1"}

    response = client.post("/webhook/ds1", json=payload)

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    expected_fp = calculate_fingerprint(
        {"datasource_id": "ds1", "fault_center_id": "fc1", "severity": "P1", "host": "node-1"}
    )
    assert body["fingerprint"] == expected_fp

    assert wait_until(lambda: len(handled) == 1)
    event = handled[0]
    assert event.event_id == body["eventId"]
    assert event.severity == "P1"
    assert event.labels == {"host": "node-1"}
    assert event.rule_id == "webhook_ds1"


def test_queue_is_drained_while_running(client: TestClient, handled: list[AlertEvent]) -> None:
    assert isinstance(main.publisher, QueuePublisher)
    assert main.consumer is not None

    for i in range(200):
        payload = {"faultCenterId": "fc1", "host": f"node-{i}"}
        assert client.post("/webhook/ds1", json=payload).status_code == 200

    assert wait_until(lambda: len(handled) == 200)
    assert main.publisher.queue.qsize() == 0
    assert len({event.fingerprint for event in handled}) == 200


def test_consumer_cancelled_on_shutdown(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATASOURCES_CONFIG", str(tmp_path / "absent.yaml"))
    monkeypatch.setenv("FAULT_CENTER_URL", "")
    get_settings.cache_clear()

    with TestClient(main.app):
        task = main.consumer
        assert task is not None

    assert task.cancelled()
    assert main.consumer is None
    get_settings.cache_clear()


def test_webhook_supplied_fingerprint(client: TestClient) -> None:
    payload = {"faultCenterId": "fc1", "fingerprint": "custom-123", "severity": "P3"}
    response = client.post("/webhook/ds1", json=payload)
    assert response.json()["fingerprint"] == "custom-123"


@pytest.mark.parametrize(
    ("datasource_id", "content", "status_code", "detail"),
    [
        ("missing", b'{"faultCenterId": "fc1"}', 404, "datasource not found"),
        ("prom", b'{"faultCenterId": "fc1"}', 400, "wrong datasource type"),
        ("ds1", b"{not json", 400, "bad payload"),
        ("ds1", b"[1, 2]", 400, "bad payload"),
        ("ds1", b"[" * 5000 + b"]" * 5000, 400, "bad payload"),
        ("ds1", b'{"severity": "P1"}', 400, "missing required field"),
        ("missing", b"{not json", 404, "datasource not found"),
    ],
)
def test_webhook_rejections(
    client: TestClient,
    handled: list[AlertEvent],
    datasource_id: str,
    content: bytes,
    status_code: int,
    detail: str,
) -> None:
    response = client.post(
        f"/webhook/{datasource_id}",
        content=content,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == status_code
    assert response.json() == {"detail": detail}
    assert handled == []
    assert main.publisher.queue.qsize() == 0


def test_missing_config_starts_empty(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATASOURCES_CONFIG", str(tmp_path / "absent.yaml"))
    get_settings.cache_clear()

    with TestClient(main.app) as test_client:
        assert test_client.get("/datasources").json() == {"datasources": []}
        response = test_client.post("/webhook/ds1", json={"faultCenterId": "fc1"})
        assert response.status_code == 404

    get_settings.cache_clear()


def test_untyped_datasource_is_not_served(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "datasources.yaml"
    path.write_text("datasources:\n  - id: ds1\n", encoding="utf-8")
    monkeypatch.setenv("DATASOURCES_CONFIG", str(path))
    get_settings.cache_clear()

    with TestClient(main.app) as test_client:
        assert test_client.get("/datasources").json() == {"datasources": []}
        response = test_client.post("/webhook/ds1", json={"faultCenterId": "fc1"})
        assert response.status_code == 404

    get_settings.cache_clear()

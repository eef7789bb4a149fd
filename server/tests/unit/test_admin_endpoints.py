# server/tests/unit/test_admin_endpoints.py
from __future__ import annotations

import datetime as dt

import pytest

from monitor_server.core.config import settings
from monitor_server.infrastructure.persistence.database.models import MetricRecord

pytestmark = pytest.mark.unit


def test_health(api):
    r = api.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_clients_crud(api):
    r = api.post("/api/clients", json={"hostname": "  web-02  "})
    assert r.status_code == 201
    created = r.json()
    assert created["hostname"] == "web-02"
    assert created["token"] and created["id"]

    api.post("/api/clients", json={"hostname": "app-01"})
    listed = api.get("/api/clients").json()
    assert [c["hostname"] for c in listed] == ["app-01", "web-02"]
    # le jeton n'est jamais exposé en lecture
    assert all("token" not in c for c in listed)

    r = api.get(f"/api/clients/{created['id']}")
    assert r.status_code == 200
    assert r.json()["id"] == created["id"]

    assert api.get("/api/clients/nope").status_code == 404
    assert api.delete(f"/api/clients/{created['id']}").status_code == 204
    assert api.get(f"/api/clients/{created['id']}").status_code == 404


def test_blank_hostname_is_422(api):
    assert api.post("/api/clients", json={"hostname": "   "}).status_code == 422


def test_metrics_window_and_latest(api, Session, make_client):
    client_id, _ = make_client()
    now = dt.datetime.now(dt.timezone.utc)
    with Session() as s:
        for i in range(70):
            s.add(
                MetricRecord(
                    client_id=client_id,
                    cpu_usage=float(i),
                    ram_usage=1.0,
                    disk_usage=1.0,
                    inode_usage=1.0,
                    timestamp=now - dt.timedelta(minutes=70 - i),
                )
            )
        # hors fenêtre 24 h
        s.add(
            MetricRecord(
                client_id=client_id,
                cpu_usage=-1.0,
                ram_usage=1.0,
                disk_usage=1.0,
                inode_usage=1.0,
                timestamp=now - dt.timedelta(hours=30),
            )
        )
        s.commit()

    window = api.get(f"/api/metrics/{client_id}").json()
    assert len(window) == 70
    assert window[0]["cpu_usage"] == 69.0  # plus récent d'abord
    assert window[0]["timestamp"].endswith("+00:00")

    limited = api.get(f"/api/metrics/{client_id}", params={"hours": 48, "limit": 5}).json()
    assert [m["cpu_usage"] for m in limited] == [69.0, 68.0, 67.0, 66.0, 65.0]
    assert len(api.get(f"/api/metrics/{client_id}", params={"hours": 48, "limit": 1000}).json()) == 71

    latest = api.get(f"/api/metrics/{client_id}/latest").json()
    assert len(latest) == 60
    assert latest[0]["cpu_usage"] == 69.0

    assert api.get("/api/metrics/unknown").status_code == 404
    assert api.get("/api/metrics/unknown/latest").status_code == 404


def test_alert_rules_crud(api, make_client):
    client_id, _ = make_client()

    r = api.post("/api/alerts", json={"metric_type": "CPU", "threshold": 80})
    assert r.status_code == 201
    global_rule = r.json()
    assert global_rule["client_id"] is None
    assert global_rule["metric_type"] == "cpu"
    assert global_rule["duration_sec"] == 30

    r = api.post("/api/alerts", json={"client_id": client_id, "metric_type": "disk", "threshold": 90, "duration_sec": 120})
    assert r.status_code == 201
    assert r.json()["duration_sec"] == 120

    assert api.post("/api/alerts", json={"client_id": "ghost", "metric_type": "cpu", "threshold": 1}).status_code == 404

    rules = api.get("/api/alerts").json()
    assert [rule["metric_type"] for rule in rules] == ["cpu", "disk"]

    assert api.delete(f"/api/alerts/{global_rule['id']}").status_code == 204
    assert api.delete(f"/api/alerts/{global_rule['id']}").status_code == 404
    assert len(api.get("/api/alerts").json()) == 1


def test_settings_upsert(api):
    assert api.get("/api/settings").json() == {}
    r = api.post("/api/settings", json={"slack_webhook_url": "https://hooks.example/a"})
    assert r.status_code == 200
    api.post("/api/settings", json={"slack_webhook_url": "https://hooks.example/b", "theme": "dark"})
    assert api.get("/api/settings").json() == {"slack_webhook_url": "https://hooks.example/b", "theme": "dark"}


def test_admin_key_enforced_when_configured(api, make_client, sample_payload, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "s3cret")
    _, token = make_client()

    assert api.get("/api/clients").status_code == 401
    assert api.get("/api/clients", headers={"X-API-Key": "wrong"}).status_code == 403
    assert api.get("/api/clients", headers={"X-API-Key": "s3cret"}).status_code == 200

    # ingestion, health : jamais soumis à la clé admin
    assert api.get("/health").status_code == 200
    r = api.post(
        "/api/report",
        json={"hostname": "web-01", "metrics": [sample_payload()]},
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 200


@pytest.mark.parametrize("path", ["/api/metrics/{id}", "/api/stats/{id}"])
def test_window_hours_out_of_range_is_422(api, make_client, path):
    client_id, _ = make_client()
    r = api.get(path.format(id=client_id), params={"hours": 1_000_000_000})
    assert r.status_code == 422
    # borne haute incluse : un an de fenêtre
    assert api.get(path.format(id=client_id), params={"hours": 24 * 365}).status_code == 200

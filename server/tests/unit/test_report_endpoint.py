# server/tests/unit/test_report_endpoint.py
from __future__ import annotations

import json

import httpx
import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from monitor_server.application.container import services_from_app
from monitor_server.infrastructure.notifications.providers.slack_provider import SlackProvider
from monitor_server.infrastructure.persistence.database.models import AlertRule, Client, MetricRecord
from monitor_server.infrastructure.persistence.repositories import alert_rule_repository

pytestmark = pytest.mark.unit


def _report(api, token, metrics, version="0.3.0", hostname="web-01"):
    return api.post(
        "/api/report",
        json={"hostname": hostname, "version": version, "metrics": metrics},
        headers={"Authorization": f"Bearer {token}"},
    )


def _add_rule(Session, metric_type="cpu", threshold=80.0, client_id=None):
    with Session() as s:
        s.add(AlertRule(client_id=client_id, metric_type=metric_type, threshold=threshold, duration_sec=30))
        s.commit()


def test_valid_batch_is_stored_in_order(api, Session, make_client, sample_payload):
    client_id, token = make_client()
    r = _report(api, token, [sample_payload(cpu=1.0), sample_payload(cpu=2.0), sample_payload(cpu=3.0)])

    assert r.status_code == 200
    assert r.json() == {"status": "accepted", "inserted": 3}

    with Session() as s:
        rows = s.scalars(select(MetricRecord).where(MetricRecord.client_id == client_id).order_by(MetricRecord.id)).all()
        assert [row.cpu_usage for row in rows] == [1.0, 2.0, 3.0]
        client = s.get(Client, client_id)
        assert client.version == "0.3.0"


def test_missing_version_keeps_previous_one(api, Session, make_client, sample_payload):
    client_id, token = make_client()
    _report(api, token, [sample_payload()], version="1.2.0")
    _report(api, token, [sample_payload()], version=None)
    with Session() as s:
        assert s.get(Client, client_id).version == "1.2.0"


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-token"},
        {"Authorization": "Basic abc"},
    ],
)
def test_bad_token_is_401_and_nothing_stored(api, Session, sample_payload, headers):
    r = api.post("/api/report", json={"hostname": "x", "metrics": [sample_payload()]}, headers=headers)
    assert r.status_code == 401
    with Session() as s:
        assert s.scalars(select(MetricRecord)).all() == []


def test_empty_batch_is_accepted(api, make_client):
    _, token = make_client()
    r = _report(api, token, [])
    assert r.status_code == 200
    assert r.json()["inserted"] == 0


def test_only_last_sample_is_evaluated(api, Session, make_client, sample_payload):
    client_id, token = make_client()
    _add_rule(Session, "cpu", 80.0)
    services = services_from_app(api.app)

    # brèche au milieu du batch, dernier échantillon sous le seuil
    _report(api, token, [sample_payload(cpu=10.0), sample_payload(cpu=99.0), sample_payload(cpu=20.0)])
    assert services.debounce.last_fired(client_id, "cpu") is None

    _report(api, token, [sample_payload(cpu=10.0), sample_payload(cpu=91.2)])
    assert services.debounce.last_fired(client_id, "cpu") is not None


def test_breach_enqueues_one_alert_then_debounces(api, Session, make_client, sample_payload):
    client_id, token = make_client()
    _add_rule(Session, "cpu", 80.0, client_id=client_id)
    services = services_from_app(api.app)
    # pas de webhook : le worker consomme et ignore les événements
    sent = []
    services.dispatcher.send = lambda event: sent.append(event) or True

    _report(api, token, [sample_payload(cpu=95.0)])
    _report(api, token, [sample_payload(cpu=96.0)])

    assert len(sent) == 1
    assert sent[0].client_id == client_id
    assert sent[0].observed_value == 95.0


def test_rule_for_other_client_does_not_fire(api, Session, make_client, sample_payload):
    _, token = make_client("a")
    other_id, _ = make_client("b")
    _add_rule(Session, "cpu", 10.0, client_id=other_id)
    sent = []
    services_from_app(api.app).dispatcher.send = lambda event: sent.append(event) or True

    _report(api, token, [sample_payload(cpu=90.0)])
    assert sent == []


def test_rule_storage_failure_still_returns_200(api, Session, make_client, sample_payload, monkeypatch, caplog):
    client_id, token = make_client()

    def _boom(self, client_id):
        raise OperationalError("SELECT alert_rules", {}, Exception("db gone"))

    monkeypatch.setattr(alert_rule_repository.AlertRuleRepository, "for_client", _boom)

    r = _report(api, token, [sample_payload(cpu=99.0)])
    assert r.status_code == 200
    assert "Alert evaluation failed" in caplog.text
    with Session() as s:
        assert len(s.scalars(select(MetricRecord).where(MetricRecord.client_id == client_id)).all()) == 1


def test_delete_client_cascades(api, Session, make_client, sample_payload):
    client_id, token = make_client()
    _add_rule(Session, "cpu", 80.0, client_id=client_id)
    _report(api, token, [sample_payload(), sample_payload()])

    assert api.delete(f"/api/clients/{client_id}").status_code == 204

    with Session() as s:
        assert s.scalars(select(MetricRecord)).all() == []
        assert s.scalars(select(AlertRule)).all() == []
    assert api.delete(f"/api/clients/{client_id}").status_code == 404


def test_breach_reaches_webhook_through_running_worker(api, Session, make_client, sample_payload):
    client_id, token = make_client("web-01")
    _add_rule(Session, "cpu", 80.0)
    assert api.post("/api/settings", json={"slack_webhook_url": "https://hooks.slack.test/T/B/X"}).status_code == 200

    bodies = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append((str(request.url), json.loads(request.content)))
        return httpx.Response(200, text="ok")

    dispatcher = services_from_app(api.app).dispatcher
    transport = httpx.MockTransport(handler)
    dispatcher._provider_factory = lambda url: SlackProvider(url, transport=transport)

    _report(api, token, [sample_payload(cpu=50.0), sample_payload(cpu=91.2)])
    _report(api, token, [sample_payload(cpu=93.0)])  # même clé, dans la fenêtre
    api.portal.call(dispatcher.join)

    assert bodies == [
        (
            "https://hooks.slack.test/T/B/X",
            {"text": "🚨 *Alert*: CPU on `web-01` is at 91.2% (threshold: 80.0%)", "mrkdwn": True},
        )
    ]

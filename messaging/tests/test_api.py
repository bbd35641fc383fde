# SPDX-License-Identifier: MIT
# Copyright (c) 2025 FieldOps contributors

"""Integration tests for the messaging service API."""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from prometheus_client import CollectorRegistry

from app.errors import StoreError
from fieldops_metrics import PrometheusMetricsCollector
from main import app


@pytest.fixture
def client(service, monkeypatch):
    """Create a test client with the service fixture installed."""
    import main
    monkeypatch.setattr(main, "messaging_service", service)
    monkeypatch.setattr(main, "trust_user_id_header", True)

    return TestClient(app)


def as_user(user_id):
    return {"X-User-Id": user_id}


def send(client, user_id, recipients, subject="Kickoff", body="Starting Monday", thread_id=None):
    payload = {"recipients": recipients, "subject": subject, "body": body}
    if thread_id:
        payload["thread_id"] = thread_id
    return client.post("/api/messages", json=payload, headers=as_user(user_id))


@pytest.mark.integration
def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["service"] == "messaging"
    assert response.json()["status"] == "healthy"


@pytest.mark.integration
def test_service_not_initialized(monkeypatch):
    import main
    monkeypatch.setattr(main, "messaging_service", None)

    response = TestClient(app).get("/api/messages/unread-count", headers=as_user("c"))

    assert response.status_code == 503
    assert response.json()["error"] == "service_unavailable"


@pytest.mark.integration
@pytest.mark.parametrize("headers", [{}, {"X-User-Id": "ghost"}, {"X-User-Id": "gone"}])
def test_authentication_required(client, headers):
    response = client.get("/api/messages/conversations", headers=headers)

    assert response.status_code == 401
    assert response.json()["success"] is False
    assert response.json()["error"] == "unauthorized"


@pytest.mark.integration
def test_user_id_header_ignored_unless_trusted(client, monkeypatch):
    import main
    monkeypatch.setattr(main, "trust_user_id_header", False)

    response = client.get("/api/messages/unread-count", headers=as_user("root"))

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_request_state_identity_wins_over_header(service, monkeypatch):
    import main
    monkeypatch.setattr(main, "trust_user_id_header", True)
    request = Mock(state=SimpleNamespace(user_id="c"), headers={"X-User-Id": "root"})

    assert main.current_user(request, service).id == "c"


def test_request_state_identity_used_without_trusted_header(service, monkeypatch):
    import main
    monkeypatch.setattr(main, "trust_user_id_header", False)
    request = Mock(state=SimpleNamespace(user_id="pm"), headers={})

    assert main.current_user(request, service).id == "pm"


@pytest.mark.integration
def test_send_and_read_flow(client):
    sent = send(client, "admin", ["c"])
    assert sent.status_code == 201
    body = sent.json()
    assert body["success"] is True
    message_id = body["data"]["id"]

    unread = client.get("/api/messages/unread-count", headers=as_user("c"))
    assert unread.json()["data"] == {"unread_count": 1}

    inbox = client.get("/api/messages/conversations", headers=as_user("c")).json()["data"]
    assert inbox["pagination"]["total"] == 1
    assert inbox["conversations"][0]["thread_id"] == message_id

    reply = send(client, "c", ["admin"], subject="Re: Kickoff", body="Sounds good", thread_id=message_id)
    assert reply.status_code == 201
    assert reply.json()["data"]["thread_id"] == message_id

    thread = client.get(f"/api/messages/conversations/{message_id}/messages", headers=as_user("admin"))
    assert thread.status_code == 200
    assert [m["body"] for m in thread.json()["data"]["messages"]] == ["Starting Monday", "Sounds good"]

    unread = client.get("/api/messages/unread-count", headers=as_user("admin"))
    assert unread.json()["data"]["unread_count"] == 0


@pytest.mark.integration
def test_thread_key_in_path(client):
    send(client, "admin", ["c"])
    thread_key = client.get("/api/messages/conversations", headers=as_user("c")).json()["data"][
        "conversations"][0]["thread_key"]

    response = client.patch(f"/api/messages/conversations/{thread_key}/read", headers=as_user("c"))

    assert response.status_code == 200
    assert response.json()["data"] == {"updated": 1}


@pytest.mark.integration
def test_forbidden_recipient(client):
    response = send(client, "c", ["d"])

    assert response.status_code == 403
    body = response.json()
    assert body["error"] == "forbidden"
    assert body["details"]["offending_ids"] == ["d"]


@pytest.mark.integration
def test_validation_error_envelope(client):
    response = send(client, "admin", ["c"], subject="   ")

    assert response.status_code == 400
    assert response.json()["details"] == {"field": "subject", "reason": "must not be empty"}


@pytest.mark.integration
def test_body_schema_error_is_400(client):
    response = client.post("/api/messages", json={"subject": "s", "body": "b"}, headers=as_user("admin"))

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"
    assert response.json()["details"]["field"] == "recipients"


@pytest.mark.integration
def test_invalid_paging_is_400(client):
    response = client.get("/api/messages/conversations?page=0", headers=as_user("c"))

    assert response.status_code == 400
    assert response.json()["details"]["field"] == "page"


@pytest.mark.integration
def test_unknown_thread_is_404(client):
    response = client.get("/api/messages/conversations/p:nobody/messages", headers=as_user("c"))

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


@pytest.mark.integration
def test_delete_requires_super_admin(client):
    send(client, "admin", ["c"])

    response = client.delete("/api/messages/conversations/p:admin,c", headers=as_user("admin"))

    assert response.status_code == 403


@pytest.mark.integration
def test_super_admin_delete(client):
    send(client, "root", ["c"])

    response = client.delete("/api/messages/conversations/p:c,root", headers=as_user("root"))

    assert response.status_code == 200
    assert response.json()["data"] == {"deleted": 1}
    inbox = client.get("/api/messages/conversations", headers=as_user("root")).json()["data"]
    assert inbox["conversations"] == []


@pytest.mark.integration
def test_recipients_endpoint(client):
    response = client.get("/api/messages/recipients", headers=as_user("c"))

    assert response.status_code == 200
    assert [r["id"] for r in response.json()["data"]["recipients"]] == ["admin", "pm", "root"]


@pytest.mark.integration
def test_store_error_is_500(client, service):
    service.message_store.find_visible = Mock(side_effect=StoreError("Message store unavailable"))

    response = client.get("/api/messages/unread-count", headers=as_user("c"))

    assert response.status_code == 500
    assert response.json()["error"] == "store_error"


@pytest.mark.integration
def test_unexpected_error_is_reported(client, service, error_reporter):
    service.aggregator.unread_count = Mock(side_effect=KeyError("created_at"))

    response = client.get("/api/messages/unread-count", headers=as_user("c"))

    assert response.status_code == 500
    assert response.json()["error"] == "internal_error"
    assert error_reporter.get_errors(KeyError)[0]["context"]["operation"] == "unread_count"


@pytest.mark.integration
def test_metrics_endpoint(client, service):
    response = client.get("/metrics")
    assert response.status_code == 404

    service.metrics_collector = PrometheusMetricsCollector(registry=CollectorRegistry())
    send(client, "admin", ["c"])

    response = client.get("/metrics")
    assert response.status_code == 200
    assert "fieldops_messaging_messages_sent_total 1.0" in response.text


@pytest.mark.integration
def test_stats(client):
    send(client, "admin", ["c"])

    response = client.get("/stats")

    assert response.json()["messages_sent"] == 1

"""Tests pour l'endpoint de santé de l'application."""

from shelter.core.http_constants import HTTP_OK


def test_health(client):
    """Teste que l'endpoint de santé retourne un statut OK et l'état de la base."""
    r = client.get("/health")
    assert r.status_code == HTTP_OK
    assert r.json()["status"] == "ok"
    assert r.json()["database"] == "ok"


def test_request_id_is_propagated(client):
    r = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert r.headers["X-Request-ID"] == "req-123"
    assert int(r.headers["X-Process-Time-ms"]) >= 0


def test_request_id_in_error_envelope(client):
    r = client.get("/auth/me", headers={"X-Request-ID": "req-456"})
    assert r.json()["trace_id"] == "req-456"

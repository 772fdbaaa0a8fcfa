"""Tests pour les métriques Prometheus.

Vérifie l'exposition de `/metrics` et les compteurs métier de transitions de statut.
"""

from prometheus_client import REGISTRY

from shelter.app.metrics import record_transition
from shelter.core.http_constants import HTTP_OK
from tests.helpers import auth_headers


def _transitions(to: str) -> float:
    return REGISTRY.get_sample_value("animal_status_transitions_total", {"to": to}) or 0.0


def test_metrics_exposed(client):
    """Teste que l'endpoint /metrics expose les métriques Prometheus."""
    client.get("/health")
    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b"animal_bulk_updates_total" in r.content


def test_record_transition_ignores_noop():
    before = _transitions("foster")
    record_transition("foster", "foster")
    assert _transitions("foster") == before
    record_transition("available", "foster")
    assert _transitions("foster") == before + 1


def test_admin_update_counts_transition(client, seed):
    gid = seed.group("dogs")
    admin = seed.user("root", is_admin=True)
    animal = seed.animal(gid, "Rex")
    before = _transitions("bite_quarantine")
    r = client.put(
        f"/admin/animals/{animal.id}", json={"status": "bite_quarantine"}, headers=auth_headers(admin)
    )
    assert r.status_code == HTTP_OK
    assert _transitions("bite_quarantine") == before + 1

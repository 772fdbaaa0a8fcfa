"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et métier (transitions de statut, mises à jour groupées)
exposées sur `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter(tags=["metrics"])

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Business metrics
ANIMAL_STATUS_TRANSITIONS = Counter(
    "animal_status_transitions_total",
    "Status changes applied to single animals",
    ["to"],
)
ANIMAL_BULK_UPDATES = Counter(
    "animal_bulk_updates_total",
    "Bulk animal update requests by outcome",
    ["outcome"],
)


def record_transition(previous_status: str, new_status: str) -> None:
    """Compte une transition si le statut a réellement changé."""
    if previous_status != new_status:
        ANIMAL_STATUS_TRANSITIONS.labels(new_status).inc()


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Le label `route` utilise le gabarit de la route (`/groups/{group_id}/animals`) quand il est
    connu, pour borner la cardinalité.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route_obj = request.scope.get("route")
        route = getattr(route_obj, "path", None) or "unmatched"
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response

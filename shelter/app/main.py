"""
Application principale FastAPI.

Ce module assemble les composants de l'application de gestion des animaux du refuge:
middlewares, gestion d'erreurs, routes et métriques.

Responsabilités du module:
- Initialiser le logging structuré et le tracing optionnel
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, timing, Prometheus, CORS)
- Monter les routers (santé, auth, groupes, animaux, étiquettes, édition groupée,
  administration, métriques)
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shelter.api.errors import register_error_handlers
from shelter.api.routes_admin import router as admin_router
from shelter.api.routes_animals import router as animals_router
from shelter.api.routes_auth import router as auth_router
from shelter.api.routes_bulk import router as bulk_router
from shelter.api.routes_groups import router as groups_router
from shelter.api.routes_health import router as health_router
from shelter.api.routes_tags import router as tags_router
from shelter.app.metrics import PrometheusMiddleware, metrics_router
from shelter.app.tracing import setup_tracing
from shelter.core.container import container
from shelter.core.logging import setup_logging
from shelter.middlewares.request_id import RequestIDMiddleware
from shelter.middlewares.timing import TimingMiddleware


def create_app() -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog) et le tracing OTLP si configuré
    - Ajoute les middlewares utiles au debug/traçabilité
    - Enregistre les gestionnaires d'erreurs (enveloppe standard)
    - Publie les routes
    """
    settings = container.settings
    setup_logging(debug=settings.APP_DEBUG)
    setup_tracing()
    # APP_DEBUG ne règle que le niveau de log: aucune trace renvoyée au client.
    app = FastAPI(title=settings.APP_NAME)
    if settings.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[str(o).rstrip("/") for o in settings.CORS_ORIGINS],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(groups_router)
    app.include_router(animals_router)
    app.include_router(tags_router)
    app.include_router(bulk_router)
    app.include_router(admin_router)
    app.include_router(metrics_router)
    return app


app = create_app()

"""Taxonomie des erreurs métier.

Les opérations du domaine lèvent ces exceptions avant toute écriture (fail-fast). La couche API
les convertit en enveloppe d'erreur standard avec le statut HTTP associé.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import structlog
from sqlalchemy.exc import SQLAlchemyError

log = structlog.get_logger(__name__)


class ShelterError(Exception):
    """Erreur métier de base: code stable, message court et statut HTTP."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(ShelterError):
    status_code = 401
    code = "UNAUTHORIZED"


class Forbidden(ShelterError):
    status_code = 403
    code = "FORBIDDEN"


class BadRequest(ShelterError):
    status_code = 400
    code = "BAD_REQUEST"


class NotFound(ShelterError):
    status_code = 404
    code = "NOT_FOUND"


class Conflict(ShelterError):
    status_code = 409
    code = "CONFLICT"


class InternalError(ShelterError):
    """Échec de persistance; le détail reste dans les logs."""

    status_code = 500
    code = "INTERNAL_ERROR"


@contextmanager
def write_guard(message: str, **context) -> Iterator[None]:
    """Convertit un échec de persistance en `InternalError(message)`, détail journalisé."""
    try:
        yield
    except SQLAlchemyError as err:
        log.error("write_failed", reason=message, error=type(err).__name__, **context)
        raise InternalError(message) from err

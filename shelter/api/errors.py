"""Gestion standardisée des erreurs API avec enveloppes d'erreur.

Ce module fournit une gestion centralisée des erreurs avec des enveloppes standardisées, des codes
d'erreur cohérents et un support pour le tracing des requêtes. Aucun détail interne (requête SQL,
trace d'exécution) n'est renvoyé au client.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shelter.domain.errors import ShelterError

log = logging.getLogger(__name__)


@dataclass
class ErrorEnvelope:
    """Standard error envelope for API responses."""

    code: str
    message: str
    trace_id: str | None = None
    details: dict[str, Any] | None = None


class APIError(HTTPException):
    """Custom API error with standard envelope."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize an API error with standardized envelope."""
        super().__init__(status_code=status_code, detail=message)
        self.code = code
        self.message = message
        self.trace_id = trace_id
        self.details = details


# Common error codes
class ErrorCodes:
    """Standard error codes for the API."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_STATUS_CODES = {
    400: ErrorCodes.BAD_REQUEST,
    401: ErrorCodes.UNAUTHORIZED,
    403: ErrorCodes.FORBIDDEN,
    404: ErrorCodes.NOT_FOUND,
    405: ErrorCodes.METHOD_NOT_ALLOWED,
    409: ErrorCodes.CONFLICT,
    500: ErrorCodes.INTERNAL_ERROR,
}


def create_error_response(
    status_code: int,
    code: str,
    message: str,
    trace_id: str | None = None,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Create a standardized error response."""
    envelope = ErrorEnvelope(code=code, message=message, trace_id=trace_id, details=details)
    return JSONResponse(
        status_code=status_code,
        content={
            "code": envelope.code,
            "message": envelope.message,
            "trace_id": envelope.trace_id,
            **({"details": envelope.details} if envelope.details else {}),
        },
    )


def extract_trace_id(request: Request) -> str | None:
    """Extract trace ID from request headers or request state."""
    trace_id = request.headers.get("X-Request-ID")
    if trace_id:
        return trace_id
    return getattr(request.state, "trace_id", None)


def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions with standard envelope."""
    trace_id = extract_trace_id(request) or exc.trace_id
    log.warning(
        "API error occurred",
        extra={"code": exc.code, "status_code": exc.status_code, "trace_id": trace_id},
    )
    return create_error_response(exc.status_code, exc.code, exc.message, trace_id, exc.details)


def handle_shelter_error(request: Request, exc: ShelterError) -> JSONResponse:
    """Convertit une erreur métier en enveloppe standard."""
    trace_id = extract_trace_id(request)
    if exc.status_code >= 500:
        log.error(
            "Domain error occurred",
            extra={"code": exc.code, "trace_id": trace_id, "cause": repr(exc.__cause__)},
        )
    else:
        log.info(
            "Domain error occurred",
            extra={"code": exc.code, "status_code": exc.status_code, "trace_id": trace_id},
        )
    return create_error_response(exc.status_code, exc.code, exc.message, trace_id)


def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle FastAPI HTTPException with standard envelope."""
    trace_id = extract_trace_id(request)
    code = _STATUS_CODES.get(exc.status_code, "HTTP_ERROR")
    return create_error_response(exc.status_code, code, str(exc.detail), trace_id)


def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Corps de requête mal formé -> 400 avec la liste des champs en erreur."""
    trace_id = extract_trace_id(request)
    errors = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": str(err.get("msg", ""))}
        for err in exc.errors()
    ]
    return create_error_response(
        400, ErrorCodes.BAD_REQUEST, "invalid request", trace_id, {"errors": errors}
    )


def handle_generic_exception(request: Request, exc: Exception) -> JSONResponse:
    """Handle generic exceptions with standard envelope."""
    trace_id = extract_trace_id(request)
    log.error(
        "Unexpected error occurred",
        extra={"trace_id": trace_id, "exception_type": type(exc).__name__},
        exc_info=True,
    )
    return create_error_response(
        500, ErrorCodes.INTERNAL_ERROR, "internal server error", trace_id
    )


def register_error_handlers(app: FastAPI) -> None:
    """Branche les gestionnaires d'erreurs sur l'application."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(ShelterError, handle_shelter_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_generic_exception)


# Convenience functions for common errors
def unauthorized(message: str, trace_id: str | None = None) -> APIError:
    """Create a 401 Unauthorized error."""
    return APIError(401, ErrorCodes.UNAUTHORIZED, message, trace_id)


def forbidden(message: str, trace_id: str | None = None) -> APIError:
    """Create a 403 Forbidden error."""
    return APIError(403, ErrorCodes.FORBIDDEN, message, trace_id)

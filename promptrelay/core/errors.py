"""Fehlerklassen des Prompt Relays und ihre Abbildung auf JSON-Antworten.

Jede Fehlerklasse trägt ihren HTTP-Status; der Handler schreibt
``{"error": ..., "details": ...}`` (und bei 403 ``allowedPrompts``)."""
import logging
from typing import Any, List, Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class RelayError(Exception):
    """Basisklasse: Nachricht für den Client plus optionale Diagnosedaten."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> dict:
        payload = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidRequestError(RelayError):
    """Pflichtfeld fehlt oder ist leer."""

    status_code = status.HTTP_400_BAD_REQUEST


class PromptNotAllowedError(RelayError):
    """Nachricht steht nicht auf der Allow-List."""

    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str, allowed_prompts: Sequence[str]) -> None:
        super().__init__(message)
        self.allowed_prompts: List[str] = list(allowed_prompts)

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["allowedPrompts"] = self.allowed_prompts
        return payload


class ConfigurationError(RelayError):
    """Benötigtes Secret (API-Key, Mail-Zugang) ist nicht gesetzt."""


class UpstreamError(RelayError):
    """Completion-Provider nicht erreichbar, Non-2xx oder kaputte Antwort."""


class NotificationError(RelayError):
    """Mail-Transport konnte nicht aufgebaut werden oder der Versand schlug fehl."""


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_payload()))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Kein JSON-Objekt oder falsche Feldtypen: wie fehlende Felder behandeln.
    logger.info("Rejected malformed body on %s: %s", request.url.path, exc.errors())
    error = InvalidRequestError("Invalid request body.", details=jsonable_encoder(exc.errors()))
    return JSONResponse(status_code=error.status_code, content=error.to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    """Registriert die JSON-Fehlerhandler an der App."""
    app.add_exception_handler(RelayError, relay_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

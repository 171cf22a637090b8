"""Prüft eingehende Bodies auf vorhandene, nicht-leere Pflichtfelder."""
from pydantic import BaseModel

from promptrelay.core.errors import InvalidRequestError


def require_fields(payload: BaseModel, *fields: str, message: str) -> None:
    """Wirft ``InvalidRequestError`` (400), wenn eines der Felder fehlt oder leer ist."""
    missing = [name for name in fields if not getattr(payload, name, None)]
    if missing:
        raise InvalidRequestError(message, details={"missing": missing})

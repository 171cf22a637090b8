"""API-Modelle für den Prompt Relay: Chat- und Kontaktanfragen sowie die
zugehörigen Antworten. Pflichtfelder werden bewusst optional deklariert;
die Prüfung übernimmt ``validation.require_fields`` (400 statt 422)."""
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Eingehende Chat-Nachricht."""

    message: Optional[str] = None


class ChatResponse(BaseModel):
    reply: str


class ContactRequest(BaseModel):
    """Kontaktformular: Name, Absender-Mail und Nachricht."""

    name: Optional[str] = None
    email: Optional[str] = None
    message: Optional[str] = None


class ContactResponse(BaseModel):
    message: str = "Message sent successfully!"


class ErrorResponse(BaseModel):
    """JSON-Body aller Fehlerantworten."""

    error: str
    details: Optional[Any] = None
    allowed_prompts: Optional[List[str]] = Field(None, alias="allowedPrompts")

"""Kontakt-Router: nimmt Formular-Einsendungen entgegen und verschickt sie
über den konfigurierten Notifier."""
from fastapi import APIRouter, Request

from promptrelay.core.errors import ConfigurationError
from promptrelay.core.models import ContactRequest, ContactResponse, ErrorResponse
from promptrelay.core.validation import require_fields

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post(
    "/contact",
    response_model=ContactResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def submit_contact(payload: ContactRequest, request: Request) -> ContactResponse:
    """Prüft Name, E-Mail und Nachricht und verschickt genau eine Mail."""
    require_fields(payload, "name", "email", "message", message="Name, email and message are required.")

    notifier = request.app.state.notifier
    if notifier is None:
        raise ConfigurationError("Email service is not configured.")

    await notifier.notify_contact(payload)
    return ContactResponse()

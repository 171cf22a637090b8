"""Chat-Router: prüft Nachrichten gegen die Allow-List und leitet erlaubte
Prompts an Perplexity weiter."""
from fastapi import APIRouter, Request

from promptrelay.core.errors import ConfigurationError
from promptrelay.core.models import ChatRequest, ChatResponse, ErrorResponse
from promptrelay.core.validation import require_fields

router = APIRouter(prefix="/api", tags=["Chat"])
# Alter Pfad ohne /api-Präfix, nicht mehr in der OpenAPI-Doku.
legacy_router = APIRouter(tags=["Chat"], include_in_schema=False)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def handle_chat(payload: ChatRequest, request: Request) -> ChatResponse:
    """Pipeline:
    1) Pflichtfeld ``message`` prüfen (400).
    2) API-Key vorhanden? Sonst 500, ohne Upstream-Call.
    3) Allow-List-Abgleich (403 inkl. erlaubter Prompts).
    4) Ein Call an Perplexity; Fehler -> 500 mit Details.
    """
    require_fields(payload, "message", message="No message provided.")

    assistant = request.app.state.assistant
    if assistant is None:
        raise ConfigurationError("Perplexity API key not set.")

    allow_list = request.app.state.allow_list
    allow_list.check(payload.message)

    reply = await assistant.complete(payload.message)
    return ChatResponse(reply=reply)


router.add_api_route(
    "/chat", handle_chat, methods=["POST"], response_model=ChatResponse, responses=ERROR_RESPONSES
)
legacy_router.add_api_route("/chat", handle_chat, methods=["POST"], response_model=ChatResponse)

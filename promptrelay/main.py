"""FastAPI-Einstiegspunkt für den Prompt Relay."""
import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from promptrelay.core.assistant import CompletionRelay
from promptrelay.core.config import Settings
from promptrelay.core.errors import register_exception_handlers
from promptrelay.core.logging_setup import setup_logging
from promptrelay.core.notifier import build_notifier
from promptrelay.core.prompts import PromptAllowList

from promptrelay.routers import chat as chat_router
from promptrelay.routers import contact as contact_router

logger = logging.getLogger(__name__)

# Initialisierung der App
app = FastAPI(
    title="Prompt Relay",
    version="1.0.0",
    description="Relays allow-listed prompts to Perplexity and contact forms to email.",
)

# CORS komplett offen, das Frontend liegt auf einer anderen Origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def liveness() -> str:
    return "Prompt relay server is running."


def init_services(target: FastAPI, settings: Settings) -> None:
    """Baut alle Services einmalig aus den Settings und legt sie im App State ab.

    - Allow-List der erlaubten Prompts.
    - Completion Relay (None ohne PERPLEXITY_API_KEY).
    - Notifier (None ohne Mail-Zugangsdaten).
    """
    target.state.settings = settings
    target.state.allow_list = PromptAllowList(settings.allowed_prompts)
    target.state.assistant = CompletionRelay.from_settings(settings)
    target.state.notifier = build_notifier(settings)


@app.on_event("startup")
def startup_event() -> None:
    settings = Settings()
    setup_logging(settings.log_level, settings.log_file)
    init_services(app, settings)

    logger.info(
        "Prompt relay initialised: %d allowed prompts, chat %s, contact via %s",
        len(app.state.allow_list),
        "enabled" if app.state.assistant else "DISABLED (no API key)",
        settings.email_transport if app.state.notifier else "nothing (not configured)",
    )


# Router registrieren
app.include_router(chat_router.router)
app.include_router(chat_router.legacy_router)
app.include_router(contact_router.router)


def run() -> None:
    """Startet uvicorn auf HOST/PORT aus den Settings."""
    settings = Settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()

"""Steuert die Kommunikation mit der Perplexity Chat-Completions-API
(OpenAI-kompatibel) für den Prompt Relay."""
import logging
from typing import Optional

import httpx
from openai import APIConnectionError, APIError, APIStatusError, AsyncOpenAI

from promptrelay.core.config import Settings
from promptrelay.core.errors import UpstreamError

logger = logging.getLogger(__name__)

UPSTREAM_FAILURE_MESSAGE = "Failed to get response from Perplexity AI."


class CompletionRelay:
    """Leitet einen einzelnen, erlaubten Prompt an Perplexity weiter und
    liefert den Antworttext des ersten Kandidaten zurück.

    Kein System-Prompt, kein Verlauf, keine Retries.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "sonar",
        base_url: str = "https://api.perplexity.ai",
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.model = model
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            http_client=http_client,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> Optional["CompletionRelay"]:
        """Baut den Relay; ohne API-Key gibt es keinen (Chat antwortet dann 500)."""
        if not settings.perplexity_api_key:
            logger.warning("PERPLEXITY_API_KEY is not set; /api/chat will answer 500.")
            return None
        return cls(
            api_key=settings.perplexity_api_key,
            model=settings.perplexity_model,
            base_url=settings.perplexity_base_url,
        )

    async def complete(self, message: str) -> str:
        """Sendet ``message`` als einzige User-Nachricht und gibt die Antwort zurück.

        Rückgabe:
            Inhalt von ``choices[0].message.content``, unverändert.

        Fehler (Netzwerk, Non-2xx, unerwartete Antwortstruktur) werden als
        ``UpstreamError`` mit den Upstream-Details weitergereicht.
        """
        logger.info(f"Perplexity Request [model {self.model}]: {message}")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": message}],
            )
        except APIStatusError as exc:
            # Kompletter Upstream-Body, nicht nur das vom SDK entpackte "error"-Objekt.
            try:
                details = exc.response.json()
            except ValueError:
                details = exc.response.text or exc.message
            logger.error("Error from Perplexity API (%s): %s", exc.status_code, details)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details=details) from exc
        except APIConnectionError as exc:
            # Deckt auch APITimeoutError ab.
            logger.error("Error from Perplexity API: %s", exc)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details=str(exc)) from exc
        except APIError as exc:
            # Antwort passt nicht zum erwarteten Schema.
            logger.error("Invalid response from Perplexity API: %s", exc.message)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details=exc.message) from exc
        except ValueError as exc:
            # 2xx mit JSON-Content-Type, aber kein gültiges JSON.
            logger.error("Undecodable response from Perplexity API: %s", exc)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details=str(exc)) from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            logger.error("Malformed response from Perplexity API: %r", response)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details="Malformed completion response.") from exc
        if content is None:
            logger.error("Perplexity API returned no content: %r", response)
            raise UpstreamError(UPSTREAM_FAILURE_MESSAGE, details="Malformed completion response.")

        logger.info(f"Perplexity Response: {content}")
        return content

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from promptrelay.core.assistant import CompletionRelay
from promptrelay.core.config import Settings
from promptrelay.core.notifier import ResendNotifier
from promptrelay.main import app, init_services


def make_settings(**overrides) -> Settings:
    """Settings ohne .env-Datei, mit Test-Credentials für Perplexity und Resend."""
    values = {
        "PERPLEXITY_API_KEY": "pplx-test",
        "EMAIL_TRANSPORT": "resend",
        "RESEND_API_KEY": "re_test",
        "MAIL_FROM": "relay@example.com",
        "CONTACT_RECIPIENT": "owner@example.com",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def completion_body(content, **extra) -> dict:
    body = {
        "id": "cmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "sonar",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": content},
            }
        ],
    }
    body.update(extra)
    return body


class UpstreamStub:
    """Handler for httpx.MockTransport that records every outbound request."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.responder = responder
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


@pytest.fixture
def perplexity():
    return UpstreamStub(lambda request: httpx.Response(200, json=completion_body("My name is Sonar.")))


@pytest.fixture
def mailer():
    return UpstreamStub(lambda request: httpx.Response(200, json={"id": "email_123"}))


@pytest.fixture
def client(perplexity, mailer):
    settings = make_settings()
    init_services(app, settings)
    # Upstreams durch MockTransports ersetzen
    app.state.assistant = CompletionRelay(
        api_key=settings.perplexity_api_key,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(perplexity)),
    )
    app.state.notifier = ResendNotifier(
        api_key=settings.resend_api_key,
        sender=settings.mail_from,
        recipient=settings.contact_recipient,
        transport=httpx.MockTransport(mailer),
    )
    return TestClient(app)

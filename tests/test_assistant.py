import logging

import httpx
import pytest

from promptrelay.core.assistant import CompletionRelay
from promptrelay.core.errors import UpstreamError

from conftest import UpstreamStub, completion_body


def make_relay(stub: UpstreamStub) -> CompletionRelay:
    return CompletionRelay(
        api_key="pplx-test",
        model="sonar",
        base_url="https://api.perplexity.ai",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(stub)),
    )


@pytest.mark.asyncio
async def test_complete_returns_first_choice_verbatim():
    stub = UpstreamStub(lambda request: httpx.Response(200, json=completion_body("  Why did the chicken...\n")))

    reply = await make_relay(stub).complete("Tell me a joke.")

    assert reply == "  Why did the chicken...\n"
    assert len(stub.requests) == 1


@pytest.mark.asyncio
async def test_complete_without_content_raises():
    stub = UpstreamStub(lambda request: httpx.Response(200, json=completion_body(None)))

    with pytest.raises(UpstreamError) as exc_info:
        await make_relay(stub).complete("Tell me a joke.")

    assert exc_info.value.status_code == 500
    assert exc_info.value.details == "Malformed completion response."


@pytest.mark.asyncio
async def test_upstream_error_is_logged(caplog):
    stub = UpstreamStub(lambda request: httpx.Response(401, json={"error": {"message": "invalid api key"}}))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(UpstreamError) as exc_info:
            await make_relay(stub).complete("What is the time?")

    assert "Error from Perplexity API (401)" in caplog.text
    assert "invalid api key" in str(exc_info.value.details)
    assert exc_info.value.to_payload()["error"] == "Failed to get response from Perplexity AI."

import pytest

from promptrelay.core.config import DEFAULT_ALLOWED_PROMPTS
from promptrelay.core.errors import PromptNotAllowedError
from promptrelay.core.prompts import PromptAllowList, normalize


@pytest.fixture
def allow_list():
    return PromptAllowList(DEFAULT_ALLOWED_PROMPTS)


def test_normalize_trims_and_lowercases():
    assert normalize("  WHAT IS YOUR NAME?  ") == "what is your name?"


@pytest.mark.parametrize(
    "message",
    ["What is your name?", "  WHAT IS YOUR NAME?  ", "what is your name?", "\tTell me a joke.\n"],
)
def test_accepts_normalized_matches(allow_list, message):
    assert allow_list.is_allowed(message)
    allow_list.check(message)


@pytest.mark.parametrize(
    "message",
    [
        "What is your name",  # no question mark
        "What is your name? Please",
        "What  is your name?",
        "name",
        "",
        "Tell me a joke!",
    ],
)
def test_rejects_anything_else(allow_list, message):
    assert not allow_list.is_allowed(message)
    with pytest.raises(PromptNotAllowedError) as exc_info:
        allow_list.check(message)
    assert exc_info.value.status_code == 403
    assert exc_info.value.allowed_prompts == DEFAULT_ALLOWED_PROMPTS


def test_prompts_are_kept_verbatim_and_in_order():
    prompts = ["  Hello There ", "Second?"]
    allow_list = PromptAllowList(prompts)

    assert allow_list.prompts == ("  Hello There ", "Second?")
    assert len(allow_list) == 2
    assert allow_list.is_allowed("hello there")


def test_payload_carries_full_allow_list(allow_list):
    with pytest.raises(PromptNotAllowedError) as exc_info:
        allow_list.check("Who won the match?")

    payload = exc_info.value.to_payload()
    assert payload == {
        "error": "Sorry, I can only answer specific questions.",
        "allowedPrompts": DEFAULT_ALLOWED_PROMPTS,
    }

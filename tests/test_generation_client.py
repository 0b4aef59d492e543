import asyncio
from types import SimpleNamespace

import httpx
import openai
import pytest

from ducktype.services.generation_client import TEMPERATURE, GenerationClient, list_response_format
from ducktype.services.openai_compatible_client import (
    GenerationUnavailableError,
    get_async_openai_compatible_client,
)


class _FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


class _FakeClient:
    def __init__(self, completions):
        self.chat = SimpleNamespace(completions=completions)
        self.closed = False

    async def close(self):
        self.closed = True


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def _generator(completions, holder):
    def factory(provider):
        holder.append(_FakeClient(completions))
        return holder[-1]

    return GenerationClient(provider="gemini", model="test-model", client_factory=factory)


def _generate(gen):
    return asyncio.run(
        gen.generate("be a duck", [{"role": "user", "content": "hi"}], list_field="questions", max_items=2)
    )


def test_returns_first_candidate_text_and_sends_parameters():
    completions = _FakeCompletions(result=_response('{"questions": ["Why?"]}'))
    clients = []
    assert _generate(_generator(completions, clients)) == '{"questions": ["Why?"]}'

    kwargs = completions.kwargs
    assert kwargs["model"] == "test-model"
    assert kwargs["temperature"] == TEMPERATURE
    assert kwargs["max_tokens"] == 256
    assert kwargs["messages"][0] == {"role": "system", "content": "be a duck"}
    assert kwargs["messages"][1] == {"role": "user", "content": "hi"}
    schema = kwargs["response_format"]["json_schema"]["schema"]
    assert schema["required"] == ["questions"]
    assert schema["properties"]["questions"]["maxItems"] == 2
    assert clients[0].closed


def test_no_candidates_is_empty_text():
    completions = _FakeCompletions(result=SimpleNamespace(choices=[]))
    assert _generate(_generator(completions, [])) == ""


def test_upstream_status_error_degrades_to_empty_text():
    request = httpx.Request("POST", "https://example.test/chat/completions")
    error = openai.APIStatusError("boom", response=httpx.Response(500, request=request), body=None)
    clients = []
    assert _generate(_generator(_FakeCompletions(error=error), clients)) == ""
    assert clients[0].closed


def test_connection_error_degrades_to_empty_text():
    request = httpx.Request("POST", "https://example.test/chat/completions")
    error = openai.APIConnectionError(request=request)
    assert _generate(_generator(_FakeCompletions(error=error), [])) == ""


def test_list_response_format_shape():
    fmt = list_response_format("prompts", min_items=3, max_items=6)
    assert fmt["type"] == "json_schema"
    items = fmt["json_schema"]["schema"]["properties"]["prompts"]
    assert (items["minItems"], items["maxItems"]) == (3, 6)


def test_missing_credential_is_unavailable(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    with pytest.raises(GenerationUnavailableError, match="GEMINI_API_KEY"):
        get_async_openai_compatible_client("gemini")


def test_unknown_provider_is_unavailable():
    with pytest.raises(GenerationUnavailableError):
        get_async_openai_compatible_client("nope")


def test_gemini_client_uses_openai_compatible_endpoint(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    client = get_async_openai_compatible_client("gemini")
    assert "generativelanguage.googleapis.com" in str(client.base_url)
    assert client.max_retries == 0

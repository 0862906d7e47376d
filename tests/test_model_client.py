from types import SimpleNamespace

import httpx
import openai
import pytest

from fitplan.errors import ProviderFailure, RateLimited
from fitplan.services.model_client import ModelClient

REQUEST = httpx.Request("POST", "https://gateway.test/v1/chat/completions")


class FakeCompletions:
    def __init__(self, result):
        self.result = result
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


def make_client(result):
    completions = FakeCompletions(result)
    fake_openai = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return ModelClient(api_key="test-key", client=fake_openai), completions


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def status_error(cls, status):
    response = httpx.Response(status, request=REQUEST, json={"error": "nope"})
    return cls("nope", response=response, body={"error": "nope"})


def test_complete_sends_system_and_user_messages():
    client, completions = make_client(completion("[]"))

    assert client.complete("be a nutritionist", "plan please", "google/gemini-2.5-flash") == "[]"
    assert completions.kwargs["model"] == "google/gemini-2.5-flash"
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "be a nutritionist"},
        {"role": "user", "content": "plan please"},
    ]


def test_429_is_rate_limited():
    client, _ = make_client(status_error(openai.RateLimitError, 429))
    with pytest.raises(RateLimited):
        client.complete("s", "u", "m")


def test_server_error_is_provider_failure():
    client, _ = make_client(status_error(openai.InternalServerError, 500))
    with pytest.raises(ProviderFailure) as exc:
        client.complete("s", "u", "m")
    assert "500" in exc.value.message


@pytest.mark.parametrize("error", [
    openai.APITimeoutError(request=REQUEST),
    openai.APIConnectionError(request=REQUEST),
])
def test_transport_errors_are_provider_failures(error):
    client, _ = make_client(error)
    with pytest.raises(ProviderFailure):
        client.complete("s", "u", "m")


@pytest.mark.parametrize("response", [completion(None), completion(""), SimpleNamespace(choices=[])])
def test_empty_completion_is_provider_failure(response):
    client, _ = make_client(response)
    with pytest.raises(ProviderFailure):
        client.complete("s", "u", "m")


def test_missing_api_key_is_provider_failure(monkeypatch):
    monkeypatch.delenv("AI_GATEWAY_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ProviderFailure):
        ModelClient().complete("s", "u", "m")

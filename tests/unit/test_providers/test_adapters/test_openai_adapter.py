"""Tests for the OpenAI adapter."""

from types import SimpleNamespace

import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage

from src.providers.adapters.openai_adapter import OpenAIAdapter


def _patch_httpx(monkeypatch, handler):
    real_client = httpx.AsyncClient

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(httpx, "AsyncClient", client_factory)


def test_create_llm_passes_call_limits(monkeypatch):
    captured = {}

    class FakeChatOpenAI:
        def __init__(self, **kwargs):
            captured.update(kwargs)

    monkeypatch.setattr("src.providers.adapters.openai_adapter.ChatOpenAI", FakeChatOpenAI)

    OpenAIAdapter().create_llm(
        model="gpt-4o",
        base_url="https://api.openai.com/v1",
        api_key="k",
        temperature=0.3,
        timeout=30.0,
        max_retries=0,
        max_tokens=2048,
        unknown_option=True,
    )

    assert captured == {
        "model": "gpt-4o",
        "temperature": 0.3,
        "base_url": "https://api.openai.com/v1",
        "api_key": "k",
        "streaming": False,
        "timeout": 30.0,
        "max_retries": 0,
        "max_tokens": 2048,
    }


@pytest.mark.asyncio
async def test_invoke_normalizes_content_and_usage():
    message = AIMessage(
        content=[{"type": "text", "text": "Hello "}, {"type": "text", "text": "world"}],
        response_metadata={"finish_reason": "stop"},
        usage_metadata={"input_tokens": 11, "output_tokens": 4, "total_tokens": 15},
    )

    class FakeLLM:
        async def ainvoke(self, messages):
            self.messages = messages
            return message

    llm = FakeLLM()
    response = await OpenAIAdapter().invoke(llm, [HumanMessage(content="hi")])

    assert response.content == "Hello world"
    assert response.finish_reason == "stop"
    assert response.usage.total_tokens == 15
    assert llm.messages[0].content == "hi"


@pytest.mark.asyncio
async def test_invoke_reads_token_usage_from_response_metadata():
    message = SimpleNamespace(
        content="ok",
        usage_metadata=None,
        response_metadata={"token_usage": {"prompt_tokens": 2, "completion_tokens": 3}},
    )

    class FakeLLM:
        async def ainvoke(self, messages):
            return message

    response = await OpenAIAdapter().invoke(FakeLLM(), [])

    assert response.usage.prompt_tokens == 2
    assert response.usage.total_tokens == 5


@pytest.mark.asyncio
async def test_fetch_models_returns_sorted_ids(monkeypatch):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"data": [{"id": "gpt-4o-mini"}, {"id": "gpt-4o"}, {"object": "model"}]})

    _patch_httpx(monkeypatch, handler)

    models = await OpenAIAdapter().fetch_models("https://api.openai.com", "sk-1")

    assert models == ["gpt-4o", "gpt-4o-mini"]
    assert seen["url"] == "https://api.openai.com/v1/models"
    assert seen["auth"] == "Bearer sk-1"


@pytest.mark.asyncio
async def test_fetch_models_returns_empty_on_error(monkeypatch):
    _patch_httpx(monkeypatch, lambda request: httpx.Response(401, json={"error": "bad key"}))

    assert await OpenAIAdapter().fetch_models("https://api.openai.com/v1", "bad") == []

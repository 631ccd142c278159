"""Unit tests for the provider-backed agent client."""

import asyncio
from unittest.mock import AsyncMock, Mock

import httpx
import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from src.api.config import Settings
from src.api.models.agent_profile import AgentProfile, AgentsConfig
from src.api.services.agent_client import AgentClient, build_agent_clients
from src.api.services.collaboration import (
    AgentTimeoutError,
    MalformedResponseError,
    ProviderError,
    TransportError,
)
from src.providers.adapters import AnthropicAdapter, OpenAIAdapter
from src.providers.types import LLMResponse, TokenUsage


def _profile(**overrides):
    payload = {
        "agent_id": "A",
        "name": "Claude",
        "role": "producer",
        "provider_id": "anthropic",
        "system_prompt": "You are a programmer.",
        "default_model": "claude-sonnet-4-5-20250929",
    }
    payload.update(overrides)
    return AgentProfile(**payload)


def _adapter(response=None, side_effect=None):
    adapter = Mock()
    adapter.create_llm = Mock(return_value="llm")
    adapter.invoke = AsyncMock(return_value=response, side_effect=side_effect)
    adapter.fetch_models = AsyncMock(return_value=[])
    return adapter


def _client(adapter, profile=None, **kwargs):
    kwargs.setdefault("api_key", "sk-test")
    kwargs.setdefault("llm_logger", Mock())
    return AgentClient(_profile(**(profile or {})), adapter=adapter, **kwargs)


def test_build_messages_maps_history_to_agent_point_of_view():
    client = _client(_adapter())
    history = [
        {"role": "producer", "content": "draft"},
        {"role": "consumer", "content": "review"},
    ]

    messages = client.build_messages("build X", history, role="backend developer")

    assert isinstance(messages[0], SystemMessage)
    assert messages[0].content.startswith("You are a programmer.")
    assert messages[0].content.endswith("Your role in this session: backend developer")
    assert isinstance(messages[1], AIMessage) and messages[1].content == "draft"
    assert isinstance(messages[2], HumanMessage) and messages[2].content == "review"
    assert isinstance(messages[3], HumanMessage) and messages[3].content == "build X"


def test_consumer_sees_producer_turns_as_human_messages():
    client = _client(_adapter(), profile={"agent_id": "B", "role": "consumer", "provider_id": "openai"})

    messages = client.build_messages("draft 2", [{"role": "producer", "content": "draft"}, {"role": "consumer", "content": "review"}])

    assert messages[0].content == "You are a programmer."
    assert isinstance(messages[1], HumanMessage)
    assert isinstance(messages[2], AIMessage)


@pytest.mark.asyncio
async def test_send_message_returns_text_and_total_tokens():
    response = LLMResponse(
        content="Here is X",
        usage=TokenUsage(prompt_tokens=3, completion_tokens=4, total_tokens=7),
    )
    adapter = _adapter(response)
    llm_logger = Mock()
    client = _client(adapter, llm_logger=llm_logger, request_timeout=12.0, max_tokens=512)

    reply = await client.send_message("build X", [], "claude-sonnet-4-5-20250929", session_id="s1")

    assert reply.content == "Here is X"
    assert reply.tokens == 7
    adapter.create_llm.assert_called_once_with(
        model="claude-sonnet-4-5-20250929",
        base_url="https://api.anthropic.com",
        api_key="sk-test",
        temperature=0.7,
        timeout=12.0,
        max_retries=0,
        max_tokens=512,
    )
    llm_logger.log_interaction.assert_called_once()
    assert llm_logger.log_interaction.call_args.kwargs["session_id"] == "s1"
    assert llm_logger.log_interaction.call_args.kwargs["tokens"] == 7


@pytest.mark.asyncio
async def test_send_message_without_usage_reports_no_tokens():
    client = _client(_adapter(LLMResponse(content="ok")))
    reply = await client.send_message("p", [], "m")
    assert reply.tokens is None


@pytest.mark.asyncio
async def test_send_message_requires_api_key():
    adapter = _adapter()
    client = _client(adapter, api_key=None)

    with pytest.raises(ProviderError, match="No API key") as exc_info:
        await client.send_message("p", [], "m")

    assert exc_info.value.agent_id == "A"
    adapter.invoke.assert_not_awaited()


@pytest.mark.asyncio
async def test_slow_provider_times_out():
    async def slow_invoke(llm, messages):
        await asyncio.sleep(1)

    adapter = _adapter()
    adapter.invoke = slow_invoke
    llm_logger = Mock()
    client = _client(adapter, request_timeout=0.01, llm_logger=llm_logger)

    with pytest.raises(AgentTimeoutError) as exc_info:
        await client.send_message("p", [], "m", session_id="s1")

    assert exc_info.value.kind == "timeout"
    assert exc_info.value.agent_id == "A"
    llm_logger.log_error.assert_called_once()


class _RateLimitError(Exception):
    status_code = 429


class _APIConnectionError(Exception):
    pass


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error,expected_type,expected_kind",
    [
        (_RateLimitError("rate limited"), ProviderError, "provider"),
        (httpx.ConnectError("refused"), TransportError, "transport"),
        (_APIConnectionError("unreachable"), TransportError, "transport"),
        (httpx.ReadTimeout("slow"), AgentTimeoutError, "timeout"),
        (ValueError("unknown model"), ProviderError, "provider"),
    ],
)
async def test_provider_failures_are_translated(error, expected_type, expected_kind):
    client = _client(_adapter(side_effect=error))

    with pytest.raises(expected_type) as exc_info:
        await client.send_message("p", [], "m")

    assert exc_info.value.kind == expected_kind
    assert exc_info.value.agent_id == "A"


@pytest.mark.asyncio
async def test_status_code_is_kept_on_provider_error():
    client = _client(_adapter(side_effect=_RateLimitError("rate limited")))

    with pytest.raises(ProviderError) as exc_info:
        await client.send_message("p", [], "m")

    assert exc_info.value.status_code == 429


@pytest.mark.asyncio
async def test_empty_content_is_malformed():
    client = _client(_adapter(LLMResponse(content="   ")))

    with pytest.raises(MalformedResponseError) as exc_info:
        await client.send_message("p", [], "m")

    assert exc_info.value.kind == "malformed_response"


@pytest.mark.asyncio
async def test_list_models_prefers_live_listing():
    adapter = _adapter()
    adapter.fetch_models = AsyncMock(return_value=["claude-x", "claude-y"])
    client = _client(adapter)

    assert await client.list_available_models() == ["claude-x", "claude-y"]
    adapter.fetch_models.assert_awaited_once_with("https://api.anthropic.com", "sk-test")


@pytest.mark.asyncio
async def test_list_models_falls_back_to_profile_then_builtin():
    adapter = _adapter()
    adapter.fetch_models = AsyncMock(side_effect=RuntimeError("boom"))
    client = _client(adapter, profile={"fallback_models": ["claude-fallback"]})
    assert await client.list_available_models() == ["claude-fallback"]

    no_key = _client(_adapter(), api_key=None)
    models = await no_key.list_available_models()
    assert "claude-sonnet-4-5-20250929" in models
    no_key.adapter.fetch_models.assert_not_awaited()


def test_build_agent_clients_uses_settings_per_provider(monkeypatch):
    for name in ("ANTHROPIC_API_KEY", "ANTHROPIC_BASE_URL", "OPENAI_API_KEY", "OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(
        _env_file=None,
        anthropic_api_key="ak",
        anthropic_base_url=None,
        openai_api_key="ok",
        openai_base_url="http://localhost:9000/v1",
        agent_request_timeout_seconds=5,
        agent_max_tokens=256,
    )
    config = AgentsConfig(agents=[
        _profile(),
        _profile(agent_id="B", name="ChatGPT", role="consumer", provider_id="openai", default_model="gpt-4o"),
    ])

    clients = build_agent_clients(settings, config, llm_logger=Mock())

    assert set(clients) == {"A", "B"}
    assert clients["A"].api_key == "ak"
    assert clients["A"].base_url == "https://api.anthropic.com"
    assert isinstance(clients["A"].adapter, AnthropicAdapter)
    assert clients["B"].api_key == "ok"
    assert clients["B"].base_url == "http://localhost:9000/v1"
    assert isinstance(clients["B"].adapter, OpenAIAdapter)
    assert clients["B"].request_timeout == 5
    assert clients["B"].max_tokens == 256

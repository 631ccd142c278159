"""
LLM Provider Abstraction Layer

Unified interface over the providers that back the two collaborating agents.

Key components:
- types: Data models and enums
- builtin: Pre-configured provider definitions with fallback model catalogs
- registry: Adapter lookup without text matching
- adapters: SDK-specific implementations

Usage:
    from src.providers import AdapterRegistry

    adapter = AdapterRegistry.get_for_provider_id("anthropic")
    llm = adapter.create_llm(
        model="claude-sonnet-4-5-20250929",
        base_url="https://api.anthropic.com",
        api_key="your-key",
    )
    response = await adapter.invoke(llm, messages)
    print(response.content, response.usage)
"""
from .types import (
    ApiProtocol,
    TokenUsage,
    ModelDefinition,
    ProviderDefinition,
    LLMResponse,
)
from .builtin import (
    BUILTIN_PROVIDERS,
    get_builtin_provider,
    get_builtin_model_ids,
)
from .registry import (
    AdapterRegistry,
)
from .base import BaseLLMAdapter

__all__ = [
    # Types
    "ApiProtocol",
    "TokenUsage",
    "ModelDefinition",
    "ProviderDefinition",
    "LLMResponse",
    # Builtin
    "BUILTIN_PROVIDERS",
    "get_builtin_provider",
    "get_builtin_model_ids",
    # Registry
    "AdapterRegistry",
    # Base
    "BaseLLMAdapter",
]

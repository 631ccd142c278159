"""
Adapter Registry

Resolves which SDK adapter backs an agent's provider.
"""
import logging
from typing import Dict, Optional, Type

from .base import BaseLLMAdapter
from .types import ApiProtocol
from .builtin import get_builtin_provider
from .adapters import (
    OpenAIAdapter,
    AnthropicAdapter,
)

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """
    SDK adapter registry.

    Resolution order for a provider: explicit ``sdk_class``, then the built-in
    provider definition, then the API protocol. Unknown SDK names resolve to
    the OpenAI-compatible adapter.
    """

    _adapters: Dict[str, Type[BaseLLMAdapter]] = {
        "openai": OpenAIAdapter,
        "anthropic": AnthropicAdapter,
    }

    _protocol_adapters: Dict[ApiProtocol, str] = {
        ApiProtocol.OPENAI: "openai",
        ApiProtocol.ANTHROPIC: "anthropic",
    }

    @classmethod
    def get(cls, sdk_type: str) -> BaseLLMAdapter:
        """Instantiate the adapter registered under ``sdk_type``."""
        return cls._adapters.get(sdk_type, OpenAIAdapter)()

    @classmethod
    def get_for_provider_id(
        cls,
        provider_id: str,
        protocol: ApiProtocol = ApiProtocol.OPENAI,
        sdk_class: Optional[str] = None,
    ) -> BaseLLMAdapter:
        """
        Get the adapter for a provider id.

        Args:
            provider_id: Provider identifier (anthropic, openai, or a custom id)
            protocol: Protocol spoken by a custom provider
            sdk_class: Explicit adapter name, overrides everything else
        """
        if sdk_class:
            sdk_type = sdk_class
        else:
            builtin = get_builtin_provider(provider_id)
            if builtin:
                sdk_type = builtin.sdk_class
            else:
                sdk_type = cls._protocol_adapters.get(protocol, "openai")
        logger.debug(f"Adapter for provider {provider_id}: {sdk_type}")
        return cls.get(sdk_type)

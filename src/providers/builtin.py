"""
Built-in Provider Definitions

Pre-configured providers used by the two collaborating agents.
"""
from typing import List, Optional

from .types import (
    ProviderDefinition,
    ModelDefinition,
    ApiProtocol,
)


# Built-in provider definitions
BUILTIN_PROVIDERS: dict[str, ProviderDefinition] = {
    "anthropic": ProviderDefinition(
        id="anthropic",
        name="Anthropic",
        protocol=ApiProtocol.ANTHROPIC,
        base_url="https://api.anthropic.com",
        sdk_class="anthropic",
        builtin_models=[
            ModelDefinition(id="claude-sonnet-4-5-20250929", name="Claude Sonnet 4.5"),
            ModelDefinition(id="claude-opus-4-1-20250805", name="Claude Opus 4.1"),
            ModelDefinition(id="claude-3-5-sonnet-20241022", name="Claude 3.5 Sonnet"),
            ModelDefinition(id="claude-3-5-haiku-20241022", name="Claude 3.5 Haiku"),
        ],
    ),

    "openai": ProviderDefinition(
        id="openai",
        name="OpenAI",
        protocol=ApiProtocol.OPENAI,
        base_url="https://api.openai.com/v1",
        sdk_class="openai",
        builtin_models=[
            ModelDefinition(id="gpt-4o", name="GPT-4o"),
            ModelDefinition(id="gpt-4o-mini", name="GPT-4o mini"),
            ModelDefinition(id="gpt-4-turbo-preview", name="GPT-4 Turbo Preview"),
        ],
    ),
}


def get_builtin_provider(provider_id: str) -> Optional[ProviderDefinition]:
    """
    Get a built-in provider definition by ID.

    Args:
        provider_id: Provider identifier

    Returns:
        ProviderDefinition if found, None otherwise
    """
    return BUILTIN_PROVIDERS.get(provider_id)


def get_builtin_model_ids(provider_id: str) -> List[str]:
    """Return the static model ids for a built-in provider (empty if unknown)."""
    definition = get_builtin_provider(provider_id)
    if definition is None:
        return []
    return [model.id for model in definition.builtin_models]

"""
LLM Adapters

This package contains SDK adapters for the supported agent providers.
"""
from .openai_adapter import OpenAIAdapter
from .anthropic_adapter import AnthropicAdapter

__all__ = [
    "OpenAIAdapter",
    "AnthropicAdapter",
]

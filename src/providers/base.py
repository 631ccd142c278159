"""
Base LLM Adapter

Abstract base class for LLM provider adapters.
"""
from abc import ABC, abstractmethod
from typing import List, Any
from langchain_core.messages import BaseMessage

from .types import LLMResponse


class BaseLLMAdapter(ABC):
    """
    Abstract base class for LLM adapters.

    Each adapter handles a specific SDK/API protocol and provides a unified
    interface for creating LLM instances and normalizing responses.
    """

    @abstractmethod
    def create_llm(
        self,
        model: str,
        base_url: str,
        api_key: str,
        temperature: float = 0.7,
        **kwargs
    ) -> Any:
        """
        Create an LLM instance for this adapter.

        Args:
            model: Model ID to use
            base_url: API base URL
            api_key: API key for authentication
            temperature: Sampling temperature
            **kwargs: Additional provider-specific parameters
                (timeout, max_retries, max_tokens)

        Returns:
            LLM instance (ChatOpenAI, ChatAnthropic, ...)
        """
        pass

    @abstractmethod
    async def invoke(
        self,
        llm: Any,
        messages: List[BaseMessage],
        **kwargs
    ) -> LLMResponse:
        """
        Invoke the LLM and get a complete response.

        Args:
            llm: LLM instance created by create_llm()
            messages: List of LangChain messages
            **kwargs: Additional parameters

        Returns:
            LLMResponse with normalized content
        """
        pass

    async def fetch_models(
        self,
        base_url: str,
        api_key: str
    ) -> List[str]:
        """
        Fetch available model ids from the provider's API.

        Model discovery is advisory: implementations return an empty list on
        any failure instead of raising.

        Args:
            base_url: API base URL
            api_key: API key for authentication

        Returns:
            List of model ids
        """
        return []

    @staticmethod
    def normalize_content(content: Any) -> str:
        """Flatten LangChain message content (str or content blocks) to text."""
        if isinstance(content, str):
            return content
        if isinstance(content, list):
            parts = []
            for block in content:
                if isinstance(block, str):
                    parts.append(block)
                elif isinstance(block, dict) and block.get("type") == "text":
                    parts.append(str(block.get("text", "")))
            return "".join(parts)
        return ""

"""
Anthropic SDK Adapter

Adapter for Anthropic Claude API using langchain-anthropic.
"""
import logging
from typing import List, Any, Dict

import httpx
from langchain_core.messages import BaseMessage

from ..base import BaseLLMAdapter
from ..types import LLMResponse, TokenUsage

logger = logging.getLogger(__name__)

ANTHROPIC_API_VERSION = "2023-06-01"


class AnthropicAdapter(BaseLLMAdapter):
    """
    Adapter for Anthropic Claude SDK.

    Uses langchain-anthropic package for proper Claude API integration.
    """

    def create_llm(
        self,
        model: str,
        base_url: str,
        api_key: str,
        temperature: float = 0.7,
        **kwargs
    ):
        """
        Create a ChatAnthropic instance.

        Args:
            model: Model ID (claude-sonnet-4-5-20250929, etc.)
            base_url: API base URL
            api_key: API key
            temperature: Sampling temperature
            **kwargs: timeout / max_retries / max_tokens passthrough

        Returns:
            ChatAnthropic instance
        """
        from langchain_anthropic import ChatAnthropic

        llm_kwargs: Dict[str, Any] = {
            "model": model,
            "api_key": api_key,
            "temperature": temperature,
            "max_tokens": kwargs.get("max_tokens", 2048),
        }

        # Set base URL if not default
        if base_url and base_url != "https://api.anthropic.com":
            llm_kwargs["base_url"] = base_url

        if "timeout" in kwargs:
            llm_kwargs["timeout"] = kwargs["timeout"]
        if "max_retries" in kwargs:
            llm_kwargs["max_retries"] = kwargs["max_retries"]

        return ChatAnthropic(**llm_kwargs)

    async def invoke(
        self,
        llm,
        messages: List[BaseMessage],
        **kwargs
    ) -> LLMResponse:
        """
        Invoke Anthropic Claude and get complete response.

        Args:
            llm: ChatAnthropic instance
            messages: List of LangChain messages
            **kwargs: Additional parameters

        Returns:
            LLMResponse with content and usage
        """
        response = await llm.ainvoke(messages)

        finish_reason = None
        if isinstance(getattr(response, "response_metadata", None), dict):
            finish_reason = response.response_metadata.get("stop_reason")

        return LLMResponse(
            content=self.normalize_content(response.content),
            finish_reason=finish_reason,
            usage=TokenUsage.extract_from_message(response),
            raw=response,
        )

    async def fetch_models(
        self,
        base_url: str,
        api_key: str
    ) -> List[str]:
        """
        Fetch model ids from the Anthropic models endpoint.

        Returns an empty list on failure; callers fall back to the built-in
        catalog.
        """
        if not api_key:
            return []
        try:
            url = (base_url or "https://api.anthropic.com").rstrip('/')
            if not url.endswith('/v1'):
                url = f"{url}/v1"
            headers = {
                "x-api-key": api_key,
                "anthropic-version": ANTHROPIC_API_VERSION,
            }
            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(f"{url}/models", headers=headers)
                response.raise_for_status()
                data = response.json()

            return [
                str(model.get("id"))
                for model in data.get("data", [])
                if isinstance(model, dict) and model.get("id")
            ]
        except Exception as e:
            logger.warning(f"Failed to fetch Anthropic models: {e}")
            return []

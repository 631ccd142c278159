"""
OpenAI SDK Adapter

Adapter for OpenAI and OpenAI-compatible chat completion APIs.
"""
import logging
from typing import List, Any, Dict

import httpx
from langchain_openai import ChatOpenAI

from ..base import BaseLLMAdapter
from ..types import LLMResponse, TokenUsage

logger = logging.getLogger(__name__)


class OpenAIAdapter(BaseLLMAdapter):
    """
    Adapter for OpenAI SDK.

    Supports the OpenAI API and compatible providers via ``base_url``.
    """

    def create_llm(
        self,
        model: str,
        base_url: str,
        api_key: str,
        temperature: float = 0.7,
        **kwargs
    ) -> ChatOpenAI:
        """
        Create a ChatOpenAI instance.

        Args:
            model: Model ID to use
            base_url: API base URL
            api_key: API key for authentication
            temperature: Sampling temperature
            **kwargs: timeout / max_retries / max_tokens passthrough

        Returns:
            ChatOpenAI instance
        """
        llm_kwargs: Dict[str, Any] = {
            "model": model,
            "temperature": temperature,
            "base_url": base_url,
            "api_key": api_key,
            "streaming": False,
        }

        extra_keys = ["timeout", "max_retries", "max_tokens"]
        for key in extra_keys:
            if key in kwargs:
                llm_kwargs[key] = kwargs[key]

        return ChatOpenAI(**llm_kwargs)

    async def invoke(
        self,
        llm: Any,
        messages: List[Any],
        **kwargs
    ) -> LLMResponse:
        """
        Invoke OpenAI and get complete response.

        Args:
            llm: ChatOpenAI instance
            messages: List of LangChain messages
            **kwargs: Additional parameters

        Returns:
            LLMResponse with content and usage
        """
        response = await llm.ainvoke(messages)

        finish_reason = None
        if isinstance(getattr(response, "response_metadata", None), dict):
            finish_reason = response.response_metadata.get("finish_reason")

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
        Fetch available model ids from an OpenAI-compatible API.

        Args:
            base_url: API base URL
            api_key: API key

        Returns:
            Sorted list of model ids, empty on failure
        """
        try:
            url = base_url.rstrip('/')
            if not url.endswith('/v1'):
                url = f"{url}/v1"
            models_url = f"{url}/models"

            headers = {}
            if api_key:
                headers["Authorization"] = f"Bearer {api_key}"

            async with httpx.AsyncClient(timeout=30.0) as client:
                response = await client.get(models_url, headers=headers)
                response.raise_for_status()
                data = response.json()

            model_ids = [
                str(model.get("id"))
                for model in data.get("data", [])
                if isinstance(model, dict) and model.get("id")
            ]
            return sorted(model_ids)

        except Exception as e:
            logger.warning(f"Failed to fetch OpenAI models: {e}")
            return []

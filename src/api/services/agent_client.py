"""
Agent client service

Wraps one provider adapter behind the send_message / list_available_models
capability the collaboration orchestrator consumes.
"""
import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

import httpx
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.providers import BaseLLMAdapter, get_builtin_model_ids, get_builtin_provider
from src.providers.registry import AdapterRegistry
from src.utils.llm_logger import LLMLogger, get_llm_logger

from ..config import Settings
from ..models.agent_profile import AgentProfile, AgentsConfig
from .collaboration import (
    AgentCallError,
    AgentReply,
    AgentTimeoutError,
    MalformedResponseError,
    ProviderError,
    TransportError,
)
from .collaboration.log_utils import truncate_log_text

logger = logging.getLogger(__name__)


class AgentClient:
    """Calls one agent's provider with its priming text and the shared history."""

    def __init__(
        self,
        profile: AgentProfile,
        *,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        adapter: Optional[BaseLLMAdapter] = None,
        request_timeout: float = 30.0,
        max_tokens: int = 2048,
        llm_logger: Optional[LLMLogger] = None,
    ):
        self.profile = profile
        self.api_key = api_key
        self.base_url = base_url or self._default_base_url(profile.provider_id)
        self.adapter = adapter or AdapterRegistry.get_for_provider_id(profile.provider_id)
        self.request_timeout = request_timeout
        self.max_tokens = max_tokens
        self.llm_logger = llm_logger

    @staticmethod
    def _default_base_url(provider_id: str) -> str:
        builtin = get_builtin_provider(provider_id)
        return builtin.base_url if builtin else ""

    @property
    def agent_id(self) -> str:
        return self.profile.agent_id

    def build_messages(
        self,
        prompt: str,
        history: Sequence[Dict[str, str]],
        role: Optional[str] = None,
    ) -> List[BaseMessage]:
        """Priming text, then history from this agent's point of view, then the prompt."""
        system_prompt = self.profile.system_prompt
        if role:
            system_prompt = f"{system_prompt}\n\nYour role in this session: {role}"
        messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]

        for item in history:
            content = str(item.get("content", ""))
            if item.get("role") == self.profile.role:
                messages.append(AIMessage(content=content))
            else:
                messages.append(HumanMessage(content=content))

        messages.append(HumanMessage(content=prompt))
        return messages

    async def send_message(
        self,
        prompt: str,
        history: Sequence[Dict[str, str]],
        model_id: str,
        *,
        role: Optional[str] = None,
        session_id: str = "",
    ) -> AgentReply:
        """
        Send one request to the provider.

        Raises:
            AgentTimeoutError: no answer within request_timeout
            TransportError: provider unreachable
            ProviderError: provider rejected the request
            MalformedResponseError: provider answered without text
        """
        if not self.api_key:
            raise ProviderError(
                f"No API key configured for provider '{self.profile.provider_id}'",
                agent_id=self.agent_id,
            )

        messages = self.build_messages(prompt, history, role)
        llm = self.adapter.create_llm(
            model=model_id,
            base_url=self.base_url,
            api_key=self.api_key,
            temperature=self.profile.temperature,
            timeout=self.request_timeout,
            max_retries=0,
            max_tokens=self.max_tokens,
        )

        started = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self.adapter.invoke(llm, messages),
                timeout=self.request_timeout,
            )
        except Exception as e:
            error = self._translate_error(e)
            if self.llm_logger is not None:
                self.llm_logger.log_error(session_id, self.agent_id, e, context=f"model={model_id}")
            raise error from e
        elapsed = time.monotonic() - started

        content = response.content if isinstance(response.content, str) else ""
        if not content.strip():
            raise MalformedResponseError(
                f"{model_id} returned an empty response",
                agent_id=self.agent_id,
            )

        tokens = response.usage.total_tokens if response.usage is not None else None
        if self.llm_logger is not None:
            self.llm_logger.log_interaction(
                session_id=session_id,
                agent_id=self.agent_id,
                model=model_id,
                messages_sent=messages,
                response_text=content,
                tokens=tokens,
                elapsed_seconds=round(elapsed, 3),
            )
        logger.debug(
            "Agent %s (%s) response preview: %s",
            self.agent_id, model_id, truncate_log_text(content, 120),
        )
        return AgentReply(content=content, tokens=tokens)

    async def list_available_models(self) -> List[str]:
        """Advisory catalog: live listing, then profile fallbacks, then builtin ids."""
        models: List[str] = []
        if self.api_key:
            try:
                models = await self.adapter.fetch_models(self.base_url, self.api_key)
            except Exception as e:
                logger.warning(f"Model listing failed for agent {self.agent_id}: {e}")
                models = []
        if models:
            return models
        if self.profile.fallback_models:
            return list(self.profile.fallback_models)
        return get_builtin_model_ids(self.profile.provider_id)

    def _translate_error(self, error: Exception) -> AgentCallError:
        """Map SDK / transport exceptions to the collaboration error kinds."""
        if isinstance(error, AgentCallError):
            if error.agent_id is None:
                error.agent_id = self.agent_id
            return error

        name = type(error).__name__.lower()
        message = str(error) or type(error).__name__

        if isinstance(error, (asyncio.TimeoutError, TimeoutError, httpx.TimeoutException)) or "timeout" in name:
            return AgentTimeoutError(
                f"request timed out after {self.request_timeout:g}s",
                agent_id=self.agent_id,
            )

        status_code = getattr(error, "status_code", None)
        if isinstance(status_code, int):
            return ProviderError(message, agent_id=self.agent_id, status_code=status_code)

        if isinstance(error, httpx.TransportError) or "connection" in name:
            return TransportError(message, agent_id=self.agent_id)

        return ProviderError(message, agent_id=self.agent_id)


def build_agent_clients(
    settings: Settings,
    config: AgentsConfig,
    *,
    llm_logger: Optional[LLMLogger] = None,
) -> Dict[str, AgentClient]:
    """Create the A and B clients from settings and agent profiles."""
    if llm_logger is None:
        llm_logger = get_llm_logger(str(settings.logs_dir))
    clients: Dict[str, AgentClient] = {}
    for profile in config.agents:
        clients[profile.agent_id] = AgentClient(
            profile,
            api_key=settings.api_key_for(profile.provider_id),
            base_url=settings.base_url_for(profile.provider_id),
            request_timeout=settings.agent_request_timeout_seconds,
            max_tokens=settings.agent_max_tokens,
            llm_logger=llm_logger,
        )
    return clients

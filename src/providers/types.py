"""
Provider Types and Data Models

Enums and Pydantic models shared by the agent provider adapters.
"""
from enum import Enum
from typing import List, Optional, Any
from pydantic import BaseModel, Field


class ApiProtocol(str, Enum):
    """Supported API protocol types"""
    OPENAI = "openai"           # OpenAI and compatible APIs
    ANTHROPIC = "anthropic"     # Anthropic Messages API


class TokenUsage(BaseModel):
    """Token usage information from LLM response."""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["TokenUsage"]:
        """Create TokenUsage from provider-specific dict format."""
        if not data:
            return None
        prompt = data.get("prompt_tokens", data.get("input_tokens", 0)) or 0
        completion = data.get("completion_tokens", data.get("output_tokens", 0)) or 0
        return cls(
            prompt_tokens=prompt,
            completion_tokens=completion,
            total_tokens=data.get("total_tokens", 0) or (prompt + completion),
        )

    @classmethod
    def extract_from_message(cls, message: Any) -> Optional["TokenUsage"]:
        """Extract TokenUsage from a LangChain AI message.

        Checks usage_metadata (dict or object) first, then the provider-specific
        response_metadata keys. Returns None if no valid usage data found.
        """
        um = getattr(message, "usage_metadata", None)
        if um:
            if isinstance(um, dict):
                input_t = um.get("input_tokens", 0) or 0
                output_t = um.get("output_tokens", 0) or 0
                total_t = um.get("total_tokens", 0) or 0
            else:
                input_t = getattr(um, "input_tokens", 0) or 0
                output_t = getattr(um, "output_tokens", 0) or 0
                total_t = getattr(um, "total_tokens", 0) or 0
            if input_t > 0 or output_t > 0 or total_t > 0:
                return cls(
                    prompt_tokens=input_t,
                    completion_tokens=output_t,
                    total_tokens=total_t or (input_t + output_t),
                )

        metadata = getattr(message, "response_metadata", None)
        if isinstance(metadata, dict):
            # ChatOpenAI reports "token_usage", ChatAnthropic reports "usage"
            raw_usage = metadata.get("token_usage") or metadata.get("usage")
            if isinstance(raw_usage, dict):
                return cls.from_dict(raw_usage)

        return None


class ModelDefinition(BaseModel):
    """Built-in model definition (minimal info for builtin providers)"""
    id: str = Field(..., description="Model ID (e.g., gpt-4o)")
    name: str = Field(..., description="Display name")


class ProviderDefinition(BaseModel):
    """
    Built-in provider definition.

    Carries the default endpoint and a static model catalog that doubles as the
    fallback list when live model discovery fails.
    """
    id: str = Field(..., description="Unique identifier")
    name: str = Field(..., description="Display name")
    protocol: ApiProtocol = Field(default=ApiProtocol.OPENAI, description="API protocol type")
    base_url: str = Field(..., description="Default API base URL")
    sdk_class: str = Field(default="openai", description="SDK adapter class to use")
    builtin_models: List[ModelDefinition] = Field(
        default_factory=list,
        description="Pre-defined models for this provider"
    )


class LLMResponse(BaseModel):
    """
    Represents a complete LLM response.

    Normalizes output from different providers into a common format.
    """
    content: str = Field(default="", description="Main response content")
    finish_reason: Optional[str] = Field(default=None, description="Finish reason")
    usage: Optional[TokenUsage] = Field(default=None, description="Token usage information")
    raw: Optional[Any] = Field(default=None, exclude=True, description="Raw response from provider")

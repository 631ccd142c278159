"""
Agent profile data models

Defines Pydantic models for the two collaborating agents: persona priming
text, backing provider and model catalog fallbacks
"""
from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional


SLOT_ROLES = {"A": "producer", "B": "consumer"}


class AgentProfile(BaseModel):
    """Configuration for one of the two collaborating agents"""
    agent_id: Literal["A", "B"] = Field(..., description="Agent slot")
    name: str = Field(..., description="Agent display name")
    role: Literal["producer", "consumer"] = Field(..., description="History role of this agent's turns")
    provider_id: str = Field(..., description="Provider backing this agent (anthropic, openai)")
    system_prompt: str = Field(..., description="Priming text prepended to every call")
    default_model: str = Field(..., description="Model preselected for this agent")
    fallback_models: List[str] = Field(default_factory=list, description="Model ids used when listing fails")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")

    @model_validator(mode="after")
    def _role_matches_slot(self):
        expected = SLOT_ROLES[self.agent_id]
        if self.role != expected:
            raise ValueError(f"agent {self.agent_id} must have role '{expected}', got '{self.role}'")
        return self


class AgentsConfig(BaseModel):
    """Complete agents configuration"""
    agents: List[AgentProfile]

    @model_validator(mode="after")
    def _require_both_agents(self):
        ids = sorted(agent.agent_id for agent in self.agents)
        if ids != ["A", "B"]:
            raise ValueError("agents config must define exactly one profile for A and one for B")
        return self

    def get(self, agent_id: str) -> Optional[AgentProfile]:
        for agent in self.agents:
            if agent.agent_id == agent_id:
                return agent
        return None


class AgentProfileInfo(BaseModel):
    """Public agent profile view (no credentials)"""
    agent_id: str
    name: str
    role: str
    provider_id: str
    default_model: str

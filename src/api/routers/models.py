"""
Model catalog API endpoints

Advisory model lists and public profiles for the two agents
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Dict, List

from ..dependencies import get_agent_clients
from ..models.agent_profile import AgentProfileInfo
from ..models.collaboration import ModelListResponse
from ..services.agent_client import AgentClient

router = APIRouter(prefix="/api", tags=["models"])


@router.get("/agents", response_model=List[AgentProfileInfo])
async def list_agents(clients: Dict[str, AgentClient] = Depends(get_agent_clients)):
    """Get both agent profiles (no credentials)"""
    return [
        AgentProfileInfo(
            agent_id=client.profile.agent_id,
            name=client.profile.name,
            role=client.profile.role,
            provider_id=client.profile.provider_id,
            default_model=client.profile.default_model,
        )
        for _, client in sorted(clients.items())
    ]


@router.get("/models/{agent_id}", response_model=ModelListResponse)
async def list_agent_models(
    agent_id: str,
    clients: Dict[str, AgentClient] = Depends(get_agent_clients),
):
    """
    Get selectable model ids for one agent

    Args:
        agent_id: "A" or "B" (case-insensitive)
    """
    client = clients.get(agent_id.upper())
    if client is None:
        raise HTTPException(status_code=404, detail=f"Agent '{agent_id}' not found")
    models = await client.list_available_models()
    return ModelListResponse(
        agent_id=client.agent_id,
        provider_id=client.profile.provider_id,
        models=models,
    )

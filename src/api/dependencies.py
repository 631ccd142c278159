"""Process-wide collaboration runtime shared by the HTTP and WebSocket routes."""

import logging
from typing import Dict, Optional

from .config import settings
from .services.agent_client import AgentClient, build_agent_clients
from .services.agent_profile_service import AgentProfileService
from .services.collaboration import SessionRegistry, TurnOrchestrator, build_completion_detector

logger = logging.getLogger(__name__)

_agent_clients: Optional[Dict[str, AgentClient]] = None
_session_registry: Optional[SessionRegistry] = None


def get_agent_profile_service() -> AgentProfileService:
    """Dependency injection: agent profile service for the configured path"""
    return AgentProfileService(config_path=settings.agents_config_path)


async def get_agent_clients() -> Dict[str, AgentClient]:
    """Dependency injection: the A and B clients, built once from profiles"""
    global _agent_clients
    if _agent_clients is None:
        config = await get_agent_profile_service().load_config()
        _agent_clients = build_agent_clients(settings, config)
        logger.info(
            "Agent clients ready: %s",
            ", ".join(f"{aid}={client.profile.provider_id}" for aid, client in sorted(_agent_clients.items())),
        )
    return _agent_clients


async def get_session_registry() -> SessionRegistry:
    """Dependency injection: the session registry shared by all connections"""
    global _session_registry
    if _session_registry is None:
        clients = await get_agent_clients()
        detector = build_completion_detector(settings.completion_detector)

        def orchestrator_factory() -> TurnOrchestrator:
            return TurnOrchestrator(
                agent_a=clients["A"],
                agent_b=clients["B"],
                completion_detector=detector,
                max_iterations=settings.collaboration_max_iterations,
                max_iterations_cap=settings.collaboration_max_iterations_cap,
                time_limit_seconds=settings.collaboration_time_limit_seconds,
            )

        _session_registry = SessionRegistry(orchestrator_factory)
    return _session_registry


async def shutdown_runtime() -> None:
    """Stop every running session and drop the cached runtime"""
    global _agent_clients, _session_registry
    if _session_registry is not None:
        await _session_registry.shutdown()
    _session_registry = None
    _agent_clients = None

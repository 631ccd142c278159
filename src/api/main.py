"""FastAPI application entry point."""

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables before importing runtime config/services.
load_dotenv()

from .config import settings
from .logging_config import setup_logging

setup_logging(settings.log_level, settings.logs_dir)

import logging

from .dependencies import get_agent_profile_service, shutdown_runtime
from .routers import collaboration, models

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Agent Duet API",
    description="Two-agent collaboration sessions driven over a WebSocket control connection",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(collaboration.router)
app.include_router(models.router)

logger.info("=" * 80)
logger.info("FastAPI Application Started")
logger.info("CORS Origins: %s", settings.cors_origins)
logger.info(
    "Collaboration budgets: max_iterations=%s (cap %s), time_limit=%ss, detector=%s",
    settings.collaboration_max_iterations,
    settings.collaboration_max_iterations_cap,
    settings.collaboration_time_limit_seconds,
    settings.completion_detector,
)
logger.info("=" * 80)


@app.on_event("startup")
async def startup_event():
    """Create the agent profiles file if missing."""
    logger.info("=== Application startup initialization ===")
    service = get_agent_profile_service()
    logger.info("Agent profiles: %s", service.config_path)


@app.on_event("shutdown")
async def shutdown_event():
    """Stop running collaboration sessions."""
    await shutdown_runtime()
    logger.info("Collaboration runtime stopped")


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": "Agent Duet API",
        "docs": "/docs",
        "health": "/api/health",
        "websocket": "/ws/collaboration",
    }

"""Service metadata, liveness and readiness endpoints."""

import logging

from fastapi import APIRouter, Response

from app.models import HealthResponse, ServiceInfo
from app.services.agent import MovieFinderAgent
from app.services.llm import OllamaService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["system"])

VERSION = "1.0.0"

_agent: MovieFinderAgent | None = None
_llm: OllamaService | None = None


def init_router(agent: MovieFinderAgent, llm: OllamaService) -> None:
    global _agent, _llm
    _agent = agent
    _llm = llm


def _get_services() -> tuple[MovieFinderAgent, OllamaService]:
    assert _agent is not None and _llm is not None, "system router not initialized"
    return _agent, _llm


@router.get("/", response_model=ServiceInfo)
async def root():
    agent, _ = _get_services()
    return ServiceInfo(
        service=f"{agent.name} Agent",
        version=VERSION,
        status="running",
        endpoints=[
            "POST /api/movie - Find movie by description",
            "GET /healthz - Health check",
            "GET /readyz - Readiness check",
        ],
    )


@router.get("/healthz")
async def healthz():
    return {"status": "Healthy"}


@router.get("/readyz", response_model=HealthResponse)
async def readyz(response: Response):
    """Ready once the chat endpoint answers."""
    _, llm = _get_services()
    llm_status = await llm.health_check()
    if not llm_status.get("llm_reachable"):
        response.status_code = 503
        return HealthResponse(status="Unhealthy", llm=llm_status)
    return HealthResponse(status="Healthy", llm=llm_status)

"""POST /api/movie, the movie identification endpoint."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.models import MovieRequest, MovieResponse
from app.services.agent import MovieFinderAgent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["movie"])

_agent: MovieFinderAgent | None = None


def init_router(agent: MovieFinderAgent) -> None:
    global _agent
    _agent = agent


def _get_agent() -> MovieFinderAgent:
    assert _agent is not None, "movie router not initialized"
    return _agent


@router.post(
    "/movie",
    response_model=MovieResponse,
    name="FindMovie",
    responses={400: {"description": "Description is required"}, 500: {"description": "Model call failed"}},
)
async def find_movie(request: MovieRequest):
    """
    Identify a movie from a free-text description.

    Prior turns of the conversation may be passed in `history`; the server
    keeps no session state, so the caller sends the full history every time.
    """
    agent = _get_agent()
    logger.info("Received movie search request")

    if not request.description or not request.description.strip():
        logger.warning("Invalid request: description is required")
        return JSONResponse(status_code=400, content={"error": "Description is required"})

    try:
        response = await agent.find_movie(request)
    except Exception as exc:
        logger.error("Error processing movie search request: %s", exc)
        return JSONResponse(
            status_code=500,
            media_type="application/problem+json",
            content={
                "title": "Error processing request",
                "detail": str(exc),
                "status": 500,
            },
        )

    logger.info(
        "Successfully processed movie search request: title=%r confidence=%r",
        response.result.title, response.result.confidence,
    )
    return response

"""FastAPI application entry point with lifespan, logging, and middleware."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.routers import movie, system
from app.services.agent import MovieFinderAgent
from app.services.llm import OllamaService

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    llm = OllamaService()
    agent = MovieFinderAgent(llm, name=settings.name, instructions=settings.instructions)

    movie.init_router(agent)
    system.init_router(agent, llm)

    app.state.llm = llm
    app.state.agent = agent

    logger.info(
        "Application started: agent=%s  model=%s  endpoint=%s  custom_instructions=%s",
        agent.name, llm.model, settings.ollama_base_url, bool(settings.instructions),
    )
    try:
        yield
    finally:
        await llm.aclose()
        logger.info("Application shutting down")


app = FastAPI(
    title="Movie Finder Agent",
    description=(
        "Identifies a movie from a free-text description by asking an LLM "
        "and returning a structured guess: title, year, director, cast, "
        "rating, confidence and notes."
    ),
    version=system.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s → %d  (%.0f ms)",
        request.method, request.url.path, response.status_code, elapsed,
    )
    return response


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal error occurred. Please try again."},
    )


app.include_router(system.router)
app.include_router(movie.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

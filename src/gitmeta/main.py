"""FastAPI application hosting the git metadata pre-step.

A thin stand-in for the rendering framework. It provides:
- GET /health - Health check for load balancers and monitoring
- GET /content/{owner}/{repo}/{path}?ref=<ref> - Run the pre-step for one file
  at one ref (default "main") and return the enriched content

To run locally:
    uvicorn gitmeta.main:app --reload --port 8000
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
import structlog

from gitmeta.context.github import FetcherConfig
from gitmeta.enricher import MetadataEnricher, PreConfig, pre
from gitmeta.logging_config import get_logger, setup_logging
from gitmeta.schemas import RenderContext, RequestDescriptor

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging and one shared enricher for all requests."""
    setup_logging()
    app.state.enricher = MetadataEnricher(config=FetcherConfig.from_env())
    yield


app = FastAPI(
    title="gitmeta",
    description="Git metadata pre-step for content rendering",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Report a failed enrichment as a 500."""
    return JSONResponse(
        status_code=500,
        content={"error": "internal_error", "detail": str(exc)},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    return {"status": "healthy"}


@app.get("/content/{owner}/{repo}/{path:path}")
async def render_content(
    owner: str, repo: str, path: str, request: Request, ref: str = "main"
) -> dict[str, Any]:
    """Run the pre-step for one file revision.

    ``ref`` is a query parameter so branch names containing "/" work.

    Returns:
        The content mapping after enrichment
    """
    descriptor = RequestDescriptor(owner=owner, repo=repo, path=f"/{path}", ref=ref)
    context = RenderContext()
    with structlog.contextvars.bound_contextvars(**descriptor.model_dump()):
        await pre(
            context,
            PreConfig(logger=logger, request=descriptor),
            enricher=request.app.state.enricher,
        )
    return jsonable_encoder(context.content)

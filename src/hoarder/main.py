"""Hoarder FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from hoarder.api.deps import get_inference
from hoarder.config import settings
from hoarder.inference import InferenceClient

# ── Logging ───────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=logging.DEBUG if settings.hoarder_debug else logging.INFO,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
)
# Quiet down noisy third-party loggers
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("LiteLLM").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the inference client once for the life of the process."""
    from hoarder.inference import get_inference_client

    app.state.inference_client = get_inference_client()
    if app.state.inference_client is None:
        logger.warning("Starting without inference; AI features are unavailable")

    yield

    app.state.inference_client = None


app = FastAPI(
    title="Hoarder",
    description="Inference and crawler metrics service",
    version=VERSION,
    lifespan=lifespan,
)

# Register API routes
from hoarder.api.routes import metrics  # noqa: E402

app.include_router(metrics.router, prefix="/api", tags=["Metrics"])


@app.get("/health")
async def health_check(client: InferenceClient | None = Depends(get_inference)):
    return {
        "status": "healthy",
        "version": VERSION,
        "env": settings.hoarder_env,
        "inference": client.backend if client else None,
    }

# backend/directory/main.py
from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import models  # noqa: F401  registers tables on Base.metadata
from .core.config import settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import Base, engine
from .errors import register_error_handlers
from .middleware.prometheus_middleware import PrometheusMiddleware
from .routes import prometheus
from .routes.v1 import (
    admin_claims as admin_claims_v1,
    businesses as businesses_v1,
    categories as categories_v1,
    directory_ai as directory_ai_v1,
    events as events_v1,
    health as health_v1,
    public_api as public_api_v1,
    reviews as reviews_v1,
)
from .schemas.common import RootResponse
from .services.ai_client import build_openai_client

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info(f"{BRAND_NAME} API starting up...")
    logger.info(f"Environment: {settings.environment}")

    Base.metadata.create_all(bind=engine)

    app.state.ai_client = build_openai_client()
    if app.state.ai_client is None:
        logger.warning("OPENAI_API_KEY not set; AI search runs in degraded mode")
    if not settings.public_api_key_hash:
        logger.warning("PUBLIC_API_KEY_HASH not set; public API rejects every key")

    yield

    logger.info(f"{BRAND_NAME} API shutting down...")
    if app.state.ai_client is not None:
        await app.state.ai_client.close()
    engine.dispose()


app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)
logger.info("CORS allow_origins=%s", settings.cors_origins)
app.add_middleware(PrometheusMiddleware)

# Create API v1 router
api_v1 = APIRouter(prefix="/api/v1")

# Mount v1 routes
# Static paths (/search, /tree, /stats) are declared before path parameters inside each router
api_v1.include_router(businesses_v1.router, prefix="/businesses")
api_v1.include_router(events_v1.router, prefix="/events")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(categories_v1.router, prefix="/categories")
api_v1.include_router(admin_claims_v1.router, prefix="/admin/claims")
api_v1.include_router(directory_ai_v1.router, prefix="/directory-ai")
api_v1.include_router(public_api_v1.router, prefix="/public")
api_v1.include_router(health_v1.router, prefix="/health")

app.include_router(api_v1)

# Prometheus scrape endpoint, public like the health check
app.include_router(prometheus.router)


@app.get("/", response_model=RootResponse)
def read_root() -> RootResponse:
    """Root endpoint - API information"""
    return RootResponse(
        message=f"Welcome to the {BRAND_NAME} API!",
        version=API_VERSION,
        docs="/docs",
        environment=settings.environment,
    )

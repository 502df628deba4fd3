"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from linkfolio.api.v1.router import router as v1_router
from linkfolio.core.config import get_settings
from linkfolio.core.database import close_db
from linkfolio.core.exceptions import register_exception_handlers
from linkfolio.core.middleware import SecurityHeadersMiddleware
from linkfolio.core.observability import RequestContextMiddleware, setup_observability
from linkfolio.core.rate_limit import limiter

settings = get_settings()

# Get logger (will be configured by setup_observability)
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    logger.info("Starting Linkfolio API", version=settings.app_version)
    yield
    logger.info("Shutting down Linkfolio API")
    await close_db()
    logger.info("Database connections closed")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Link-in-bio profiles with ordered link collections",
    lifespan=lifespan,
)

# Set up observability (logging, tracing, metrics, Sentry)
setup_observability(app)

# Typed link store failures -> JSON error responses
register_exception_handlers(app)

# Rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# Middleware stack (first added = innermost)
app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    SecurityHeadersMiddleware,
    enable_hsts=not settings.debug,  # Enable HSTS in production
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset", "X-Request-ID"],
)

app.include_router(v1_router)


@app.get("/", include_in_schema=False)
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Welcome to Linkfolio API", "version": settings.app_version}

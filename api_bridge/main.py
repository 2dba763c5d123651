"""
API Bridge - FastAPI Application Entry Point

Registers named HTTP API configurations, executes requests through them by
name, keeps a bounded request history, and offers keyword search and
document fetch over that history.
"""

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from .activity_log import configure_logging, remove_logging
from .config import get_settings
from .context import ServiceContext, build_context, get_context
from .exceptions import register_exception_handlers
from .routers import apis, history, search


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown events."""
    # Startup: fresh in-memory state and logging sinks
    ctx = build_context(settings)
    handler_ids = configure_logging(ctx.activity_log, level=settings.log_level)
    app.state.context = ctx
    logger.info("Starting {} {}", settings.app_name, settings.version)
    yield
    # Shutdown: detach this instance's sinks
    logger.info("Shutting down {}", settings.app_name)
    remove_logging(handler_ids)


app = FastAPI(
    title=settings.app_name,
    description="Named HTTP API configurations with request execution, history and search",
    version=settings.version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register global exception handlers
register_exception_handlers(app)


@app.get("/")
async def root(ctx: ServiceContext = Depends(get_context)):
    """Root endpoint returning service information."""
    return {
        "name": settings.app_name,
        "version": settings.version,
        "status": "running",
        "uptime_seconds": ctx.uptime_seconds,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register routers
app.include_router(apis.router)
app.include_router(history.router)
app.include_router(search.router)

"""
Main Application Entry Point.

This module initializes the FastAPI application, configures logging,
monitoring and middleware (CORS, request tracing), registers the exception
handlers and includes all API routers. It serves as the root of the web
server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aimusic_studio.core.database import init_db
from aimusic_studio.core.logging_config import get_logger, setup_logging
from aimusic_studio.core.monitoring import initialize_logfire

from .api.v1 import (
    admin,
    artists,
    callbacks,
    credits,
    generation,
    health,
    lyrics,
    pipeline,
    projects,
    prompts,
    realtime,
    tracks,
    variations,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware
from .services.deps import close_singletons

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Creates the database tables on startup (SQLite only) and closes the
    provider and auth HTTP clients on shutdown.
    """
    try:
        logger.info("Starting up AI Music Studio Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    logger.info("Shutting down AI Music Studio Server...")
    await close_singletons()


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    AI Music Studio Server API

    Backend of the AI Music Studio: it proxies music generation to Suno and Mureka,
    enhances prompts with an LLM, tracks generation jobs and streams their progress.
    """,
    version=constant.API_VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

initialize_logfire(app)

cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)

app.include_router(health.router, tags=["health"])
app.include_router(generation.router, prefix=f"{constant.API_V1_STR}/generation", tags=["generation"])
app.include_router(callbacks.router, prefix=f"{constant.API_V1_STR}/callbacks", tags=["callbacks"])
app.include_router(lyrics.router, prefix=f"{constant.API_V1_STR}/lyrics", tags=["lyrics"])
app.include_router(prompts.router, prefix=f"{constant.API_V1_STR}/prompts", tags=["prompts"])
app.include_router(tracks.router, prefix=f"{constant.API_V1_STR}/tracks", tags=["tracks"])
app.include_router(variations.router, prefix=f"{constant.API_V1_STR}/tracks", tags=["variations"])
app.include_router(pipeline.router, prefix=f"{constant.API_V1_STR}/pipeline", tags=["pipeline"])
app.include_router(artists.router, prefix=f"{constant.API_V1_STR}/artists", tags=["artists"])
app.include_router(projects.router, prefix=f"{constant.API_V1_STR}/projects", tags=["projects"])
app.include_router(credits.router, prefix=f"{constant.API_V1_STR}/credits", tags=["credits"])
app.include_router(admin.router, prefix=f"{constant.API_V1_STR}/admin", tags=["admin"])
app.include_router(realtime.router, prefix=f"{constant.API_V1_STR}/realtime", tags=["realtime"])


def run() -> None:
    """Serve the application with uvicorn using the configured host and port."""
    import uvicorn

    uvicorn.run(
        "aimusic_studio.server.main:app",
        host=settings.server_host,
        port=settings.server_port,
        log_level=settings.log_level.lower(),
    )

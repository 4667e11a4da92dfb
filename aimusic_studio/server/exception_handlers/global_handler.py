"""
Exception Handlers for the FastAPI Application.

``ProviderError`` (a music provider or the LLM backend failed) becomes a
502 response naming the provider. Any other unhandled exception is logged
with an error id and request context and becomes a 500 response carrying
that id, so clients can reference it when reporting issues.
"""

import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from aimusic_studio.core.logging_config import get_logger
from aimusic_studio.providers import ProviderError

logger = get_logger(__name__)


async def provider_exception_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """
    Map a provider failure to ``502 Bad Gateway``.

    Args:
        request: The HTTP request that caused the exception
        exc: The ``ProviderError`` that was raised

    Returns:
        JSONResponse with ``detail``, ``provider`` and the upstream ``status_code``
    """
    logger.warning(
        f"Provider error in {request.method} {request.url.path}: [{exc.provider}] {exc}",
        extra={"provider": exc.provider, "upstream_status": exc.status_code, "path": request.url.path},
    )
    return JSONResponse(
        status_code=502,
        content={
            "detail": str(exc),
            "provider": exc.provider,
            "status_code": exc.status_code,
        },
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Global exception handler to log detailed error information.

    Args:
        request: The HTTP request that caused the exception
        exc: The exception that was raised

    Returns:
        JSONResponse with error details and error ID
    """
    error_id = id(exc)

    logger.error(
        f"Unhandled exception [{error_id}] in {request.method} {request.url.path}: {str(exc)}",
        exc_info=True,
        extra={
            "error_id": error_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client": request.client.host if request.client else "unknown",
            "error_type": type(exc).__name__,
            "traceback": traceback.format_exc(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "error_id": error_id,
            "error_type": type(exc).__name__,
        },
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance
    """
    app.add_exception_handler(ProviderError, provider_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    logger.debug("Exception handlers registered successfully")

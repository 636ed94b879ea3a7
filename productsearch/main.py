"""Product search API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from productsearch.api.health import router as health_router
from productsearch.api.middleware import setup_middleware
from productsearch.api.products import router as products_router
from productsearch.domain.exceptions import (
    CatalogError,
    DecodeError,
    IndexUnavailableError,
    InvalidQueryError,
)
from productsearch.infrastructure.config import settings
from productsearch.infrastructure.logging import configure_logging
from productsearch.infrastructure.search_client import build_search_client

configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    The Elasticsearch client is created once here and closed on
    shutdown; request handlers reach it through ``app.state``.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting product search API",
        version=settings.api_version,
        debug=settings.debug,
        index=settings.products_index,
    )

    app.state.search_client = build_search_client(settings)
    try:
        yield
    finally:
        logger.info("Shutting down product search API")
        await app.state.search_client.close()


app = FastAPI(
    title="Product Search API",
    description="Product catalog backed by an Elasticsearch index",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup custom middleware (request ID, error handling)
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)


# ============================================================================
# Custom Exception Handlers
# ============================================================================


CATALOG_ERROR_STATUS: dict[type[CatalogError], int] = {
    IndexUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DecodeError: status.HTTP_400_BAD_REQUEST,
    InvalidQueryError: status.HTTP_400_BAD_REQUEST,
}


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    request_id = getattr(request.state, "request_id", None)

    detail = exc.detail
    if isinstance(detail, dict):
        error_code = detail.get("error_code", "ERROR")
        message = detail.get("message", str(detail))
        details = detail.get("details", [])
    else:
        error_code = "ERROR"
        message = str(detail)
        details = []

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error_code": error_code,
            "message": message,
            "details": details,
            "request_id": request_id,
        },
    )


@app.exception_handler(CatalogError)
async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
    """Translate catalog errors into the standard error response."""
    request_id = getattr(request.state, "request_id", None)
    status_code = CATALOG_ERROR_STATUS.get(
        type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    logger.warning(
        "Catalog request failed",
        path=request.url.path,
        method=request.method,
        error_code=exc.error_code,
        error=exc.message,
    )

    return JSONResponse(
        status_code=status_code,
        content={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
            "request_id": request_id,
        },
    )

"""Health check endpoints.

Provides endpoints for monitoring service health and readiness.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from productsearch.api.dependencies import get_search_client
from productsearch.infrastructure.config import settings
from productsearch.infrastructure.index_gateway import IndexGateway

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health.

    Returns:
        Health status with service name and version.
    """
    return HealthResponse(
        status="healthy",
        service="productsearch",
        version=settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    client: Annotated[AsyncElasticsearch, Depends(get_search_client)],
) -> JSONResponse:
    """Check if service is ready to accept requests.

    Ready means the index engine answers a ping.

    Returns:
        Readiness status; 503 when the index engine is unreachable.
    """
    gateway = IndexGateway(client, request_timeout=settings.index_request_timeout)
    if await gateway.ping():
        return JSONResponse(status_code=status.HTTP_200_OK, content={"status": "ready"})
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not_ready", "reason": "index engine unreachable"},
    )

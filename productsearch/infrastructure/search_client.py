"""Elasticsearch client construction.

The client is created once per process (see the application lifespan)
and shared by every request.
"""

from typing import Any

import structlog
from elasticsearch import AsyncElasticsearch

from productsearch.infrastructure.config import Settings

logger = structlog.get_logger()


def build_search_client(settings: Settings) -> AsyncElasticsearch:
    """Create the async Elasticsearch client from settings.

    Args:
        settings: Application settings.

    Returns:
        Configured AsyncElasticsearch client. No connection is opened
        until the first request.
    """
    kwargs: dict[str, Any] = {"request_timeout": settings.index_request_timeout}

    if settings.elasticsearch_api_key:
        kwargs["api_key"] = settings.elasticsearch_api_key

    if settings.elasticsearch_url.startswith("https"):
        kwargs["verify_certs"] = settings.elasticsearch_verify_certs

    logger.info(
        "Creating Elasticsearch client",
        url=settings.elasticsearch_url,
        request_timeout=settings.index_request_timeout,
    )
    return AsyncElasticsearch(settings.elasticsearch_url, **kwargs)

"""Request dependencies.

The Elasticsearch client lives on ``app.state`` for the lifetime of the
process; services are built on it per request.
"""

from typing import Annotated

from elasticsearch import AsyncElasticsearch
from fastapi import Depends, Request

from productsearch.catalog.service import CatalogService, build_catalog_service
from productsearch.infrastructure.config import settings


def get_search_client(request: Request) -> AsyncElasticsearch:
    """Get the shared Elasticsearch client."""
    return request.app.state.search_client


def get_catalog_service(
    client: Annotated[AsyncElasticsearch, Depends(get_search_client)],
) -> CatalogService:
    """Get catalog service bound to the shared client."""
    return build_catalog_service(client, settings)

"""Product Catalog.

Product model, query translation, spreadsheet ingestion and the
catalog service facade.
"""

from productsearch.catalog.ingestion import (
    BulkIngestionPipeline,
    BulkIngestionResult,
    IngestionItem,
)
from productsearch.catalog.models import Product, ProductUpdate
from productsearch.catalog.service import (
    CatalogService,
    LookupStatus,
    ProductLookupResult,
    ProductUpdateResult,
    build_catalog_service,
)
from productsearch.catalog.spreadsheet import DecodedRow, decode_workbook

__all__ = [
    # Models
    "Product",
    "ProductUpdate",
    # Spreadsheet
    "DecodedRow",
    "decode_workbook",
    # Ingestion
    "BulkIngestionPipeline",
    "BulkIngestionResult",
    "IngestionItem",
    # Service
    "CatalogService",
    "LookupStatus",
    "ProductLookupResult",
    "ProductUpdateResult",
    "build_catalog_service",
]

"""Catalog service for product operations.

Use-case facade over the index gateway, query translation and the bulk
ingestion pipeline. Lookups and updates return explicit result values
so callers can tell "not there" apart from a failed request, which is
always raised.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from elasticsearch import AsyncElasticsearch

from productsearch.catalog.ingestion import BulkIngestionPipeline, BulkIngestionResult
from productsearch.catalog.models import Product, ProductUpdate
from productsearch.catalog.queries import (
    category_query,
    match_all_query,
    price_range_query,
)
from productsearch.infrastructure.config import Settings
from productsearch.infrastructure.index_gateway import (
    IndexedDocument,
    IndexGateway,
    UpdateOutcome,
)

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


class LookupStatus(str, Enum):
    """Outcome of a single-product lookup."""

    FOUND = "found"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ProductLookupResult:
    """Result of looking up a product by id."""

    status: LookupStatus
    product: Product | None = None

    @property
    def found(self) -> bool:
        """Check if the product exists."""
        return self.status == LookupStatus.FOUND


@dataclass(frozen=True)
class ProductUpdateResult:
    """Result of a partial product update.

    ``product`` holds the merged product for CREATED and UPDATED
    outcomes and is None for NOOP (no such product) and FAILED.
    """

    outcome: UpdateOutcome
    product: Product | None = None

    @property
    def applied(self) -> bool:
        """Check if the update was written."""
        return self.outcome in (UpdateOutcome.CREATED, UpdateOutcome.UPDATED)


# ============================================================================
# Catalog Service
# ============================================================================


class CatalogService:
    """Service for catalog operations.

    Example usage:
        service = CatalogService(IndexGateway(client))
        await service.create(Product(id="p1", name="Widget", price=9.99))
        lookup = await service.get_by_id("p1")
        if lookup.found:
            print(lookup.product.name)
    """

    def __init__(
        self,
        gateway: IndexGateway,
        collection: str = "products",
        pipeline: BulkIngestionPipeline | None = None,
        search_size: int | None = None,
        update_upsert: bool = False,
        write_refresh: bool = False,
    ) -> None:
        """Initialize service.

        Args:
            gateway: Index gateway.
            collection: Index holding the products.
            pipeline: Bulk ingestion pipeline; a default one is built
                on the same gateway and collection if omitted.
            search_size: Maximum hits per search; None keeps the
                engine default.
            update_upsert: Create missing products on update instead of
                reporting NOOP.
            write_refresh: Make single-product writes searchable
                immediately.
        """
        self.gateway = gateway
        self.collection = collection
        self.pipeline = pipeline or BulkIngestionPipeline(gateway, collection)
        self.search_size = search_size
        self.update_upsert = update_upsert
        self.write_refresh = write_refresh

    async def create(self, product: Product) -> Product:
        """Create or replace a product.

        Args:
            product: Product to store. Its id is the document key.

        Returns:
            The stored product.
        """
        await self.gateway.index_document(
            self.collection,
            product.id,
            product.to_document(),
            refresh=self.write_refresh,
        )
        logger.info("Product stored", product_id=product.id, collection=self.collection)
        return product

    async def bulk_create(
        self,
        data: bytes,
        source: str | None = None,
    ) -> BulkIngestionResult:
        """Load products from a spreadsheet.

        Args:
            data: Raw workbook bytes.
            source: Optional source name (e.g., uploaded filename).

        Returns:
            Per-row ingestion report; ``result.success`` is True only
            if every row was indexed.
        """
        return await self.pipeline.ingest(data, source=source)

    async def list_all(self) -> list[Product]:
        """List products (first page of the engine's default size)."""
        return await self._search(match_all_query())

    async def get_by_id(self, product_id: str) -> ProductLookupResult:
        """Get product by ID.

        Args:
            product_id: Product ID.

        Returns:
            FOUND with the product, or NOT_FOUND.
        """
        if not product_id:
            return ProductLookupResult(status=LookupStatus.NOT_FOUND)
        document = await self.gateway.get_document(self.collection, product_id)
        if document is None:
            return ProductLookupResult(status=LookupStatus.NOT_FOUND)
        return ProductLookupResult(
            status=LookupStatus.FOUND,
            product=self._to_product(document),
        )

    async def update(self, product_id: str, changes: ProductUpdate) -> ProductUpdateResult:
        """Merge the supplied fields into a stored product.

        Args:
            product_id: Product ID.
            changes: Fields to change; unset fields keep their values.

        Returns:
            Update result with the merged product when applied.
        """
        if not product_id:
            return ProductUpdateResult(outcome=UpdateOutcome.NOOP)
        result = await self.gateway.update_document(
            self.collection,
            product_id,
            changes.to_partial_document(),
            upsert=self.update_upsert,
            refresh=self.write_refresh,
        )

        if result.outcome not in (UpdateOutcome.CREATED, UpdateOutcome.UPDATED):
            logger.info(
                "Product not updated",
                product_id=product_id,
                outcome=result.outcome.value,
            )
            return ProductUpdateResult(outcome=result.outcome)

        if result.source is not None:
            product = Product.from_document(product_id, result.source)
        else:
            lookup = await self.get_by_id(product_id)
            product = lookup.product

        logger.info("Product updated", product_id=product_id, outcome=result.outcome.value)
        return ProductUpdateResult(outcome=result.outcome, product=product)

    async def delete(self, product_id: str) -> bool:
        """Delete a product.

        Args:
            product_id: Product ID.

        Returns:
            True if the product existed and was removed.
        """
        if not product_id:
            return False
        deleted = await self.gateway.delete_document(
            self.collection,
            product_id,
            refresh=self.write_refresh,
        )
        logger.info("Product delete", product_id=product_id, deleted=deleted)
        return deleted

    async def search_by_category(self, category: str) -> list[Product]:
        """Find products in a category.

        Args:
            category: Category to match.

        Returns:
            Matching products in relevance order.
        """
        return await self._search(category_query(category))

    async def search_by_price_range(
        self,
        min_price: float,
        max_price: float,
    ) -> list[Product]:
        """Find products priced within inclusive bounds.

        Args:
            min_price: Inclusive lower bound.
            max_price: Inclusive upper bound.

        Returns:
            Matching products.

        Raises:
            InvalidQueryError: If min_price > max_price.
        """
        return await self._search(price_range_query(min_price, max_price))

    async def _search(self, query: dict) -> list[Product]:
        documents = await self.gateway.search(self.collection, query, size=self.search_size)
        return [self._to_product(document) for document in documents]

    @staticmethod
    def _to_product(document: IndexedDocument) -> Product:
        return Product.from_document(document.id, document.source)


# ============================================================================
# Service Factory
# ============================================================================


def build_catalog_service(client: AsyncElasticsearch, settings: Settings) -> CatalogService:
    """Build a catalog service on the shared client.

    Args:
        client: Shared async Elasticsearch client.
        settings: Application settings.

    Returns:
        CatalogService instance.
    """
    gateway = IndexGateway(client, request_timeout=settings.index_request_timeout)
    pipeline = BulkIngestionPipeline(
        gateway,
        settings.products_index,
        wait_for_active_shards=settings.bulk_wait_for_active_shards,
        refresh=settings.bulk_refresh,
        header_rows=settings.spreadsheet_header_rows,
    )
    return CatalogService(
        gateway,
        collection=settings.products_index,
        pipeline=pipeline,
        search_size=settings.search_size,
        update_upsert=settings.update_upsert,
        write_refresh=settings.write_refresh,
    )

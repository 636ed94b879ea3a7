"""Bulk ingestion pipeline.

Turns a spreadsheet upload into a single bulk index request and
reports the outcome of every row. The bulk write is best effort:
rows that the engine accepts stay indexed even when other rows fail.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from productsearch.catalog.spreadsheet import DecodedRow, decode_workbook
from productsearch.domain.exceptions import DecodeError, IndexUnavailableError
from productsearch.infrastructure.index_gateway import IndexGateway

logger = structlog.get_logger()

Decoder = Callable[..., list[DecodedRow]]


@dataclass(frozen=True)
class IngestionItem:
    """Outcome of one spreadsheet row.

    Attributes:
        sheet: Sheet the row came from.
        row: 1-based row number within the sheet.
        document_id: Product id of the row ("" if it had none).
        succeeded: Whether the row is now indexed.
        status: Engine status for submitted rows; None for rejected rows.
        error: Failure reason.
    """

    sheet: str
    row: int
    document_id: str
    succeeded: bool
    status: int | None = None
    error: str | None = None


@dataclass
class BulkIngestionResult:
    """Per-row report of a bulk ingestion.

    Attributes:
        items: One entry per decoded row, in workbook order.
    """

    items: list[IngestionItem]

    @property
    def total(self) -> int:
        """Number of rows processed."""
        return len(self.items)

    @property
    def succeeded(self) -> int:
        """Number of rows indexed."""
        return sum(1 for item in self.items if item.succeeded)

    @property
    def failed(self) -> int:
        """Number of rows not indexed."""
        return self.total - self.succeeded

    @property
    def failed_items(self) -> list[IngestionItem]:
        """Rows that were not indexed."""
        return [item for item in self.items if not item.succeeded]

    @property
    def success(self) -> bool:
        """True only if every row was indexed."""
        return self.failed == 0


class BulkIngestionPipeline:
    """Decode a workbook and load its products with one bulk request.

    Rows that do not decode to a valid product are reported as failed
    and left out of the request. Everything else is submitted as one
    ``index`` (create-or-replace) action per product, keyed by id.

    Example usage:
        pipeline = BulkIngestionPipeline(gateway, "products")
        result = await pipeline.ingest(workbook_bytes)
        if not result.success:
            for item in result.failed_items:
                print(item.row, item.error)
    """

    def __init__(
        self,
        gateway: IndexGateway,
        collection: str,
        wait_for_active_shards: int = 1,
        refresh: bool = True,
        header_rows: int = 0,
        decoder: Decoder = decode_workbook,
    ) -> None:
        """Initialize pipeline.

        Args:
            gateway: Index gateway.
            collection: Target index.
            wait_for_active_shards: Shard copies that must be active
                before the bulk write proceeds.
            refresh: Whether loaded products are searchable immediately.
            header_rows: Leading rows to skip on each sheet.
            decoder: Workbook decoder.
        """
        self.gateway = gateway
        self.collection = collection
        self.wait_for_active_shards = wait_for_active_shards
        self.refresh = refresh
        self.header_rows = header_rows
        self.decoder = decoder

    async def ingest(self, data: bytes, source: str | None = None) -> BulkIngestionResult:
        """Decode and index a workbook.

        Args:
            data: Raw workbook bytes.
            source: Optional source name for logs and errors.

        Returns:
            Per-row ingestion report.

        Raises:
            DecodeError: If the workbook cannot be decoded. Nothing is
                written in that case.
            IndexUnavailableError: If the bulk request fails as a whole.
        """
        try:
            rows = self.decoder(data, header_rows=self.header_rows)
        except DecodeError as e:
            if source:
                e.details.setdefault("source", source)
            logger.warning(
                "Bulk source rejected",
                source=source,
                reason=e.details.get("reason"),
            )
            raise

        return await self.ingest_rows(rows, source=source)

    async def ingest_rows(
        self,
        rows: Sequence[DecodedRow],
        source: str | None = None,
    ) -> BulkIngestionResult:
        """Index already decoded rows.

        Args:
            rows: Decoded rows.
            source: Optional source name for logs.

        Returns:
            Per-row ingestion report.

        Raises:
            IndexUnavailableError: If the bulk request fails as a whole.
        """
        valid_rows = [row for row in rows if row.product is not None]
        documents = [(row.product.id, row.product.to_document()) for row in valid_rows]

        outcomes = []
        if documents:
            outcomes = await self.gateway.bulk_index(
                self.collection,
                documents,
                wait_for_active_shards=self.wait_for_active_shards,
                refresh=self.refresh,
            )
            if len(outcomes) != len(documents):
                raise IndexUnavailableError(
                    "bulk",
                    self.collection,
                    f"expected {len(documents)} item results, got {len(outcomes)}",
                )

        submitted = iter(outcomes)
        items: list[IngestionItem] = []
        for row in rows:
            if row.product is None:
                items.append(
                    IngestionItem(
                        sheet=row.sheet,
                        row=row.row,
                        document_id=row.document_id,
                        succeeded=False,
                        error=row.error,
                    )
                )
                continue

            outcome = next(submitted)
            items.append(
                IngestionItem(
                    sheet=row.sheet,
                    row=row.row,
                    document_id=row.product.id,
                    succeeded=outcome.succeeded,
                    status=outcome.status,
                    error=outcome.error,
                )
            )

        result = BulkIngestionResult(items=items)

        for item in result.failed_items:
            logger.warning(
                "Bulk row failed",
                source=source,
                sheet=item.sheet,
                row=item.row,
                document_id=item.document_id,
                status=item.status,
                error=item.error,
            )

        logger.info(
            "Bulk ingestion completed",
            source=source,
            collection=self.collection,
            total=result.total,
            succeeded=result.succeeded,
            failed=result.failed,
        )
        return result

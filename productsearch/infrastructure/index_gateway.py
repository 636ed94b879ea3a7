"""Index gateway over the Elasticsearch document API.

Translates document-level operations (index, get, update, delete,
search, bulk) into Elasticsearch calls and classifies the responses.
Not-found conditions are returned as values; transport, timeout and
protocol failures are raised as IndexUnavailableError.
"""

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any

import structlog
from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from productsearch.domain.exceptions import IndexUnavailableError

logger = structlog.get_logger()


# ============================================================================
# Gateway Result Types
# ============================================================================


@dataclass(frozen=True)
class IndexedDocument:
    """A document read back from the index.

    Attributes:
        id: Document id.
        source: Stored document body.
        score: Relevance score for search hits.
    """

    id: str
    source: dict[str, Any]
    score: float | None = None


class UpdateOutcome(str, Enum):
    """Classification of a merge update."""

    CREATED = "created"
    UPDATED = "updated"
    NOOP = "noop"  # target document does not exist, nothing written
    FAILED = "failed"


@dataclass(frozen=True)
class UpdateResult:
    """Result of a merge update.

    Attributes:
        outcome: Update classification.
        source: Merged document body for CREATED/UPDATED.
    """

    outcome: UpdateOutcome
    source: dict[str, Any] | None = None


@dataclass(frozen=True)
class BulkItemOutcome:
    """Outcome of one action in a bulk request.

    Attributes:
        document_id: Id the action addressed.
        succeeded: Whether the engine accepted the write.
        status: HTTP status reported for the item.
        result: Engine result ("created", "updated") on success.
        error: Error type and reason on failure.
    """

    document_id: str
    succeeded: bool
    status: int | None = None
    result: str | None = None
    error: str | None = None


# ============================================================================
# Index Gateway
# ============================================================================


class IndexGateway:
    """Stateless document gateway over a shared Elasticsearch client.

    The client is owned by the application and injected here; the
    gateway never opens or closes connections.

    Example usage:
        gateway = IndexGateway(client, request_timeout=5.0)
        await gateway.index_document("products", "p1", {"name": "Widget"})
        document = await gateway.get_document("products", "p1")
    """

    def __init__(self, client: AsyncElasticsearch, request_timeout: float = 10.0) -> None:
        """Initialize gateway.

        Args:
            client: Shared async Elasticsearch client.
            request_timeout: Per-call timeout in seconds.
        """
        self.client = client
        self.request_timeout = request_timeout

    def _client(self, ignore_not_found: bool = False) -> AsyncElasticsearch:
        """Get client bound to the per-call options."""
        options: dict[str, Any] = {"request_timeout": self.request_timeout}
        if ignore_not_found:
            options["ignore_status"] = 404
        return self.client.options(**options)

    @contextmanager
    def _translate_errors(
        self,
        operation: str,
        collection: str,
        document_id: str | None = None,
    ) -> Iterator[None]:
        """Convert client exceptions into IndexUnavailableError."""
        try:
            yield
        except (ApiError, TransportError) as e:
            logger.error(
                "Index operation failed",
                operation=operation,
                collection=collection,
                document_id=document_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise IndexUnavailableError(
                operation, collection, str(e), document_id=document_id
            ) from e

    async def index_document(
        self,
        collection: str,
        document_id: str,
        document: dict[str, Any],
        refresh: bool = False,
    ) -> str:
        """Create or fully replace a document.

        Args:
            collection: Index name.
            document_id: Document id.
            document: Document body.
            refresh: Whether to make the write visible to search immediately.

        Returns:
            Committed document id.

        Raises:
            IndexUnavailableError: On transport or protocol error.
        """
        with self._translate_errors("index", collection, document_id):
            response = await self._client().index(
                index=collection,
                id=document_id,
                document=document,
                refresh=refresh,
            )

        body = response.body
        logger.debug(
            "Document indexed",
            collection=collection,
            document_id=body["_id"],
            result=body.get("result"),
        )
        return body["_id"]

    async def get_document(
        self,
        collection: str,
        document_id: str,
    ) -> IndexedDocument | None:
        """Get a document by id.

        Args:
            collection: Index name.
            document_id: Document id.

        Returns:
            The document, or None if it (or the index) does not exist.

        Raises:
            IndexUnavailableError: On transport or protocol error.
        """
        with self._translate_errors("get", collection, document_id):
            response = await self._client(ignore_not_found=True).get(
                index=collection,
                id=document_id,
            )

        body = response.body
        if not body.get("found"):
            return None
        return IndexedDocument(id=body["_id"], source=body.get("_source") or {})

    async def update_document(
        self,
        collection: str,
        document_id: str,
        partial_document: dict[str, Any],
        upsert: bool = False,
        refresh: bool = False,
    ) -> UpdateResult:
        """Merge fields into an existing document.

        With ``upsert`` off, a missing document is reported as NOOP and
        nothing is written. With it on, the partial document is stored
        as a new document and reported as CREATED.

        Args:
            collection: Index name.
            document_id: Document id.
            partial_document: Fields to merge.
            upsert: Whether to create the document when missing.
            refresh: Whether to make the write visible to search immediately.

        Returns:
            Update classification with the merged document.

        Raises:
            IndexUnavailableError: On transport or protocol error.
        """
        with self._translate_errors("update", collection, document_id):
            response = await self._client(ignore_not_found=True).update(
                index=collection,
                id=document_id,
                doc=partial_document,
                doc_as_upsert=upsert,
                source=True,
                refresh=refresh,
            )

        body = response.body
        if "error" in body:
            logger.info(
                "Update target missing",
                collection=collection,
                document_id=document_id,
                error_type=body["error"].get("type"),
            )
            return UpdateResult(outcome=UpdateOutcome.NOOP)

        result = body.get("result")
        source = (body.get("get") or {}).get("_source")

        if result == "created":
            return UpdateResult(outcome=UpdateOutcome.CREATED, source=source)
        # "noop" from the engine means the merge changed nothing; the document exists
        if result in ("updated", "noop"):
            return UpdateResult(outcome=UpdateOutcome.UPDATED, source=source)

        logger.warning(
            "Unexpected update result",
            collection=collection,
            document_id=document_id,
            result=result,
        )
        return UpdateResult(outcome=UpdateOutcome.FAILED)

    async def delete_document(
        self,
        collection: str,
        document_id: str,
        refresh: bool = False,
    ) -> bool:
        """Delete a document.

        Args:
            collection: Index name.
            document_id: Document id.
            refresh: Whether to make the delete visible to search immediately.

        Returns:
            True if a document was removed, False if it was already absent.

        Raises:
            IndexUnavailableError: On transport or protocol error.
        """
        with self._translate_errors("delete", collection, document_id):
            response = await self._client(ignore_not_found=True).delete(
                index=collection,
                id=document_id,
                refresh=refresh,
            )

        return response.body.get("result") == "deleted"

    async def search(
        self,
        collection: str,
        query: dict[str, Any],
        size: int | None = None,
    ) -> list[IndexedDocument]:
        """Run a query and return matching documents in engine order.

        Args:
            collection: Index name.
            query: Query DSL clause.
            size: Maximum hits; None keeps the engine default.

        Returns:
            Matching documents. Empty if nothing matches or the index
            does not exist.

        Raises:
            IndexUnavailableError: On transport or protocol error.
        """
        params: dict[str, Any] = {"index": collection, "query": query}
        if size is not None:
            params["size"] = size

        with self._translate_errors("search", collection):
            response = await self._client(ignore_not_found=True).search(**params)

        body = response.body
        if "error" in body:
            logger.info("Search on missing index", collection=collection)
            return []

        return [
            IndexedDocument(
                id=hit["_id"],
                source=hit.get("_source") or {},
                score=hit.get("_score"),
            )
            for hit in body["hits"]["hits"]
        ]

    async def bulk_index(
        self,
        collection: str,
        documents: Sequence[tuple[str, dict[str, Any]]],
        wait_for_active_shards: int = 1,
        refresh: bool = True,
    ) -> list[BulkItemOutcome]:
        """Create or replace many documents in one bulk request.

        The request is not atomic: each item succeeds or fails on its
        own and successful items are kept when others fail.

        Args:
            collection: Index name.
            documents: (document id, document body) pairs.
            wait_for_active_shards: Shard copies that must be active
                before the write proceeds.
            refresh: Whether to make the writes visible to search immediately.

        Returns:
            One outcome per document, in submission order.

        Raises:
            IndexUnavailableError: If the request as a whole fails.
        """
        if not documents:
            return []

        operations: list[dict[str, Any]] = []
        for document_id, document in documents:
            operations.append({"index": {"_index": collection, "_id": document_id}})
            operations.append(document)

        with self._translate_errors("bulk", collection):
            response = await self._client().bulk(
                operations=operations,
                wait_for_active_shards=wait_for_active_shards,
                refresh=refresh,
            )

        body = response.body
        outcomes = [self._bulk_item_outcome(item) for item in body.get("items", [])]

        logger.info(
            "Bulk request completed",
            collection=collection,
            items=len(outcomes),
            errors=body.get("errors", False),
            took_ms=body.get("took"),
        )
        return outcomes

    @staticmethod
    def _bulk_item_outcome(item: dict[str, Any]) -> BulkItemOutcome:
        """Classify one entry of a bulk response ``items`` list."""
        # Each item is keyed by its action name, e.g. {"index": {...}}
        info = next(iter(item.values()))
        status = info.get("status")
        error = info.get("error")

        if error is not None:
            if isinstance(error, dict):
                error_text = f"{error.get('type')}: {error.get('reason')}"
            else:
                error_text = str(error)
            return BulkItemOutcome(
                document_id=info.get("_id", ""),
                succeeded=False,
                status=status,
                error=error_text,
            )

        return BulkItemOutcome(
            document_id=info.get("_id", ""),
            succeeded=status is None or status < 300,
            status=status,
            result=info.get("result"),
        )

    async def ping(self) -> bool:
        """Check that the index engine is reachable.

        Returns:
            True if the engine answered.
        """
        try:
            return bool(await self._client().ping())
        except (ApiError, TransportError) as e:
            logger.warning("Index engine ping failed", error=str(e))
            return False

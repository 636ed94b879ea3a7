"""Domain exceptions.

Errors surfaced by the catalog core. Absence results (a product that
was not found, an update that had nothing to merge into) are NOT
exceptions; they are returned as result values by the catalog service.
"""

from typing import Any


class CatalogError(Exception):
    """Base class for all catalog exceptions.

    All catalog errors inherit from this class so the API layer can
    translate them into the standard error response.
    """

    error_code = "CATALOG_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize catalog error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Index Errors
# ============================================================================


class IndexUnavailableError(CatalogError):
    """Raised when the index engine cannot be reached or rejects a request.

    Covers transport failures, timeouts and protocol errors. Callers may
    retry with backoff; the catalog core does not retry inline.
    """

    error_code = "INDEX_UNAVAILABLE"

    def __init__(
        self,
        operation: str,
        collection: str,
        reason: str,
        document_id: str | None = None,
    ) -> None:
        """Initialize index unavailable error.

        Args:
            operation: Gateway operation that failed (e.g., "get").
            collection: Index the operation targeted.
            reason: Underlying failure description.
            document_id: Document the operation addressed, if any.
        """
        details: dict[str, Any] = {
            "operation": operation,
            "collection": collection,
            "reason": reason,
        }
        if document_id is not None:
            details["document_id"] = document_id
        super().__init__(
            f"Index operation '{operation}' on '{collection}' failed: {reason}",
            details=details,
        )
        self.operation = operation
        self.collection = collection


# ============================================================================
# Input Errors
# ============================================================================


class DecodeError(CatalogError):
    """Raised when a bulk source cannot be decoded at all.

    Raised before any index write is attempted.
    """

    error_code = "DECODE_ERROR"

    def __init__(self, reason: str, source: str | None = None) -> None:
        """Initialize decode error.

        Args:
            reason: Why the source could not be decoded.
            source: Optional name of the source (e.g., uploaded filename).
        """
        details: dict[str, Any] = {"reason": reason}
        if source:
            details["source"] = source
        super().__init__(f"Could not decode bulk source: {reason}", details=details)


class InvalidQueryError(CatalogError):
    """Raised when query inputs cannot form a valid predicate."""

    error_code = "INVALID_QUERY"

    def __init__(self, reason: str, **params: Any) -> None:
        """Initialize invalid query error.

        Args:
            reason: Explanation of why the query is invalid.
            **params: Offending query parameters.
        """
        super().__init__(f"Invalid query: {reason}", details={"reason": reason, **params})

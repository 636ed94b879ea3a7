"""API schemas for the product search API.

Pydantic models for request/response validation and serialization.
Product bodies reuse the catalog models directly.
"""

from pydantic import BaseModel, Field

from productsearch.catalog.ingestion import BulkIngestionResult


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict | list = Field(
        default_factory=list, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


# ============================================================================
# Bulk Ingestion Schemas
# ============================================================================


class BulkItemSchema(BaseModel):
    """Outcome of one spreadsheet row."""

    sheet: str = Field(..., description="Sheet the row came from")
    row: int = Field(..., description="1-based row number within the sheet")
    id: str = Field(..., description="Product id of the row")
    succeeded: bool = Field(..., description="Whether the row was indexed")
    status: int | None = Field(default=None, description="Index engine item status")
    error: str | None = Field(default=None, description="Failure reason")


class BulkCreateResponse(BaseModel):
    """Report of a bulk product load."""

    success: bool = Field(..., description="True only if every row was indexed")
    total: int = Field(..., description="Rows processed")
    succeeded: int = Field(..., description="Rows indexed")
    failed: int = Field(..., description="Rows not indexed")
    items: list[BulkItemSchema] = Field(default_factory=list, description="Per-row outcomes")

    @classmethod
    def from_result(cls, result: BulkIngestionResult) -> "BulkCreateResponse":
        """Create from an ingestion result.

        Args:
            result: Bulk ingestion result.

        Returns:
            BulkCreateResponse instance.
        """
        return cls(
            success=result.success,
            total=result.total,
            succeeded=result.succeeded,
            failed=result.failed,
            items=[
                BulkItemSchema(
                    sheet=item.sheet,
                    row=item.row,
                    id=item.document_id,
                    succeeded=item.succeeded,
                    status=item.status,
                    error=item.error,
                )
                for item in result.items
            ],
        )

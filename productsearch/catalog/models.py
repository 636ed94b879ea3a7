"""Product record model.

Defines the Product document stored in the search index and the
partial shape accepted by updates.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Product document in the catalog index.

    Attributes:
        id: Document key in the index. Writing an existing id replaces
            the stored document.
        name: Human-readable label.
        description: Free text description.
        price: Non-negative price, used by range queries.
        category: Exact/term match filter key.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1, description="Product identifier (document key)")
    name: str = Field(default="", description="Product name")
    description: str = Field(default="", description="Product description")
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False, description="Product price")
    category: str = Field(default="", description="Product category")

    def to_document(self) -> dict[str, Any]:
        """Serialize to the document body stored in the index."""
        return self.model_dump()

    @classmethod
    def from_document(cls, document_id: str, source: dict[str, Any]) -> "Product":
        """Build a product from an index document.

        The document key wins over any ``id`` stored in the source.

        Args:
            document_id: Index document id.
            source: Stored document body.

        Returns:
            Product instance.
        """
        return cls.model_validate({**source, "id": document_id})


class ProductUpdate(BaseModel):
    """Partial product used for merge updates.

    Only fields explicitly set by the caller are merged into the
    stored document.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    description: str | None = None
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    category: str | None = None

    def to_partial_document(self) -> dict[str, Any]:
        """Serialize only the fields the caller supplied."""
        return self.model_dump(exclude_unset=True)

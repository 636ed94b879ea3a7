"""Domain layer: error taxonomy shared by the catalog core."""

from productsearch.domain.exceptions import (
    CatalogError,
    DecodeError,
    IndexUnavailableError,
    InvalidQueryError,
)

__all__ = [
    "CatalogError",
    "DecodeError",
    "IndexUnavailableError",
    "InvalidQueryError",
]

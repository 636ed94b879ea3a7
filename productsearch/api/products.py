"""Product API endpoints.

Provides endpoints for the product catalog:
- POST /api/products - create or replace a product
- POST /api/products/create/bulk - load products from a spreadsheet
- GET /api/products - list products
- GET /api/products/{id} - get a product
- PUT /api/products/{id} - merge fields into a product
- DELETE /api/products/{id} - delete a product
- GET /api/products/search/{category} - products in a category
- GET /api/products/searchByPriceRange - products within a price range
"""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Query, Response, UploadFile, status

from productsearch.api.dependencies import get_catalog_service
from productsearch.api.schemas import BulkCreateResponse, ErrorResponse
from productsearch.catalog.models import Product, ProductUpdate
from productsearch.catalog.service import CatalogService
from productsearch.infrastructure.index_gateway import UpdateOutcome

router = APIRouter(prefix="/api/products", tags=["Products"])

Service = Annotated[CatalogService, Depends(get_catalog_service)]


def _not_found(product_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error_code": "NOT_FOUND",
            "message": f"Product {product_id} not found",
            "details": {"product_id": product_id},
        },
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    responses={503: {"model": ErrorResponse}},
    summary="Create product",
    description="Index a product under its id, replacing any product with the same id.",
)
async def create_product(product: Product, service: Service) -> Product:
    """Create or replace a product.

    Args:
        product: Product to store.
        service: Catalog service.

    Returns:
        Stored product.
    """
    return await service.create(product)


@router.post(
    "/create/bulk",
    response_model=BulkCreateResponse,
    responses={
        207: {"model": BulkCreateResponse, "description": "Some rows failed"},
        400: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    summary="Bulk load products",
    description=(
        "Load products from an .xlsx workbook. Columns: id, name, description, "
        "price, category. Rows are indexed independently; rows that succeed are "
        "kept when others fail."
    ),
)
async def create_bulk_products(
    response: Response,
    service: Service,
    file: UploadFile = File(..., description="Spreadsheet (.xlsx) to load"),
) -> BulkCreateResponse:
    """Load products from an uploaded spreadsheet.

    Args:
        response: Outgoing response (status is set to 207 on partial failure).
        service: Catalog service.
        file: Uploaded workbook.

    Returns:
        Per-row load report.
    """
    data = await file.read()
    result = await service.bulk_create(data, source=file.filename)

    if not result.success:
        response.status_code = status.HTTP_207_MULTI_STATUS

    return BulkCreateResponse.from_result(result)


@router.get(
    "",
    response_model=list[Product],
    responses={503: {"model": ErrorResponse}},
    summary="List products",
)
async def list_products(service: Service) -> list[Product]:
    """List products.

    Returns the first page of results at the index engine's default size.
    """
    return await service.list_all()


@router.get(
    "/searchByPriceRange",
    response_model=list[Product],
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Search by price range",
    description="Products whose price is within [minPrice, maxPrice], bounds inclusive.",
)
async def search_by_price_range(
    service: Service,
    min_price: Annotated[float, Query(alias="minPrice")],
    max_price: Annotated[float, Query(alias="maxPrice")],
) -> list[Product]:
    """Search products by inclusive price range."""
    return await service.search_by_price_range(min_price, max_price)


@router.get(
    "/search/{category}",
    response_model=list[Product],
    responses={503: {"model": ErrorResponse}},
    summary="Search by category",
)
async def search_by_category(category: str, service: Service) -> list[Product]:
    """Search products by category."""
    return await service.search_by_category(category)


@router.get(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Get product",
)
async def get_product(product_id: str, service: Service) -> Product:
    """Get a product by ID.

    Raises:
        HTTPException: 404 if the product does not exist.
    """
    lookup = await service.get_by_id(product_id)
    if not lookup.found:
        raise _not_found(product_id)
    return lookup.product


@router.put(
    "/{product_id}",
    response_model=Product,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Update product",
    description="Merge the supplied fields into the stored product.",
)
async def update_product(
    product_id: str,
    changes: ProductUpdate,
    service: Service,
) -> Product:
    """Merge fields into a product.

    Raises:
        HTTPException: 404 if the product does not exist, 500 if the
            index engine reported an unexpected result.
    """
    result = await service.update(product_id, changes)

    if result.outcome == UpdateOutcome.NOOP:
        raise _not_found(product_id)

    if not result.applied or result.product is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error_code": "UPDATE_FAILED",
                "message": f"Product {product_id} could not be updated",
                "details": {"outcome": result.outcome.value},
            },
        )

    return result.product


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(product_id: str, service: Service) -> Response:
    """Delete a product.

    Raises:
        HTTPException: 404 if the product was already absent.
    """
    if not await service.delete(product_id):
        raise _not_found(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

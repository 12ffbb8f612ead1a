"""Catalog endpoints.

GET /api/products         - Paginated, filtered, sorted product listing
GET /api/products/{id}    - Single product
GET /api/categories       - All categories, by name

Routers are thin: compile the query, call services, shape the response.
Query parameters are taken as raw strings so that malformed numbers fall
back to defaults instead of failing validation.
"""

from fastapi import APIRouter, Path, Query

from catalog_api.schemas import Category, Product, ProductPage
from catalog_api.services.catalog import fetch_product_page, get_product, list_categories
from catalog_api.services.normalize import build_product_page
from catalog_api.services.query_plan import compile_product_query
from catalog_api.settings import get_settings

router = APIRouter()


@router.get("/products", response_model=ProductPage)
async def get_products(
    page: str | None = Query(default=None, description="1-based page number (default 1)"),
    limit: str | None = Query(default=None, description="Page size (default 12)"),
    category: str | None = Query(default=None, description="Category slug, exact match", examples=["reds"]),
    sort: str | None = Query(
        default=None,
        description="price-asc, price-desc, name; anything else is newest first",
        examples=["price-asc"],
    ),
    search: str | None = Query(
        default=None,
        description="Case-insensitive text matched on name, description, region, grape variety",
        examples=["cabernet"],
    ),
    featured: str | None = Query(default=None, description='Only "true" restricts to featured products'),
) -> ProductPage:
    """List products matching the filters, one page at a time.

    Returns:
        ProductPage with products and pagination {page, limit, total, totalPages}.
    """
    settings = get_settings()
    plan = compile_product_query(
        page=page,
        limit=limit,
        category=category,
        sort=sort,
        search=search,
        featured=featured,
        default_limit=settings.default_page_size,
    )
    result = await fetch_product_page(plan)
    return build_product_page(result)


@router.get("/products/{product_id}", response_model=Product)
async def get_product_by_id(
    product_id: str = Path(description="Product ID", min_length=1, max_length=100),
) -> Product:
    """Get a single product.

    Raises:
        NotFoundError: 404 if the product does not exist.
    """
    return await get_product(product_id)


@router.get("/categories", response_model=list[Category])
async def get_categories() -> list[Category]:
    """List all categories sorted by name."""
    return await list_categories()

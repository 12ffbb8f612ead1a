"""Catalog reads against PostgreSQL.

Flow for GET /api/products:
1. Translate the QueryPlan predicates into one list of SQL filter clauses
2. Issue the page query and the count query concurrently (same filters)
3. Return a PageResult; any database error fails the whole request

No retries, no caching, no partial results: database errors become
StoreFailure and are mapped to a 500 at the HTTP boundary.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import InstrumentedAttribute, contains_eager

from catalog_api import schemas
from catalog_api.errors import NotFoundError, StoreFailure
from catalog_api.models import Category, DeliveryZone, Product, Store
from catalog_api.services.normalize import (
    PageResult,
    normalize_category,
    normalize_delivery_zone,
    normalize_product,
    normalize_store,
)
from catalog_api.services.query_plan import ContainsAnyPredicate, EqualsPredicate, Predicate, QueryPlan
from catalog_api.stores.postgres import get_session

logger = logging.getLogger("uvicorn.error")

# Plan field name -> mapped column
PRODUCT_COLUMNS: dict[str, InstrumentedAttribute] = {
    "name": Product.name,
    "description": Product.description,
    "region": Product.region,
    "grape_variety": Product.grape_variety,
    "price": Product.price,
    "featured": Product.featured,
    "created_at": Product.created_at,
    "category.slug": Category.slug,
}


@asynccontextmanager
async def _store_errors(action: str) -> AsyncIterator[None]:
    """Re-raise database/driver errors as StoreFailure labelled with `action`."""
    try:
        yield
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        raise StoreFailure(str(e) or e.__class__.__name__, error=action) from e


def _column(field: str) -> InstrumentedAttribute:
    try:
        return PRODUCT_COLUMNS[field]
    except KeyError:
        raise ValueError(f"Unknown product field in query plan: {field}") from None


def predicate_clause(predicate: Predicate) -> ColumnElement[bool]:
    """Translate one plan predicate into a SQL boolean expression."""
    if isinstance(predicate, EqualsPredicate):
        return _column(predicate.field) == predicate.value
    if isinstance(predicate, ContainsAnyPredicate):
        # LIKE wildcards in user text are escaped, matching is case-insensitive
        return or_(
            *(_column(field).icontains(predicate.needle, autoescape=True) for field in predicate.fields)
        )
    raise TypeError(f"Unsupported predicate: {predicate!r}")


def filter_clauses(plan: QueryPlan) -> list[ColumnElement[bool]]:
    return [predicate_clause(p) for p in plan.predicates]


def build_product_page_query(plan: QueryPlan) -> Select[tuple[Product]]:
    """SELECT one page of products with their category joined and loaded."""
    sort_column = _column(plan.sort.field)
    if plan.sort.direction == "asc":
        order = (sort_column.asc(), Product.id.asc())
    else:
        order = (sort_column.desc(), Product.id.desc())

    return (
        select(Product)
        .join(Product.category)
        .options(contains_eager(Product.category))
        .where(*filter_clauses(plan))
        .order_by(*order)
        .offset(plan.window.offset)
        .limit(plan.window.limit)
    )


def build_product_count_query(plan: QueryPlan) -> Select[tuple[int]]:
    """SELECT count(*) over the same filters, ignoring sort and paging."""
    return (
        select(func.count(Product.id))
        .select_from(Product)
        .join(Product.category)
        .where(*filter_clauses(plan))
    )


async def _fetch_products(plan: QueryPlan) -> Sequence[Product]:
    async with get_session() as session:
        result = await session.execute(build_product_page_query(plan))
        return result.scalars().all()


async def _count_products(plan: QueryPlan) -> int:
    async with get_session() as session:
        result = await session.execute(build_product_count_query(plan))
        return result.scalar_one()


async def _run_page_queries(plan: QueryPlan) -> tuple[Sequence[Product], int]:
    """Run page and count queries concurrently; the first failure cancels the other."""
    try:
        async with asyncio.TaskGroup() as tg:
            items_task = tg.create_task(_fetch_products(plan))
            count_task = tg.create_task(_count_products(plan))
    except ExceptionGroup as eg:
        raise eg.exceptions[0]
    return items_task.result(), count_task.result()


async def fetch_product_page(plan: QueryPlan) -> PageResult:
    """Run the page and count queries for a plan concurrently.

    Each query gets its own session (an AsyncSession is not safe for
    concurrent use).

    Raises:
        StoreFailure: If either query fails.
    """
    async with _store_errors("Error fetching products"):
        items, total = await _run_page_queries(plan)

    logger.debug(
        f"Product page {plan.window.page}x{plan.window.limit}: {len(items)} of {total} "
        f"({len(plan.predicates)} filters, sort {plan.sort.field} {plan.sort.direction})"
    )

    return PageResult(
        items=items,
        total=total,
        page=plan.window.page,
        limit=plan.window.limit,
    )


async def get_product(product_id: str) -> schemas.Product:
    """Get one product by ID.

    Raises:
        NotFoundError: If no product has this ID.
        StoreFailure: If the query fails.
    """
    async with _store_errors("Error fetching product"):
        async with get_session() as session:
            result = await session.execute(
                select(Product)
                .join(Product.category)
                .options(contains_eager(Product.category))
                .where(Product.id == product_id)
            )
            product = result.scalar_one_or_none()

    if product is None:
        raise NotFoundError(f"Product {product_id} not found", error="Product not found")

    return normalize_product(product)


async def list_categories() -> list[schemas.Category]:
    """All categories ordered by name."""
    async with _store_errors("Error fetching categories"):
        async with get_session() as session:
            result = await session.execute(select(Category).order_by(Category.name.asc()))
            rows = result.scalars().all()

    return [normalize_category(row) for row in rows]


async def list_stores() -> list[schemas.Store]:
    """All stores with decoded opening hours."""
    async with _store_errors("Error fetching stores"):
        async with get_session() as session:
            result = await session.execute(select(Store).order_by(Store.name.asc()))
            rows = result.scalars().all()

    return [normalize_store(row) for row in rows]


async def list_delivery_zones() -> list[schemas.DeliveryZone]:
    """All delivery zones with decoded postal codes."""
    async with _store_errors("Error fetching delivery zones"):
        async with get_session() as session:
            result = await session.execute(select(DeliveryZone).order_by(DeliveryZone.name.asc()))
            rows = result.scalars().all()

    return [normalize_delivery_zone(row) for row in rows]

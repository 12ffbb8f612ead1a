"""Tests for SQL construction and the fetch orchestration (no live database)."""

import asyncio
import re

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from conftest import FakeDatabase, make_product
from catalog_api.errors import NotFoundError, StoreFailure
from catalog_api.services import catalog
from catalog_api.services.query_plan import compile_product_query


def _sql(statement) -> str:
    compiled = statement.compile(dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True})
    return " ".join(str(compiled).split())


def _where(sql: str) -> str:
    return sql.split(" WHERE ", 1)[1].split(" ORDER BY ", 1)[0]


def test_page_query_without_filters_orders_newest_first():
    sql = _sql(catalog.build_product_page_query(compile_product_query()))
    assert " WHERE " not in sql
    assert "JOIN categories ON categories.id = products.category_id" in sql
    assert "ORDER BY products.created_at DESC, products.id DESC" in sql
    assert "LIMIT 12 OFFSET 0" in sql


def test_page_query_applies_window():
    sql = _sql(catalog.build_product_page_query(compile_product_query(page="3", limit="5")))
    assert "LIMIT 5 OFFSET 10" in sql


@pytest.mark.parametrize(
    "sort, order_by",
    [
        ("price-asc", "ORDER BY products.price ASC, products.id ASC"),
        ("price-desc", "ORDER BY products.price DESC, products.id DESC"),
        ("name", "ORDER BY products.name ASC, products.id ASC"),
    ],
)
def test_page_query_sort(sort, order_by):
    sql = _sql(catalog.build_product_page_query(compile_product_query(sort=sort)))
    assert order_by in sql


def test_category_filter_is_exact_slug_equality():
    sql = _sql(catalog.build_product_page_query(compile_product_query(category="reds")))
    assert "categories.slug = 'reds'" in _where(sql)
    assert "LIKE" not in sql.upper()


def test_featured_filter():
    sql = _sql(catalog.build_product_page_query(compile_product_query(featured="true")))
    assert "products.featured = true" in _where(sql)


def test_search_is_case_insensitive_or_over_four_columns():
    sql = _sql(catalog.build_product_page_query(compile_product_query(search="cabernet")))
    where = _where(sql)
    assert where.count(" OR ") == 3
    for column in ("products.name", "products.description", "products.region", "products.grape_variety"):
        assert f"lower({column})" in where or f"{column} ILIKE" in where
    assert "cabernet" in where


def test_search_escapes_like_wildcards():
    sql = _sql(catalog.build_product_page_query(compile_product_query(search="100%_pur")))
    # percent signs may be doubled by the driver paramstyle
    assert re.search(r"100/%{1,2}/_pur", sql)


def test_count_query_uses_identical_filters_without_sort_or_window():
    plan = compile_product_query(
        page="2", limit="5", category="reds", featured="true", search="syrah", sort="price-desc"
    )
    page_sql = _sql(catalog.build_product_page_query(plan))
    count_sql = _sql(catalog.build_product_count_query(plan))

    assert count_sql.startswith("SELECT count(products.id)")
    assert "ORDER BY" not in count_sql
    assert "LIMIT" not in count_sql and "OFFSET" not in count_sql
    assert count_sql.split(" WHERE ", 1)[1] == _where(page_sql)


@pytest.mark.asyncio
async def test_fetch_product_page_returns_rows_and_total(fake_db: FakeDatabase):
    rows = [make_product(1), make_product(2)]
    fake_db.queue(rows)
    fake_db.count = 14

    result = await catalog.fetch_product_page(compile_product_query(page="2", limit="12"))

    assert list(result.items) == rows
    assert result.total == 14
    assert (result.page, result.limit, result.total_pages) == (2, 12, 2)
    # page and count each run on their own session
    assert fake_db.sessions_opened == 2


@pytest.mark.asyncio
async def test_page_and_count_queries_run_concurrently(monkeypatch: pytest.MonkeyPatch):
    count_started = asyncio.Event()
    fetch_started = asyncio.Event()

    async def fake_fetch(plan):
        fetch_started.set()
        await count_started.wait()
        return []

    async def fake_count(plan):
        count_started.set()
        await fetch_started.wait()
        return 0

    monkeypatch.setattr(catalog, "_fetch_products", fake_fetch)
    monkeypatch.setattr(catalog, "_count_products", fake_count)

    result = await asyncio.wait_for(catalog.fetch_product_page(compile_product_query()), timeout=2)
    assert result.total == 0


@pytest.mark.asyncio
async def test_count_failure_fails_whole_page(monkeypatch: pytest.MonkeyPatch):
    async def fake_fetch(plan):
        return [make_product(1)]

    async def fake_count(plan):
        raise OperationalError("SELECT count(*)", {}, Exception("connection reset"))

    monkeypatch.setattr(catalog, "_fetch_products", fake_fetch)
    monkeypatch.setattr(catalog, "_count_products", fake_count)

    with pytest.raises(StoreFailure) as exc_info:
        await catalog.fetch_product_page(compile_product_query())
    assert exc_info.value.error == "Error fetching products"
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_failed_query_cancels_the_other(monkeypatch: pytest.MonkeyPatch):
    count_cancelled = asyncio.Event()

    async def fake_fetch(plan):
        await asyncio.sleep(0)
        raise OperationalError("SELECT products", {}, Exception("connection reset"))

    async def fake_count(plan):
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            count_cancelled.set()
            raise

    monkeypatch.setattr(catalog, "_fetch_products", fake_fetch)
    monkeypatch.setattr(catalog, "_count_products", fake_count)

    with pytest.raises(StoreFailure) as exc_info:
        await asyncio.wait_for(catalog.fetch_product_page(compile_product_query()), timeout=2)
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert count_cancelled.is_set()


@pytest.mark.asyncio
async def test_both_queries_failing_is_one_store_failure(monkeypatch: pytest.MonkeyPatch):
    async def fake_fetch(plan):
        raise OperationalError("SELECT products", {}, Exception("fetch down"))

    async def fake_count(plan):
        raise OperationalError("SELECT count(*)", {}, Exception("count down"))

    monkeypatch.setattr(catalog, "_fetch_products", fake_fetch)
    monkeypatch.setattr(catalog, "_count_products", fake_count)

    with pytest.raises(StoreFailure) as exc_info:
        await catalog.fetch_product_page(compile_product_query())
    assert exc_info.value.error == "Error fetching products"
    assert "fetch down" in exc_info.value.message


@pytest.mark.asyncio
async def test_connection_error_is_a_store_failure(fake_db: FakeDatabase):
    fake_db.error = ConnectionRefusedError("connection refused")
    with pytest.raises(StoreFailure):
        await catalog.list_categories()


@pytest.mark.asyncio
async def test_get_product_missing_is_not_found(fake_db: FakeDatabase):
    fake_db.queue([])
    with pytest.raises(NotFoundError) as exc_info:
        await catalog.get_product("nope")
    assert exc_info.value.status_code == 404
    assert not isinstance(exc_info.value, StoreFailure)


@pytest.mark.asyncio
async def test_get_product_found(fake_db: FakeDatabase):
    fake_db.queue([make_product(7, images=["https://img.example/7.jpg"])])
    product = await catalog.get_product("prod-007")
    assert product.id == "prod-007"
    assert product.images == ["https://img.example/7.jpg"]
    assert "products.id = 'prod-007'" in _sql(fake_db.statements[0])


@pytest.mark.asyncio
async def test_list_categories_orders_by_name(fake_db: FakeDatabase):
    fake_db.queue([])
    await catalog.list_categories()
    assert _sql(fake_db.statements[0]).endswith("ORDER BY categories.name ASC")

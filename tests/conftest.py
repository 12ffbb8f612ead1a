"""Shared fixtures: HTTP client, row factories, fake database sessions."""

from collections.abc import Iterable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
import json
from types import SimpleNamespace
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from catalog_api.main import app
from catalog_api.services import catalog
from catalog_api.services.normalize import PageResult
from catalog_api.services.query_plan import QueryPlan

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)

CATEGORIES = {
    "reds": SimpleNamespace(
        id="cat-reds",
        name="Vins rouges",
        slug="reds",
        description=None,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    ),
    "reds-natural": SimpleNamespace(
        id="cat-reds-natural",
        name="Rouges nature",
        slug="reds-natural",
        description=None,
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    ),
    "whites": SimpleNamespace(
        id="cat-whites",
        name="Vins blancs",
        slug="whites",
        description="Secs et moelleux",
        created_at=BASE_TIME,
        updated_at=BASE_TIME,
    ),
}


def make_product(
    n: int,
    *,
    name: str | None = None,
    description: str = "",
    price: float | None = None,
    region: str = "Bordeaux",
    grape_variety: str = "Merlot",
    featured: bool = False,
    images: Any = None,
    category: str = "reds",
) -> SimpleNamespace:
    """Build an object shaped like a products row with its category loaded."""
    cat = CATEGORIES[category]
    created = BASE_TIME + timedelta(days=n)
    return SimpleNamespace(
        id=f"prod-{n:03d}",
        name=name or f"Wine {n:03d}",
        description=description,
        price=float(price if price is not None else 10 + n),
        region=region,
        grape_variety=grape_variety,
        featured=featured,
        images=images if isinstance(images, str) else json.dumps(images or []),
        category_id=cat.id,
        category=cat,
        created_at=created,
        updated_at=created,
    )


def as_record(row: SimpleNamespace) -> dict[str, Any]:
    record = dict(vars(row))
    record["category"] = dict(vars(row.category))
    return record


class MemoryCatalog:
    """Evaluates query plans over in-memory rows, like the page + count queries."""

    def __init__(self, rows: Iterable[SimpleNamespace]) -> None:
        self.rows = list(rows)
        self.plans: list[QueryPlan] = []

    async def fetch_product_page(self, plan: QueryPlan) -> PageResult:
        self.plans.append(plan)
        matching = [row for row in self.rows if plan.matches(as_record(row))]
        matching.sort(
            key=lambda row: (getattr(row, plan.sort.field), row.id),
            reverse=plan.sort.direction == "desc",
        )
        window = plan.window
        return PageResult(
            items=matching[window.offset : window.offset + window.limit],
            total=len(matching),
            page=window.page,
            limit=window.limit,
        )


class FakeResult:
    def __init__(self, rows: list[Any]) -> None:
        self._rows = rows

    def scalars(self) -> "FakeResult":
        return self

    def all(self) -> list[Any]:
        return list(self._rows)

    def scalar_one(self) -> Any:
        return self._rows[0]

    def scalar_one_or_none(self) -> Any:
        return self._rows[0] if self._rows else None


class FakeDatabase:
    """Stands in for `get_session`.

    Row queries pop the next queued row list; count queries return `count`.
    """

    def __init__(self) -> None:
        self.results: list[list[Any]] = []
        self.count = 0
        self.statements: list[Any] = []
        self.sessions_opened = 0
        self.error: Exception | None = None

    def queue(self, *results: list[Any]) -> None:
        self.results.extend(results)

    @asynccontextmanager
    async def session(self):
        self.sessions_opened += 1
        yield self

    async def execute(self, statement: Any) -> FakeResult:
        self.statements.append(statement)
        if self.error is not None:
            raise self.error
        projection = str(statement).split("FROM", 1)[0].lower()
        if "count(" in projection:
            return FakeResult([self.count])
        return FakeResult(self.results.pop(0))


@pytest.fixture
async def client():
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    db = FakeDatabase()
    monkeypatch.setattr(catalog, "get_session", db.session)
    return db

"""Query compiler for the product listing.

Turns the raw query-string values of GET /api/products into a QueryPlan:
- a conjunction of predicates (category slug, featured flag, text search)
- one sort key with direction
- a page window (page, limit, offset)

Rules:
1. page/limit parse as integers; missing, non-numeric or zero values fall back
   to the defaults (1 and 12), negative values are clamped to 1; values are
   kept inside the database's BIGINT range so LIMIT/OFFSET always bind
2. featured filter applies only when the raw value is exactly the string "true"
3. search matches case-insensitively on name, description, region, grape variety
4. unknown sort tokens mean "newest first"

The compiler is pure: no I/O, no exceptions for bad input, identical input
always yields an identical plan.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import math
from typing import Any, Literal, Union

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 12

# Largest value LIMIT and OFFSET accept (Postgres BIGINT)
MAX_SQL_INT = 2**63 - 1

SortDirection = Literal["asc", "desc"]

# Fields matched by the free-text search, in response order
SEARCH_FIELDS: tuple[str, ...] = ("name", "description", "region", "grape_variety")


@dataclass(frozen=True)
class SortSpec:
    field: str
    direction: SortDirection


NEWEST_FIRST = SortSpec("created_at", "desc")

SORT_OPTIONS: dict[str, SortSpec] = {
    "price-asc": SortSpec("price", "asc"),
    "price-desc": SortSpec("price", "desc"),
    "name": SortSpec("name", "asc"),
    "newest": NEWEST_FIRST,
}


def _resolve(record: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path ("category.slug") through nested mappings."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


@dataclass(frozen=True)
class EqualsPredicate:
    """`field == value`. Dotted fields go through a relation (category.slug)."""

    field: str
    value: Any

    def matches(self, record: Mapping[str, Any]) -> bool:
        return _resolve(record, self.field) == self.value


@dataclass(frozen=True)
class ContainsAnyPredicate:
    """Case-insensitive substring match on at least one of `fields`."""

    fields: tuple[str, ...]
    needle: str

    def matches(self, record: Mapping[str, Any]) -> bool:
        needle = self.needle.casefold()
        for field in self.fields:
            value = _resolve(record, field)
            if isinstance(value, str) and needle in value.casefold():
                return True
        return False


Predicate = Union[EqualsPredicate, ContainsAnyPredicate]


@dataclass(frozen=True)
class PageWindow:
    page: int
    limit: int

    def __post_init__(self) -> None:
        if self.page < 1 or self.limit < 1:
            raise ValueError(f"Invalid page window: page={self.page} limit={self.limit}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class QueryPlan:
    """Store-agnostic filter + sort + pagination for one product listing."""

    predicates: tuple[Predicate, ...]
    sort: SortSpec
    window: PageWindow

    def matches(self, record: Mapping[str, Any]) -> bool:
        """True when the record satisfies every predicate."""
        return all(p.matches(record) for p in self.predicates)


def parse_positive_int(raw: Any, default: int) -> int:
    """Parse a query-string number, never failing.

    Missing, non-numeric, non-finite and zero values give `default`;
    negative values are clamped to 1, huge values to MAX_SQL_INT.
    """
    if raw is None or isinstance(raw, bool):
        return default

    if isinstance(raw, int):
        value = raw
    else:
        text = str(raw).strip()
        try:
            value = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return default
            if not math.isfinite(number):
                return default
            value = int(number)

    if value == 0:
        return default
    return min(max(value, 1), MAX_SQL_INT)


def compile_sort(raw: Any) -> SortSpec:
    """Map a sort token to a SortSpec; anything unknown means newest first."""
    if isinstance(raw, str):
        return SORT_OPTIONS.get(raw, NEWEST_FIRST)
    return NEWEST_FIRST


def compile_product_query(
    page: Any = None,
    limit: Any = None,
    category: Any = None,
    sort: Any = None,
    search: Any = None,
    featured: Any = None,
    *,
    default_limit: int = DEFAULT_LIMIT,
) -> QueryPlan:
    """Compile raw listing parameters into a QueryPlan.

    Args:
        page: Raw `page` value (1-based).
        limit: Raw `limit` value (page size).
        category: Category slug; exact match.
        sort: One of "price-asc", "price-desc", "name"; anything else is newest first.
        search: Free text matched against name, description, region, grape variety.
        featured: Only the literal string "true" enables the featured filter.
        default_limit: Page size when `limit` is unusable.

    Returns:
        QueryPlan with predicates in a fixed order: category, featured, search.
    """
    page_number = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, default_limit)
    # offset = (page - 1) * limit must stay a valid BIGINT
    page_number = min(page_number, MAX_SQL_INT // page_size + 1)

    predicates: list[Predicate] = []

    if isinstance(category, str) and category:
        predicates.append(EqualsPredicate("category.slug", category))

    # Literal comparison: "1", "yes", "TRUE" or a real bool do not count.
    if isinstance(featured, str) and featured == "true":
        predicates.append(EqualsPredicate("featured", True))

    if isinstance(search, str) and search:
        predicates.append(ContainsAnyPredicate(SEARCH_FIELDS, search))

    return QueryPlan(
        predicates=tuple(predicates),
        sort=compile_sort(sort),
        window=PageWindow(page=page_number, limit=page_size),
    )

"""Result normalizer: ORM rows -> response schemas.

Decodes the JSON text columns through `catalog_api.services.serialized`
and assembles pagination metadata. Pure functions, no I/O.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import math

from catalog_api import models, schemas
from catalog_api.services.serialized import decode_images, decode_opening_hours, decode_postal_codes


@dataclass(frozen=True)
class PageResult:
    """One window of matching products plus the unpaginated total."""

    items: Sequence[models.Product]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)


def total_pages(total: int, limit: int) -> int:
    """ceil(total / limit); 0 when nothing matched."""
    if total <= 0:
        return 0
    return math.ceil(total / limit)


def build_pagination(page: int, limit: int, total: int) -> schemas.Pagination:
    return schemas.Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages(total, limit),
    )


def normalize_category(row: models.Category) -> schemas.Category:
    return schemas.Category(
        id=row.id,
        name=row.name,
        slug=row.slug,
        description=row.description,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def normalize_product(row: models.Product) -> schemas.Product:
    """Map a product row (category already loaded) to the public shape."""
    return schemas.Product(
        id=row.id,
        name=row.name,
        description=row.description,
        price=row.price,
        region=row.region,
        grape_variety=row.grape_variety,
        featured=row.featured,
        images=decode_images(row.images, record_id=row.id),
        category_id=row.category_id,
        category=normalize_category(row.category) if row.category is not None else None,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def normalize_store(row: models.Store) -> schemas.Store:
    return schemas.Store(
        id=row.id,
        name=row.name,
        address=row.address,
        city=row.city,
        postal_code=row.postal_code,
        phone=row.phone,
        opening_hours=decode_opening_hours(row.opening_hours, record_id=row.id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def normalize_delivery_zone(row: models.DeliveryZone) -> schemas.DeliveryZone:
    return schemas.DeliveryZone(
        id=row.id,
        name=row.name,
        postal_codes=decode_postal_codes(row.postal_codes, record_id=row.id),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def build_product_page(result: PageResult) -> schemas.ProductPage:
    """Assemble the GET /api/products payload from a fetched page."""
    return schemas.ProductPage(
        products=[normalize_product(row) for row in result.items],
        pagination=build_pagination(result.page, result.limit, result.total),
    )

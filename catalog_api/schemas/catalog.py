"""Schemas for the catalog endpoints (/api/...).

Field names follow the storefront's camelCase contract via aliases.
"""

from datetime import datetime

from pydantic import BaseModel, Field
from typing_extensions import TypedDict


class OpeningInterval(TypedDict):
    """Open/close times for one day, e.g. {"open": "10:00", "close": "19:30"}."""

    open: str
    close: str


# Day name -> interval, free text ("closed", "sur rendez-vous") or null
OpeningHours = dict[str, OpeningInterval | str | None]


class Category(BaseModel):
    """A product category."""

    id: str
    name: str
    slug: str
    description: str | None = None
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}


class Product(BaseModel):
    """A catalog product with its category resolved and images decoded."""

    id: str
    name: str
    description: str
    price: float = Field(ge=0)
    region: str
    grape_variety: str = Field(alias="grapeVariety")
    featured: bool
    images: list[str] = Field(default_factory=list)
    category_id: str = Field(alias="categoryId")
    category: Category | None = None
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}


class Pagination(BaseModel):
    """Paging metadata; total_pages is ceil(total / limit), 0 when empty."""

    page: int = Field(ge=1)
    limit: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(alias="totalPages", ge=0)

    model_config = {"populate_by_name": True}


class ProductPage(BaseModel):
    """Response payload for GET /api/products."""

    products: list[Product]
    pagination: Pagination


class Store(BaseModel):
    """A physical shop with decoded opening hours."""

    id: str
    name: str
    address: str
    city: str
    postal_code: str = Field(alias="postalCode")
    phone: str | None = None
    opening_hours: OpeningHours = Field(alias="openingHours", default_factory=dict)
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}


class DeliveryZone(BaseModel):
    """A delivery area with decoded postal codes."""

    id: str
    name: str
    postal_codes: list[str] = Field(alias="postalCodes", default_factory=list)
    created_at: datetime | None = Field(alias="createdAt", default=None)
    updated_at: datetime | None = Field(alias="updatedAt", default=None)

    model_config = {"populate_by_name": True}

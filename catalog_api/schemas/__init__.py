"""Pydantic schemas for API request/response validation."""

from catalog_api.schemas.common import ErrorResponse, HealthResponse
from catalog_api.schemas.catalog import (
    Category,
    DeliveryZone,
    OpeningHours,
    OpeningInterval,
    Pagination,
    Product,
    ProductPage,
    Store,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "Category",
    "DeliveryZone",
    "OpeningHours",
    "OpeningInterval",
    "Pagination",
    "Product",
    "ProductPage",
    "Store",
]

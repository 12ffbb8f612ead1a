"""API routes."""

from fastapi import APIRouter

from catalog_api.routes import locations, products

api_router = APIRouter()

# Catalog endpoints (products, categories)
api_router.include_router(products.router, prefix="/api", tags=["catalog"])

# Physical presence endpoints (stores, delivery zones)
api_router.include_router(locations.router, prefix="/api", tags=["locations"])

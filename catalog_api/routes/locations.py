"""Store locator and delivery endpoints.

GET /api/stores          - Shops with decoded opening hours
GET /api/delivery-zones  - Delivery areas with decoded postal codes
"""

from fastapi import APIRouter

from catalog_api.schemas import DeliveryZone, Store
from catalog_api.services.catalog import list_delivery_zones, list_stores

router = APIRouter()


@router.get("/stores", response_model=list[Store])
async def get_stores() -> list[Store]:
    return await list_stores()


@router.get("/delivery-zones", response_model=list[DeliveryZone])
async def get_delivery_zones() -> list[DeliveryZone]:
    return await list_delivery_zones()

"""SQLAlchemy ORM models.

Models represent database tables:
- categories: Product groupings, filtered by slug
- products: Catalog items (images stored as JSON text)
- stores: Physical shops (opening hours stored as JSON text)
- delivery_zones: Delivery areas (postal codes stored as JSON text)
"""

from catalog_api.models.category import Category
from catalog_api.models.product import Product
from catalog_api.models.store import Store
from catalog_api.models.delivery_zone import DeliveryZone

__all__ = ["Category", "Product", "Store", "DeliveryZone"]

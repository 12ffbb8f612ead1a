"""Product model.

A bottle in the catalog. `images` is stored as a JSON-encoded text column
(ordered list of URLs) and decoded by the normalizer on read.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_api.models.category import Category
from catalog_api.models.ids import generate_id
from catalog_api.stores.postgres import Base


class Product(Base):
    """Catalog product."""

    __tablename__ = "products"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_products_price_non_negative"),)

    id: Mapped[str] = mapped_column(String(100), primary_key=True, default=generate_id)

    # Searchable text (name, description, region, grape_variety)
    name: Mapped[str] = mapped_column(String(200), index=True)
    description: Mapped[str] = mapped_column(Text, default="")
    region: Mapped[str] = mapped_column(String(200), default="")
    grape_variety: Mapped[str] = mapped_column(String(200), default="")

    # Pricing
    price: Mapped[float] = mapped_column(index=True)

    # Merchandising
    featured: Mapped[bool] = mapped_column(default=False, index=True)

    # Images (JSON array of URLs)
    images: Mapped[str] = mapped_column(Text, default="[]")

    # Relations
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), index=True)
    category: Mapped[Category] = relationship(back_populates="products")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Product {self.id} {self.name!r} {self.price:.2f}>"

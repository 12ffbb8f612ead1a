"""Category model.

Categories group products (e.g. "Vins rouges" with slug "reds").
The slug is the public filter key used by GET /api/products?category=.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_api.models.ids import generate_id
from catalog_api.stores.postgres import Base

if TYPE_CHECKING:
    from catalog_api.models.product import Product


class Category(Base):
    """Product category."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(100), primary_key=True, default=generate_id)

    name: Mapped[str] = mapped_column(String(200))
    slug: Mapped[str] = mapped_column(String(200), unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text)

    # Back-reference only; products own the foreign key
    products: Mapped[list[Product]] = relationship(back_populates="category")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Category {self.slug}>"

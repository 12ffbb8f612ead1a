"""Store model.

A physical shop. `opening_hours` is a JSON object keyed by day
(e.g. {"monday": {"open": "10:00", "close": "19:30"}, "sunday": null}).
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.models.ids import generate_id
from catalog_api.stores.postgres import Base


class Store(Base):
    """Physical retail location."""

    __tablename__ = "stores"

    id: Mapped[str] = mapped_column(String(100), primary_key=True, default=generate_id)

    name: Mapped[str] = mapped_column(String(200))

    # Address
    address: Mapped[str] = mapped_column(String(300))
    city: Mapped[str] = mapped_column(String(100))
    postal_code: Mapped[str] = mapped_column(String(20))
    phone: Mapped[str | None] = mapped_column(String(50))

    # Opening hours (JSON object)
    opening_hours: Mapped[str] = mapped_column(Text, default="{}")

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
        return f"<Store {self.name} ({self.city})>"

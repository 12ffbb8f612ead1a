"""Delivery zone model.

`postal_codes` is a JSON array of postal code strings served by the zone.
"""

from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from catalog_api.models.ids import generate_id
from catalog_api.stores.postgres import Base


class DeliveryZone(Base):
    """Home delivery area."""

    __tablename__ = "delivery_zones"

    id: Mapped[str] = mapped_column(String(100), primary_key=True, default=generate_id)

    # Geographic descriptor (e.g. "Paris intra-muros")
    name: Mapped[str] = mapped_column(String(200))

    # Postal codes (JSON array)
    postal_codes: Mapped[str] = mapped_column(Text, default="[]")

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
        return f"<DeliveryZone {self.name}>"

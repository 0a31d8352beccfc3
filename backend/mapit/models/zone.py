"""
MapIt Backend: Zone SQLAlchemy Model
======================================

What:  ORM model for the `zones` table: a named, colored polygon on a map.
Who:   ZoneService (CRUD + bulk save); counted by the map listing queries.

`coordinates` holds the boundary as an ordered JSON array of [x, y] pairs.
Deleting a map deletes its zones (ON DELETE CASCADE).
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from mapit.database import Base
from mapit.models.map import JSONDocument


class Zone(Base):
    """One polygonal region belonging to exactly one map."""

    __tablename__ = "zones"

    zone_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    map_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("map.map_id", ondelete="CASCADE"),
        nullable=False,
    )

    # Denormalised owner, filled in by clients that know it
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("customer.customer_id", ondelete="CASCADE"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), nullable=False)

    coordinates: Mapped[Any] = mapped_column(JSONDocument, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (
        Index("idx_zones_map_id", "map_id"),
        Index("idx_zones_customer_id", "customer_id"),
    )

    def __repr__(self) -> str:
        return f"<Zone(zone_id={self.zone_id}, map_id={self.map_id}, name='{self.name}')>"

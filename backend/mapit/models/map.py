"""
MapIt Backend: Map SQLAlchemy Model
=====================================

What:  ORM model for the `map` table: a customer-owned collection of zones.
Who:   Queried by MapService (list, per-customer list, insert) and joined by
       ZoneService through the `zones.map_id` foreign key.

Table Design:
    - Every map has exactly one owning customer (`customer_id` NOT NULL, FK).
      The foreign key is the only existence check for the owner.
    - `description` / `country` are never NULL; the empty string means unset.
    - `active` defaults to true.
    - `map_data` / `map_bounds` are opaque JSON documents owned by the UI.
    - `zone_count` is NOT a column: it is computed per query with COUNT().

    Index on created_at DESC serves both listing endpoints, which always sort
    newest first; index on customer_id serves the per-customer listing.
"""

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
    true,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from mapit.database import Base

# JSONB on PostgreSQL, generic JSON elsewhere (SQLite in tests); None stays SQL NULL
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


class Map(Base):
    """
    A map owned by one customer.

    Query Patterns:
        - All maps with owner name and zone count, newest first
        - One customer's maps with zone count, newest first
    """

    __tablename__ = "map"

    map_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
    )

    country: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="",
        server_default=text("''"),
    )

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customer.customer_id", ondelete="CASCADE"),
        nullable=False,
    )

    active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Optional UI payloads ──────────────────────────────────────────────
    map_data: Mapped[Optional[Any]] = mapped_column(JSONDocument, nullable=True)
    map_bounds: Mapped[Optional[Any]] = mapped_column(JSONDocument, nullable=True)
    map_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_map_customer_id", "customer_id"),
        Index("idx_map_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<Map(map_id={self.map_id}, title='{self.title}', "
            f"customer_id={self.customer_id})>"
        )

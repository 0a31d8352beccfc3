"""
MapIt Backend: Package SQLAlchemy Model
=========================================

What:  ORM model for the `packages` table: the subscription tiers a customer
       can order (free, starter, premium).
Who:   Joined by the order listings for the package name and price;
       referenced by `orders.package_id`.

Table Design:
    - `name` is unique; the seed rows are inserted by migration 002.
    - `price` is a fixed-point amount (NUMERIC(10,2)), read back as float.
    - `priority` orders tiers for display; `active` hides retired tiers.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Index, Integer, Numeric, String, func, true
from sqlalchemy.orm import Mapped, mapped_column

from mapit.database import Base


class Package(Base):
    """A purchasable tier and the number of maps it allows."""

    __tablename__ = "packages"

    package_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    allowed_maps: Mapped[int] = mapped_column(Integer, nullable=False)

    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

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
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    __table_args__ = (Index("idx_packages_active", "active"),)

    def __repr__(self) -> str:
        return f"<Package(package_id={self.package_id}, name='{self.name}')>"

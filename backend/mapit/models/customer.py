"""
MapIt Backend: Customer SQLAlchemy Model
==========================================

What:  ORM model for the `customer` table.
Who:   Joined by the map listing query to derive the owner's full name;
       referenced by `map.customer_id` and `zones.customer_id`.

Lifecycle:
    Created once at registration (outside this service) and immutable within
    this service's scope. `registration_date` is assigned by the server.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from mapit.database import Base


class Customer(Base):
    """A registered MapIt customer; owns zero or more maps."""

    __tablename__ = "customer"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Hash only; the hashing scheme belongs to the registration flow
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    registration_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Customer(customer_id={self.customer_id}, email='{self.email}')>"

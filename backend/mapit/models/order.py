"""
MapIt Backend: Order SQLAlchemy Model
=======================================

What:  ORM model for the `orders` table: one customer buying one package.
Who:   Queried by OrderService (list, insert) and AdminService (listing,
       revenue total).

Table Design:
    - `customer_id` and `package_id` are NOT NULL foreign keys. As with maps,
      the foreign keys are the only existence check: a violation on insert
      becomes a 404 for whichever parent is missing.
    - Deleting a customer deletes their orders; a package that has orders
      cannot be deleted (RESTRICT).
    - `status` is free text; revenue counts only 'completed' orders.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, Numeric, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from mapit.database import Base

# Status assigned when the body does not send one
DEFAULT_STATUS = "pending"

# The only status counted as revenue
COMPLETED_STATUS = "completed"


class Order(Base):
    """
    A package purchase.

    Query Patterns:
        - All orders (or one customer's) with customer and package details,
          newest first by date_time
        - Sum of `total` over completed orders
    """

    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customer.customer_id", ondelete="CASCADE", name="fk_orders_customer"),
        nullable=False,
    )

    package_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("packages.package_id", ondelete="RESTRICT", name="fk_orders_package"),
        nullable=False,
    )

    date_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    total: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)

    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=DEFAULT_STATUS,
        server_default=text(f"'{DEFAULT_STATUS}'"),
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

    __table_args__ = (
        Index("idx_orders_customer_id", "customer_id"),
        Index("idx_orders_package_id", "package_id"),
        Index("idx_orders_date_time", "date_time"),
    )

    def __repr__(self) -> str:
        return (
            f"<Order(id={self.id}, customer_id={self.customer_id}, "
            f"package_id={self.package_id}, status='{self.status}')>"
        )

"""
MapIt Backend: Order Service
==============================

What:  Query handlers behind GET /orders, POST /orders and GET /admin/orders.

Listing query:
    SELECT o.id, o.customer_id, o.package_id, o.date_time, o.total,
           o.status, o.created_at,
           c.first_name || ' ' || c.last_name AS customer_name,
           c.email AS customer_email,
           p.name AS package_name, p.price AS package_price
    FROM orders o
    LEFT OUTER JOIN customer c ON c.customer_id = o.customer_id
    LEFT OUTER JOIN packages p ON p.package_id = o.package_id
    [WHERE o.customer_id = :customer_id]
    ORDER BY o.date_time DESC
"""

import logging
from typing import List, Optional

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.exceptions import ValidationError
from mapit.models import Customer, Order, Package
from mapit.models.order import DEFAULT_STATUS
from mapit.schemas.order import OrderCreate, OrderResponse, OrderSummary
from mapit.services.base import QueryService

logger = logging.getLogger(__name__)


class OrderService(QueryService):
    """
    Business logic layer for orders.

    Responsibilities:
        - list_orders():  all orders, or one customer's, newest first
        - create_order(): validated insert with default total and status
    """

    async def list_orders(
        self, db: AsyncSession, customer_id: Optional[int] = None
    ) -> List[OrderSummary]:
        """
        List orders with customer and package details, newest first.

        Args:
            customer_id: Only this customer's orders; all orders when None.

        Raises:
            DatabaseError: query execution failed (→ 500)
        """
        stmt = (
            select(
                Order.id,
                Order.customer_id,
                Order.package_id,
                Order.date_time,
                Order.total,
                Order.status,
                Order.created_at,
                (Customer.first_name + " " + Customer.last_name).label("customer_name"),
                Customer.email.label("customer_email"),
                Package.name.label("package_name"),
                Package.price.label("package_price"),
            )
            .select_from(Order)
            .outerjoin(Customer, Customer.customer_id == Order.customer_id)
            .outerjoin(Package, Package.package_id == Order.package_id)
            .order_by(Order.date_time.desc())
        )
        if customer_id:
            stmt = stmt.where(Order.customer_id == customer_id)

        result = await self._execute(db, stmt, "list orders")
        return [OrderSummary.model_validate(dict(row)) for row in result.mappings().all()]

    async def create_order(self, db: AsyncSession, payload: OrderCreate) -> OrderResponse:
        """
        Insert an order and return the stored row.

        Raises:
            ValidationError: customer_id or package_id missing (→ 400, no query run)
            NotFoundError:   the customer or the package does not exist (→ 404)
            DatabaseError:   insert failed (→ 500)
        """
        if not payload.customer_id or not payload.package_id:
            raise ValidationError(
                "customer_id and package_id are required",
                context={
                    "has_customer_id": bool(payload.customer_id),
                    "has_package_id": bool(payload.package_id),
                },
            )

        stmt = (
            insert(Order)
            .values(
                customer_id=payload.customer_id,
                package_id=payload.package_id,
                date_time=func.now(),
                total=payload.total or 0,
                status=payload.status or DEFAULT_STATUS,
                created_at=func.now(),
            )
            .returning(Order)
        )
        result = await self._execute(
            db,
            stmt,
            "create order",
            parents=[("customer", payload.customer_id), ("package", payload.package_id)],
        )
        order = result.scalar_one()
        await self._commit(db, "create order")
        logger.info(
            "Order %s created: customer %s bought package %s (%s)",
            order.id,
            order.customer_id,
            order.package_id,
            order.status,
        )
        return OrderResponse.model_validate(order)


# ── Singleton Instance ────────────────────────────────────────────────────
order_service = OrderService()

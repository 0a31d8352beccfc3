"""
MapIt Backend: Admin Service
==============================

What:  Read-only queries behind the admin dashboard: every map with its
       owner, every order, and store-wide totals.
How:   The stats are one SELECT of four scalar subqueries, so the counts come
       from a single snapshot instead of four round trips:

           SELECT (SELECT count(*) FROM customer)  AS total_customers,
                  (SELECT count(*) FROM map)       AS total_maps,
                  (SELECT count(*) FROM orders)    AS total_orders,
                  (SELECT coalesce(sum(total), 0)
                     FROM orders WHERE status = 'completed') AS total_revenue
"""

import logging
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.models import Customer, Map, Order
from mapit.models.order import COMPLETED_STATUS
from mapit.schemas.admin import AdminMapSummary, AdminStats
from mapit.schemas.order import OrderSummary
from mapit.services.base import QueryService
from mapit.services.order_service import order_service

logger = logging.getLogger(__name__)


class AdminService(QueryService):

    async def list_maps(self, db: AsyncSession) -> List[AdminMapSummary]:
        """
        Every map with its owner's name and email, newest first.

        Raises:
            DatabaseError: query execution failed (→ 500)
        """
        stmt = (
            select(
                Map.map_id,
                Map.title,
                Map.customer_id,
                Map.created_at,
                Customer.first_name,
                Customer.last_name,
                Customer.email,
            )
            .select_from(Map)
            .outerjoin(Customer, Customer.customer_id == Map.customer_id)
            .order_by(Map.created_at.desc())
        )
        result = await self._execute(db, stmt, "admin list maps")
        return [AdminMapSummary.model_validate(dict(row)) for row in result.mappings().all()]

    async def list_orders(self, db: AsyncSession) -> List[OrderSummary]:
        """Every order, newest first; same rows as an unfiltered GET /orders."""
        return await order_service.list_orders(db)

    async def stats(self, db: AsyncSession) -> AdminStats:
        """
        Store-wide totals. Revenue is the sum of completed orders, 0 when
        there are none.

        Raises:
            DatabaseError: query execution failed (→ 500)
        """
        revenue = (
            select(func.coalesce(func.sum(Order.total), 0))
            .where(Order.status == COMPLETED_STATUS)
            .scalar_subquery()
        )
        stmt = select(
            select(func.count()).select_from(Customer).scalar_subquery().label("total_customers"),
            select(func.count()).select_from(Map).scalar_subquery().label("total_maps"),
            select(func.count()).select_from(Order).scalar_subquery().label("total_orders"),
            revenue.label("total_revenue"),
        )
        result = await self._execute(db, stmt, "admin stats")
        row = result.mappings().one()
        stats = AdminStats(
            total_customers=row["total_customers"] or 0,
            total_maps=row["total_maps"] or 0,
            total_orders=row["total_orders"] or 0,
            total_revenue=float(row["total_revenue"] or 0),
        )
        logger.debug("Admin stats: %s", stats.model_dump())
        return stats


# ── Singleton Instance ────────────────────────────────────────────────────
admin_service = AdminService()

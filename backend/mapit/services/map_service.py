"""
MapIt Backend: Map Service
============================

What:  Query handlers behind GET /maps, POST /maps and GET /customer/{id}/maps.
How:   Each method composes exactly one SQL statement on the request session
       and maps the rows onto response schemas.

Listing query (GET /maps):
    SELECT m.map_id, m.title, m.description, m.country, m.active,
           m.created_at, m.customer_id,
           c.first_name || ' ' || c.last_name AS customer_name,
           COUNT(z.zone_id) AS zone_count
    FROM map m
    LEFT OUTER JOIN customer c ON c.customer_id = m.customer_id
    LEFT OUTER JOIN zones z ON z.map_id = m.map_id
    GROUP BY m.map_id, c.first_name, c.last_name
    ORDER BY m.created_at DESC

    COUNT(z.zone_id) over a LEFT JOIN yields 0 for maps without zones.
    The customer name components are grouped because they are selected.

Per-customer query (GET /customer/{id}/maps):
    Same map columns and zone count, no customer join,
    WHERE m.customer_id = :id GROUP BY m.map_id.
"""

import logging
from typing import Any, Dict, List

from sqlalchemy import func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.exceptions import ValidationError
from mapit.models import Customer, Map, Zone
from mapit.schemas.map import CustomerMapSummary, MapCreate, MapResponse, MapSummary
from mapit.services.base import QueryService

logger = logging.getLogger(__name__)

# Map columns shared by both listing queries, in response order
LISTING_COLUMNS = (
    Map.map_id,
    Map.title,
    Map.description,
    Map.country,
    Map.active,
    Map.created_at,
    Map.customer_id,
)


class MapService(QueryService):
    """
    Business logic layer for map operations.

    Responsibilities:
        - list_maps():          all maps with owner name and zone count
        - create_map():         validated insert, server-assigned created_at
        - list_customer_maps(): one customer's maps with zone count
    """

    async def list_maps(self, db: AsyncSession) -> List[MapSummary]:
        """
        List every map, newest first.

        Returns:
            MapSummary rows including `customer_name` and `zone_count`.

        Raises:
            DatabaseError: query execution failed (→ 500)
        """
        customer_name = (Customer.first_name + " " + Customer.last_name).label("customer_name")
        zone_count = func.count(Zone.zone_id).label("zone_count")

        stmt = (
            select(*LISTING_COLUMNS, customer_name, zone_count)
            .select_from(Map)
            .outerjoin(Customer, Customer.customer_id == Map.customer_id)
            .outerjoin(Zone, Zone.map_id == Map.map_id)
            .group_by(Map.map_id, Customer.first_name, Customer.last_name)
            .order_by(Map.created_at.desc())
        )

        result = await self._execute(db, stmt, "list maps")
        return [MapSummary.model_validate(dict(row)) for row in result.mappings().all()]

    async def create_map(self, db: AsyncSession, payload: MapCreate) -> MapResponse:
        """
        Insert a map and return the stored row.

        Defaults applied here:
            description, country → '' when missing or empty
            active               → True unless the body says literally false
            created_at           → now() on the database server

        Raises:
            ValidationError: title or customer_id missing (→ 400, no query run)
            NotFoundError:   customer_id references no customer (→ 404)
            DatabaseError:   insert failed (→ 500)
        """
        if not payload.title or not payload.customer_id:
            raise ValidationError(
                "Title and customer_id are required",
                context={
                    "has_title": bool(payload.title),
                    "has_customer_id": bool(payload.customer_id),
                },
            )

        values: Dict[str, Any] = {
            "title": payload.title,
            "description": payload.description or "",
            "country": payload.country or "",
            "customer_id": payload.customer_id,
            "active": payload.is_active,
            "created_at": func.now(),
            "map_data": payload.map_data,
            "map_bounds": payload.map_bounds,
            "map_code": payload.map_code,
        }
        stmt = insert(Map).values(**values).returning(Map)

        result = await self._execute(
            db, stmt, "create map", parents=[("customer", payload.customer_id)]
        )
        created = result.scalar_one()
        await self._commit(db, "create map")
        logger.info(
            "Map %s created for customer %s (active=%s)",
            created.map_id,
            created.customer_id,
            created.active,
        )
        return MapResponse.model_validate(created)

    async def list_customer_maps(
        self, db: AsyncSession, customer_id: int
    ) -> List[CustomerMapSummary]:
        """
        List one customer's maps, newest first.

        An id with no maps (or no such customer) yields an empty list.

        Raises:
            DatabaseError: query execution failed (→ 500)
        """
        zone_count = func.count(Zone.zone_id).label("zone_count")
        stmt = (
            select(*LISTING_COLUMNS, zone_count)
            .select_from(Map)
            .outerjoin(Zone, Zone.map_id == Map.map_id)
            .where(Map.customer_id == customer_id)
            .group_by(Map.map_id)
            .order_by(Map.created_at.desc())
        )

        result = await self._execute(db, stmt, "list customer maps")
        maps = [CustomerMapSummary.model_validate(dict(row)) for row in result.mappings().all()]
        logger.debug("Customer %s has %d maps", customer_id, len(maps))
        return maps


# ── Singleton Instance ────────────────────────────────────────────────────
map_service = MapService()

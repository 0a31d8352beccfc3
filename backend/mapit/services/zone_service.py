"""
MapIt Backend: Zone Service
=============================

What:  Query handlers behind the /zones endpoints.
How:   One statement per call, except `save_zones`, which runs one statement
       per zone inside the request's single transaction.

Bulk save semantics:
    - items carrying `zone_id` update that zone (name, color, coordinates);
      ids that match no row are skipped
    - items without `zone_id` are inserted into their `map_id`
    - any failure rolls back the whole batch
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.exceptions import NotFoundError, ValidationError
from mapit.models import Zone
from mapit.schemas.zone import (
    Coordinate,
    ZoneBulkSave,
    ZoneCreate,
    ZoneResponse,
    ZoneUpdate,
)
from mapit.services.base import QueryService

logger = logging.getLogger(__name__)


def coordinates_document(coordinates: Sequence[Coordinate]) -> List[List[float]]:
    """Validated (x, y) tuples → JSON array of [x, y] pairs."""
    return [[x, y] for x, y in coordinates]


class ZoneService(QueryService):
    """Business logic layer for zone operations."""

    async def list_zones(self, db: AsyncSession, map_id: Optional[int]) -> List[ZoneResponse]:
        """All zones of a map, newest first."""
        if map_id is None:
            raise ValidationError("map_id is required", field="map_id")

        stmt = select(Zone).where(Zone.map_id == map_id).order_by(Zone.created_at.desc())
        result = await self._execute(db, stmt, "list zones")
        return [ZoneResponse.model_validate(zone) for zone in result.scalars().all()]

    async def get_zone(self, db: AsyncSession, zone_id: int) -> ZoneResponse:
        """
        Raises:
            NotFoundError: no zone with this id (→ 404)
        """
        result = await self._execute(
            db, select(Zone).where(Zone.zone_id == zone_id), "get zone"
        )
        zone = result.scalar_one_or_none()
        if zone is None:
            raise NotFoundError(resource="zone", resource_id=zone_id)
        return ZoneResponse.model_validate(zone)

    async def create_zone(self, db: AsyncSession, payload: ZoneCreate) -> ZoneResponse:
        """
        Insert one zone.

        Raises:
            ValidationError: map_id, name, color or coordinates missing (→ 400)
            NotFoundError:   map_id references no map (→ 404)
        """
        if (
            not payload.map_id
            or not payload.name
            or not payload.color
            or payload.coordinates is None
        ):
            raise ValidationError("map_id, name, color, and coordinates are required")

        stmt = (
            insert(Zone)
            .values(
                map_id=payload.map_id,
                name=payload.name,
                color=payload.color,
                coordinates=coordinates_document(payload.coordinates),
                customer_id=payload.customer_id,
                created_at=func.now(),
                updated_at=func.now(),
            )
            .returning(Zone)
        )
        result = await self._execute(
            db, stmt, "create zone", parents=[("map", payload.map_id)]
        )
        zone = result.scalar_one()
        await self._commit(db, "create zone")
        logger.info("Zone %s created on map %s", zone.zone_id, zone.map_id)
        return ZoneResponse.model_validate(zone)

    async def update_zone(
        self, db: AsyncSession, zone_id: int, payload: ZoneUpdate
    ) -> ZoneResponse:
        """
        Partial update: only non-empty fields change; `updated_at` always moves.

        Raises:
            NotFoundError: no zone with this id (→ 404)
        """
        changes: Dict[str, Any] = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None and value != ""
        }
        if "coordinates" in changes:
            changes["coordinates"] = coordinates_document(changes["coordinates"])

        stmt = (
            update(Zone)
            .where(Zone.zone_id == zone_id)
            .values(**changes, updated_at=func.now())
            .returning(Zone)
        )
        result = await self._execute(db, stmt, "update zone")
        zone = result.scalar_one_or_none()
        if zone is None:
            raise NotFoundError(resource="zone", resource_id=zone_id)
        await self._commit(db, "update zone")
        logger.info("Zone %s updated (%s)", zone_id, ", ".join(sorted(changes)) or "touch")
        return ZoneResponse.model_validate(zone)

    async def delete_zone(self, db: AsyncSession, zone_id: int) -> None:
        """
        Raises:
            NotFoundError: no zone with this id (→ 404)
        """
        stmt = delete(Zone).where(Zone.zone_id == zone_id).returning(Zone.zone_id)
        result = await self._execute(db, stmt, "delete zone")
        if result.scalar_one_or_none() is None:
            raise NotFoundError(resource="zone", resource_id=zone_id)
        await self._commit(db, "delete zone")
        logger.info("Zone %s deleted", zone_id)

    async def save_zones(self, db: AsyncSession, payload: ZoneBulkSave) -> List[ZoneResponse]:
        """
        Update-or-insert a batch of zones in one transaction.

        All items are validated before the first statement runs.

        Raises:
            ValidationError: `zones` missing, or a new zone without map_id (→ 400)
            NotFoundError:   a new zone references no map (→ 404)
            DatabaseError:   any statement failed; the batch is rolled back
        """
        if payload.zones is None:
            raise ValidationError("Zones array is required", field="zones")

        for index, item in enumerate(payload.zones):
            if item.zone_id is None and not item.map_id:
                raise ValidationError(
                    "map_id is required for new zones",
                    field="map_id",
                    context={"index": index},
                )

        saved: List[ZoneResponse] = []
        for item in payload.zones:
            coordinates = coordinates_document(item.coordinates)

            if item.zone_id is not None:
                stmt = (
                    update(Zone)
                    .where(Zone.zone_id == item.zone_id)
                    .values(
                        name=item.name,
                        color=item.color,
                        coordinates=coordinates,
                        updated_at=func.now(),
                    )
                    .returning(Zone)
                )
                result = await self._execute(db, stmt, "bulk update zone")
                zone = result.scalar_one_or_none()
                if zone is None:
                    logger.warning("Bulk save skipped unknown zone %s", item.zone_id)
                    continue
            else:
                stmt = (
                    insert(Zone)
                    .values(
                        map_id=item.map_id,
                        name=item.name,
                        color=item.color,
                        coordinates=coordinates,
                        customer_id=item.customer_id,
                        created_at=func.now(),
                        updated_at=func.now(),
                    )
                    .returning(Zone)
                )
                result = await self._execute(
                    db, stmt, "bulk insert zone", parents=[("map", item.map_id)]
                )
                zone = result.scalar_one()

            saved.append(ZoneResponse.model_validate(zone))

        await self._commit(db, "bulk save zones")
        logger.info("Bulk save stored %d of %d zones", len(saved), len(payload.zones))
        return saved


# ── Singleton Instance ────────────────────────────────────────────────────
zone_service = ZoneService()

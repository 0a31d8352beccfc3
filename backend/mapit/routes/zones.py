"""
MapIt Backend: Zone Route Handlers
====================================

What:  Zone listing, CRUD, and bulk save for the map editor.
Who:   The editor loads a map's zones, edits them locally, then either saves
       them one by one or sends the whole set to POST /zones/bulk.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.database import get_db_session
from mapit.schemas.common import ErrorResponse, MessageResponse
from mapit.schemas.zone import (
    ZoneBulkResponse,
    ZoneBulkSave,
    ZoneCreate,
    ZoneEnvelope,
    ZoneListResponse,
    ZoneUpdate,
)
from mapit.services.zone_service import zone_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/zones", tags=["Zones"])

NOT_FOUND = {404: {"description": "Zone not found", "model": ErrorResponse}}


@router.get(
    "",
    response_model=ZoneListResponse,
    responses={400: {"description": "map_id missing", "model": ErrorResponse}},
    summary="List the zones of a map",
)
async def list_zones(
    map_id: Optional[int] = Query(default=None, description="Map whose zones to list"),
    db: AsyncSession = Depends(get_db_session),
) -> ZoneListResponse:
    zones = await zone_service.list_zones(db, map_id)
    return ZoneListResponse(zones=zones)


@router.post(
    "",
    status_code=201,
    response_model=ZoneEnvelope,
    responses={
        400: {"description": "Required field missing", "model": ErrorResponse},
        404: {"description": "Map not found", "model": ErrorResponse},
    },
    summary="Create a zone",
)
async def create_zone(
    payload: Optional[ZoneCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> ZoneEnvelope:
    zone = await zone_service.create_zone(db, payload or ZoneCreate())
    return ZoneEnvelope(zone=zone)


@router.post(
    "/bulk",
    response_model=ZoneBulkResponse,
    responses={400: {"description": "Zones array missing", "model": ErrorResponse}},
    summary="Save a batch of zones in one transaction",
)
async def save_zones(
    payload: Optional[ZoneBulkSave] = None,
    db: AsyncSession = Depends(get_db_session),
) -> ZoneBulkResponse:
    zones = await zone_service.save_zones(db, payload or ZoneBulkSave())
    return ZoneBulkResponse(
        zones=zones,
        message=f"{len(zones)} zones saved successfully",
    )


@router.get("/{zone_id}", response_model=ZoneEnvelope, responses=NOT_FOUND, summary="Get a zone")
async def get_zone(zone_id: int, db: AsyncSession = Depends(get_db_session)) -> ZoneEnvelope:
    zone = await zone_service.get_zone(db, zone_id)
    return ZoneEnvelope(zone=zone)


@router.put(
    "/{zone_id}",
    response_model=ZoneEnvelope,
    responses=NOT_FOUND,
    summary="Update a zone",
    description="Only the non-empty fields sent are changed.",
)
async def update_zone(
    zone_id: int,
    payload: ZoneUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ZoneEnvelope:
    zone = await zone_service.update_zone(db, zone_id, payload)
    return ZoneEnvelope(zone=zone)


@router.delete("/{zone_id}", response_model=MessageResponse, responses=NOT_FOUND, summary="Delete a zone")
async def delete_zone(zone_id: int, db: AsyncSession = Depends(get_db_session)) -> MessageResponse:
    await zone_service.delete_zone(db, zone_id)
    return MessageResponse(message="Zone deleted successfully")

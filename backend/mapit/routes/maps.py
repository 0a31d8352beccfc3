"""
MapIt Backend: Map Route Handlers
===================================

What:  GET /maps, POST /maps, GET /customer/{id}/maps.
How:   Delegates to MapService and wraps results in the success envelope.
Who:   Called by the dashboard (all maps) and the customer view (own maps).
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.database import get_db_session
from mapit.schemas.common import ErrorResponse
from mapit.schemas.map import (
    CustomerMapListResponse,
    MapCreate,
    MapCreatedResponse,
    MapListResponse,
)
from mapit.services.map_service import map_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Maps"])


@router.get(
    "/maps",
    response_model=MapListResponse,
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="List all maps",
    description=(
        "Every map with its owner's full name and number of zones, "
        "newest first."
    ),
)
async def list_maps(db: AsyncSession = Depends(get_db_session)) -> MapListResponse:
    maps = await map_service.list_maps(db)
    return MapListResponse(maps=maps)


@router.post(
    "/maps",
    status_code=201,
    response_model=MapCreatedResponse,
    response_model_exclude_none=True,
    responses={
        400: {"description": "Title or customer_id missing", "model": ErrorResponse},
        404: {"description": "Customer does not exist", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Create a map",
)
async def create_map(
    payload: Optional[MapCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> MapCreatedResponse:
    """
    Create a map owned by `customer_id`.

    `description` and `country` default to ''; `active` defaults to true and
    is false only when the body sends a literal `false`.
    """
    created = await map_service.create_map(db, payload or MapCreate())
    return MapCreatedResponse(map=created)


@router.get(
    "/customer/{customer_id}/maps",
    response_model=CustomerMapListResponse,
    responses={
        400: {"description": "Invalid customer id", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="List one customer's maps",
    description="Maps owned by the customer, with zone counts, newest first. "
                "Unknown customers yield an empty list.",
)
async def list_customer_maps(
    customer_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> CustomerMapListResponse:
    maps = await map_service.list_customer_maps(db, customer_id)
    return CustomerMapListResponse(maps=maps)

"""
MapIt Backend: Admin Route Handlers
=====================================

What:  Read-only listings and totals for the admin dashboard.
How:   GET only; other methods on these paths answer 405.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.database import get_db_session
from mapit.schemas.admin import AdminMapListResponse, AdminStatsResponse
from mapit.schemas.common import ErrorResponse
from mapit.schemas.order import OrderListResponse
from mapit.services.admin_service import admin_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])

STORE_FAILURE = {500: {"description": "Store failure", "model": ErrorResponse}}


@router.get(
    "/maps",
    response_model=AdminMapListResponse,
    responses=STORE_FAILURE,
    summary="All maps with owner details",
)
async def list_maps(db: AsyncSession = Depends(get_db_session)) -> AdminMapListResponse:
    maps = await admin_service.list_maps(db)
    return AdminMapListResponse(maps=maps)


@router.get(
    "/orders",
    response_model=OrderListResponse,
    responses=STORE_FAILURE,
    summary="All orders",
)
async def list_orders(db: AsyncSession = Depends(get_db_session)) -> OrderListResponse:
    orders = await admin_service.list_orders(db)
    return OrderListResponse(orders=orders)


@router.get(
    "/stats",
    response_model=AdminStatsResponse,
    responses=STORE_FAILURE,
    summary="Store-wide totals",
    description="Customer, map and order counts, plus revenue from completed orders.",
)
async def stats(db: AsyncSession = Depends(get_db_session)) -> AdminStatsResponse:
    totals = await admin_service.stats(db)
    return AdminStatsResponse(stats=totals)

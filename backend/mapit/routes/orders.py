"""
MapIt Backend: Order Route Handlers
=====================================

What:  GET /orders and POST /orders.
Who:   The upgrade page places orders; the customer view lists its own
       orders with ?customer_id=.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from mapit.database import get_db_session
from mapit.schemas.common import ErrorResponse
from mapit.schemas.order import OrderCreate, OrderCreatedResponse, OrderListResponse
from mapit.services.order_service import order_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])


@router.get(
    "",
    response_model=OrderListResponse,
    responses={500: {"description": "Store failure", "model": ErrorResponse}},
    summary="List orders",
    description="All orders, or one customer's with ?customer_id=, newest first.",
)
async def list_orders(
    customer_id: Optional[int] = Query(default=None, description="Only this customer's orders"),
    db: AsyncSession = Depends(get_db_session),
) -> OrderListResponse:
    orders = await order_service.list_orders(db, customer_id)
    return OrderListResponse(orders=orders)


@router.post(
    "",
    status_code=201,
    response_model=OrderCreatedResponse,
    responses={
        400: {"description": "customer_id or package_id missing", "model": ErrorResponse},
        404: {"description": "Customer or package does not exist", "model": ErrorResponse},
        500: {"description": "Store failure", "model": ErrorResponse},
    },
    summary="Place an order",
)
async def create_order(
    payload: Optional[OrderCreate] = None,
    db: AsyncSession = Depends(get_db_session),
) -> OrderCreatedResponse:
    created = await order_service.create_order(db, payload or OrderCreate())
    return OrderCreatedResponse(order=created)

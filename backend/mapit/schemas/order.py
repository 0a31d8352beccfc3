"""
MapIt Backend: Order Schemas
==============================

What:  Request and response models for the order endpoints.

Request rules (POST /orders):
    - `customer_id` and `package_id` are required; OrderService checks them
      so the 400 envelope reads "customer_id and package_id are required".
    - `total` defaults to 0 and `status` to 'pending'.
    - Unknown keys are rejected (400).
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    """Body of POST /orders."""
    customer_id: Optional[int] = Field(default=None, description="Buying customer (required)")
    package_id: Optional[int] = Field(default=None, description="Package bought (required)")
    total: Optional[float] = Field(default=None, description="Amount charged; defaults to 0")
    status: Optional[str] = Field(default=None, max_length=50, description="Defaults to 'pending'")

    model_config = {"extra": "forbid"}


class OrderResponse(BaseModel):
    """The stored order row, as returned after insert."""
    id: int
    customer_id: int
    package_id: int
    date_time: datetime
    total: float
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class OrderSummary(OrderResponse):
    """
    One row of an order listing, with the customer and package joined in.

    The joins are outer joins, so the joined fields are null when the parent
    row is gone.
    """
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    package_name: Optional[str] = None
    package_price: Optional[float] = None


class OrderListResponse(BaseModel):
    success: bool = True
    orders: List[OrderSummary]


class OrderCreatedResponse(BaseModel):
    """Returned by POST /orders with HTTP 201."""
    success: bool = True
    order: OrderResponse

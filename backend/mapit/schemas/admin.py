"""
MapIt Backend: Admin Schemas
==============================

What:  Response models for the read-only admin dashboard endpoints.
How:   The stats body uses camelCase keys (`totalCustomers` ...), like the
       database check.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class AdminMapSummary(BaseModel):
    """A map with its owner's contact details (GET /admin/maps)."""
    map_id: int
    title: str
    customer_id: int
    created_at: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class AdminMapListResponse(BaseModel):
    success: bool = True
    maps: List[AdminMapSummary]


class AdminStats(BaseModel):
    """Store-wide totals. Revenue sums completed orders only."""
    total_customers: int = Field(default=0, alias="totalCustomers")
    total_maps: int = Field(default=0, alias="totalMaps")
    total_orders: int = Field(default=0, alias="totalOrders")
    total_revenue: float = Field(default=0.0, alias="totalRevenue")

    model_config = {"populate_by_name": True}


class AdminStatsResponse(BaseModel):
    success: bool = True
    stats: AdminStats

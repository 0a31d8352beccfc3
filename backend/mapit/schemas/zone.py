"""
MapIt Backend: Zone Schemas
=============================

What:  Request and response models for the zone endpoints.

A zone boundary is an ordered list of [x, y] pairs, e.g.
    [[35.49, 33.88], [35.51, 33.88], [35.51, 33.90]]
"""

from datetime import datetime
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, Field

Coordinate = Tuple[float, float]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ZoneCreate(BaseModel):
    """
    Body of POST /zones.

    Required fields are checked by ZoneService so the 400 envelope names
    all of them at once.
    """
    map_id: Optional[int] = None
    name: Optional[str] = None
    color: Optional[str] = None
    coordinates: Optional[List[Coordinate]] = None
    customer_id: Optional[int] = None

    model_config = {"extra": "forbid"}


class ZoneUpdate(BaseModel):
    """Body of PUT /zones/{id}. Omitted, null, or empty fields keep their stored value."""
    name: Optional[str] = None
    color: Optional[str] = None
    coordinates: Optional[List[Coordinate]] = None

    model_config = {"extra": "forbid"}


class ZoneBulkItem(BaseModel):
    """
    One zone in a bulk save.

    With `zone_id`: update of an existing zone. Without: insert into `map_id`.
    Extra keys are ignored so clients can send back zones exactly as they
    received them (with created_at, updated_at ...).
    """
    zone_id: Optional[int] = None
    map_id: Optional[int] = None
    name: str
    color: str
    coordinates: List[Coordinate]
    customer_id: Optional[int] = None

    model_config = {"extra": "ignore"}


class ZoneBulkSave(BaseModel):
    """Body of POST /zones/bulk."""
    zones: Optional[List[ZoneBulkItem]] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ZoneResponse(BaseModel):
    zone_id: int
    map_id: int
    customer_id: Optional[int] = None
    name: str
    color: str
    # Stored JSON is returned as-is; older rows may predate the pair format
    coordinates: Any
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ZoneListResponse(BaseModel):
    success: bool = True
    zones: List[ZoneResponse]


class ZoneEnvelope(BaseModel):
    """Single-zone success envelope (create, get, update)."""
    success: bool = True
    zone: ZoneResponse


class ZoneBulkResponse(BaseModel):
    success: bool = True
    zones: List[ZoneResponse]
    message: str = Field(description="'<n> zones saved successfully'")

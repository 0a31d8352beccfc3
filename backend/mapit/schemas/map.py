"""
MapIt Backend: Map Schemas
============================

What:  Request and response models for the map endpoints.

Request rules (POST /maps):
    - `title` and `customer_id` are required; presence is checked by
      MapService so the error envelope carries the exact message clients
      expect ("Title and customer_id are required").
    - `description` / `country` default to the empty string.
    - `active` is inactive ONLY for a literal JSON `false`. Absent, `null`,
      `true`, `"false"`, `0` ... all mean active. That is why the field is
      typed `Any` instead of `bool`: pydantic would coerce "false" to False.
    - Unknown keys are rejected (400).
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class MapCreate(BaseModel):
    """Body of POST /maps. Same shape as a map row minus server-assigned fields."""
    title: Optional[str] = Field(default=None, description="Map title (required, non-empty)")
    description: Optional[str] = Field(default=None, description="Defaults to ''")
    country: Optional[str] = Field(default=None, description="Defaults to ''")
    customer_id: Optional[int] = Field(default=None, description="Owning customer (required)")
    active: Any = Field(default=None, description="Only a literal false deactivates the map")
    map_data: Optional[Any] = Field(default=None, description="Opaque map document")
    map_bounds: Optional[Any] = Field(default=None, description="Opaque bounds document")
    map_code: Optional[str] = Field(default=None, max_length=50)

    model_config = {"extra": "forbid"}

    @property
    def is_active(self) -> bool:
        return self.active is not False


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MapResponse(BaseModel):
    """The full map row, as returned after insert."""
    map_id: int
    title: str
    description: str
    country: str
    customer_id: int
    active: bool
    created_at: datetime
    map_data: Optional[Any] = None
    map_bounds: Optional[Any] = None
    map_code: Optional[str] = None

    model_config = {"from_attributes": True}


class CustomerMapSummary(BaseModel):
    """
    One row of a map listing.

    `zone_count` is computed by the query (COUNT over a LEFT JOIN), so a map
    without zones reports 0.
    """
    map_id: int
    title: str
    description: Optional[str] = None
    country: Optional[str] = None
    active: Optional[bool] = None
    created_at: datetime
    customer_id: int
    zone_count: int = Field(default=0, ge=0)


class MapSummary(CustomerMapSummary):
    """Listing row for GET /maps; adds the owner's full name."""
    customer_name: Optional[str] = Field(
        default=None,
        description="first_name + ' ' + last_name; null when the owner row is missing",
    )


class MapListResponse(BaseModel):
    success: bool = True
    maps: List[MapSummary]


class CustomerMapListResponse(BaseModel):
    success: bool = True
    maps: List[CustomerMapSummary]


class MapCreatedResponse(BaseModel):
    """Returned by POST /maps with HTTP 201."""
    success: bool = True
    map: MapResponse

"""
Public share Pydantic schemas: owner-side configuration and the anonymous view.

The public view schemas are an explicit whitelist. Adding a column to a model
does not make it public; a field has to be added here.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, model_serializer


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Stored expiries are naive UTC; responses carry the offset explicitly."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class ShareState(str, Enum):
    """Tri-state visibility shown to the owner."""
    NOT_SHARED = "not_shared"
    ACTIVE = "active"
    EXPIRED = "expired"


class ShareCreate(BaseModel):
    """Schema for creating or rotating a public share."""

    show_vendors: bool = False
    expires_at: Optional[datetime] = Field(
        None,
        description="Expiry instant. Omit or null for a link that never expires."
    )


class ShareResponse(BaseModel):
    """Schema returned after creating or rotating a share."""

    share_token: str
    share_url: str
    is_enabled: bool
    show_vendors: bool
    expires_at: Optional[datetime] = None

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class ShareStatusResponse(BaseModel):
    """Owner-facing share status."""

    status: ShareState
    is_shared: bool
    is_expired: bool
    show_vendors: bool = False
    expires_at: Optional[datetime] = None
    share_token: Optional[str] = None
    share_url: Optional[str] = None

    @field_serializer("expires_at")
    def serialize_expires_at(self, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class RevokeResponse(BaseModel):
    success: bool = True


# ============== Anonymous view ==============


class PublicTimelineInfo(BaseModel):
    title: str
    date: str
    type: Optional[str] = None
    location: Optional[str] = None
    categories_enabled: bool


class PublicCategory(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    order: int


class PublicEvent(BaseModel):
    id: int
    category_id: Optional[int] = None
    start_time: str
    end_time: str
    duration: str
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    type: str
    order: int
    # Present only when vendors are part of the view
    vendor_ids: Optional[List[int]] = None

    @model_serializer(mode="wrap")
    def drop_hidden_vendor_ids(self, handler):
        data = handler(self)
        if self.vendor_ids is None:
            data.pop("vendor_ids", None)
        return data


class PublicVendor(BaseModel):
    id: int
    name: str
    type_name: Optional[str] = None
    contact_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    alternative_phone: Optional[str] = None
    address: Optional[str] = None


class PublicTimelineView(BaseModel):
    """
    Read-only projection of a shared timeline.
    `vendors` is None (and dropped from the response body) when vendors are hidden.
    """

    timeline: PublicTimelineInfo
    categories: List[PublicCategory] = []
    events: List[PublicEvent] = []
    vendors: Optional[List[PublicVendor]] = None

    @model_serializer(mode="wrap")
    def drop_hidden_vendors(self, handler):
        data = handler(self)
        if self.vendors is None:
            data.pop("vendors", None)
        return data

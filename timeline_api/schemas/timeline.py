"""
Timeline, category and event Pydantic schemas for the owner-facing API.
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, ConfigDict, field_validator

_TIME_OF_DAY = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _check_time_of_day(value: Optional[str]) -> Optional[str]:
    if value is not None and not _TIME_OF_DAY.match(value):
        raise ValueError("must be a wall-clock time in HH:MM format")
    return value


# ============== Timelines ==============


class TimelineBase(BaseModel):
    """Base schema with common timeline attributes."""

    title: str = Field(..., min_length=1, max_length=255)
    date: str = Field(..., min_length=1, max_length=50)
    type: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    categories_enabled: bool = False
    vendors_enabled: bool = False


class TimelineCreate(TimelineBase):
    """Schema for timeline creation."""

    custom_field_values: Dict[str, Any] = Field(default_factory=dict)


class TimelineUpdate(BaseModel):
    """Schema for updating a timeline. Only provided fields change."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    date: Optional[str] = Field(None, min_length=1, max_length=50)
    type: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    categories_enabled: Optional[bool] = None
    vendors_enabled: Optional[bool] = None
    custom_field_values: Optional[Dict[str, Any]] = None


class TimelineResponse(TimelineBase):
    """Schema for timeline response (owner only)."""

    id: int
    user_id: int
    custom_field_values: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Categories ==============


class CategoryCreate(BaseModel):
    """Schema for category creation. Order defaults to the end of the list."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = None


class CategoryUpdate(BaseModel):
    """Schema for updating a category."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    order: Optional[int] = None


class CategoryResponse(BaseModel):
    """Schema for category response."""

    id: int
    timeline_id: int
    name: str
    description: Optional[str] = None
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# ============== Events ==============


class EventBase(BaseModel):
    """Base schema with common event attributes."""

    start_time: str
    end_time: str
    duration: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    type: str = Field("event", min_length=1, max_length=100)
    category_id: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_of_day(cls, v: Optional[str]) -> Optional[str]:
        return _check_time_of_day(v)


class EventCreate(EventBase):
    """Schema for event creation. Order defaults to the end of the timeline."""

    order: Optional[int] = None


class EventUpdate(BaseModel):
    """Schema for updating an event."""

    start_time: Optional[str] = None
    end_time: Optional[str] = None
    duration: Optional[str] = Field(None, min_length=1, max_length=20)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    category_id: Optional[int] = None
    order: Optional[int] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time_of_day(cls, v: Optional[str]) -> Optional[str]:
        return _check_time_of_day(v)


class EventResponse(EventBase):
    """Schema for event response."""

    id: int
    timeline_id: int
    order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EventOrder(BaseModel):
    """Single entry of an event reorder request."""

    id: int
    order: int


class EventReorder(BaseModel):
    """Schema for reordering events of a timeline."""

    events: List[EventOrder] = Field(..., min_length=1)


class TimelineDetail(TimelineResponse):
    """Timeline with its ordered categories and events."""

    categories: List[CategoryResponse] = []
    events: List[EventResponse] = []

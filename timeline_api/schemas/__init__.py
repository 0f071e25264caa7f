"""
Pydantic schemas package.
All schemas are exported here for easy import.
"""
from timeline_api.schemas.user import (
    UserCreate,
    UserResponse,
    UserLogin,
    Token,
    TokenPayload,
)
from timeline_api.schemas.timeline import (
    TimelineCreate,
    TimelineUpdate,
    TimelineResponse,
    TimelineDetail,
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    EventCreate,
    EventUpdate,
    EventResponse,
    EventReorder,
)
from timeline_api.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorResponse,
    VendorTypeCreate,
    VendorTypeResponse,
    VendorAssignment,
)
from timeline_api.schemas.share import (
    ShareState,
    ShareCreate,
    ShareResponse,
    ShareStatusResponse,
    RevokeResponse,
    PublicTimelineView,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserResponse",
    "UserLogin",
    "Token",
    "TokenPayload",
    # Timeline schemas
    "TimelineCreate",
    "TimelineUpdate",
    "TimelineResponse",
    "TimelineDetail",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventReorder",
    # Vendor schemas
    "VendorCreate",
    "VendorUpdate",
    "VendorResponse",
    "VendorTypeCreate",
    "VendorTypeResponse",
    "VendorAssignment",
    # Share schemas
    "ShareState",
    "ShareCreate",
    "ShareResponse",
    "ShareStatusResponse",
    "RevokeResponse",
    "PublicTimelineView",
]

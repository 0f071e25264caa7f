"""
Database models package.
All models are exported here for easy import.
"""
from timeline_api.models.user import User
from timeline_api.models.timeline import Timeline, TimelineCategory, TimelineEvent
from timeline_api.models.vendor import (
    Vendor,
    VendorType,
    TimelineVendor,
    TimelineEventVendor,
)
from timeline_api.models.share import PublicTimelineShare

__all__ = [
    "User",
    "Timeline",
    "TimelineCategory",
    "TimelineEvent",
    "Vendor",
    "VendorType",
    "TimelineVendor",
    "TimelineEventVendor",
    "PublicTimelineShare",
]

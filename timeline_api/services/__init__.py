"""
Services package.
Contains business logic on top of the database session.
"""
from timeline_api.services.auth import AuthService
from timeline_api.services.timeline import TimelineService
from timeline_api.services.vendor import VendorService
from timeline_api.services.share import ShareService, build_share_url
from timeline_api.services.public_timeline import PublicTimelineService

__all__ = [
    "AuthService",
    "TimelineService",
    "VendorService",
    "ShareService",
    "build_share_url",
    "PublicTimelineService",
]

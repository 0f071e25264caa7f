"""
API routers package.
"""
from timeline_api.routers.auth import router as auth_router
from timeline_api.routers.timelines import router as timelines_router
from timeline_api.routers.vendors import router as vendors_router
from timeline_api.routers.share import router as share_router
from timeline_api.routers.public import router as public_router
from timeline_api.routers.health import router as health_router

__all__ = [
    "auth_router",
    "timelines_router",
    "vendors_router",
    "share_router",
    "public_router",
    "health_router",
]

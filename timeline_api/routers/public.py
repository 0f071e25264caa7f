"""
Public router: anonymous, read-only access to shared timelines.
"""
import time

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.config import get_settings
from timeline_api.database import get_db
from timeline_api.exceptions import ShareAccessDeniedError
from timeline_api.middlewares.rate_limit_middleware import get_rate_limit_decorator
from timeline_api.schemas.share import PublicTimelineView
from timeline_api.services.public_timeline import PublicTimelineService
from timeline_api.utils.prometheus_metrics import (
    share_link_access_duration_seconds,
    share_link_access_total,
)

router = APIRouter(prefix="/public", tags=["Public Timelines"])

public_rate_limit = get_rate_limit_decorator(
    f"{get_settings().rate_limit_public_per_minute}/minute"
)


def _record_access(result: str, start_time: float) -> None:
    share_link_access_total.labels(result=result).inc()
    share_link_access_duration_seconds.labels(result=result).observe(
        time.perf_counter() - start_time
    )


@router.get(
    "/timeline/{token}",
    response_model=PublicTimelineView,
    summary="View a shared timeline",
)
@public_rate_limit
async def get_public_timeline(
    token: str,
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> PublicTimelineView:
    """
    Read-only view of a shared timeline. **No authentication.**

    - **token**: Share token from the public link

    Unknown, revoked and expired tokens all return 404.
    `vendors` is only present when the owner enabled it for the link and
    for the timeline.
    """
    start_time = time.perf_counter()

    try:
        view = await PublicTimelineService(db).project_for_token(token)
    except ShareAccessDeniedError as e:
        _record_access("denied", start_time)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )

    _record_access("success", start_time)
    return view

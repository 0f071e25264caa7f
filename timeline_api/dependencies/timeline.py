"""
Timeline ownership dependency.
"""
from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.database import get_db
from timeline_api.dependencies.auth import get_current_active_user
from timeline_api.exceptions import TimelineNotFoundError
from timeline_api.models.timeline import Timeline
from timeline_api.models.user import User
from timeline_api.services.timeline import TimelineService


def timeline_not_found() -> HTTPException:
    """Same response for a missing timeline and one owned by someone else."""
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Timeline not found",
    )


async def get_owned_timeline(
    timeline_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Timeline:
    """Resolve the `timeline_id` path parameter to a timeline of the caller."""
    try:
        return await TimelineService(db).get_owned_timeline(timeline_id, current_user.id)
    except TimelineNotFoundError:
        raise timeline_not_found()

"""
Share router: owner-side management of a timeline's public link.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.config import get_settings
from timeline_api.database import get_db
from timeline_api.dependencies.auth import get_current_active_user
from timeline_api.dependencies.timeline import timeline_not_found
from timeline_api.exceptions import TimelineNotFoundError
from timeline_api.models.user import User
from timeline_api.schemas.share import (
    RevokeResponse,
    ShareCreate,
    ShareResponse,
    ShareStatusResponse,
)
from timeline_api.services.share import ShareService, build_share_url

router = APIRouter(prefix="/timelines", tags=["Sharing"])


def _share_origin(request: Request) -> str:
    """Configured public origin, or the origin the request came in on."""
    return get_settings().public_base_url or str(request.base_url)


@router.post(
    "/{timeline_id}/share",
    response_model=ShareResponse,
    summary="Create or rotate the public share link",
)
async def create_share(
    timeline_id: int,
    request: Request,
    share_data: Optional[ShareCreate] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ShareResponse:
    """
    Create the public link of a timeline.

    Calling it again issues a new token; the previous link stops working.

    - **show_vendors**: Include linked vendors in the public view
    - **expires_at**: Optional expiry instant (omit for a permanent link)
    """
    share_data = share_data or ShareCreate()
    try:
        share = await ShareService(db).create_or_rotate_share(
            timeline_id,
            current_user.id,
            show_vendors=share_data.show_vendors,
            expires_at=share_data.expires_at,
        )
    except TimelineNotFoundError:
        raise timeline_not_found()

    return ShareResponse(
        share_token=share.share_token,
        share_url=build_share_url(_share_origin(request), share.share_token),
        is_enabled=share.is_enabled,
        show_vendors=share.show_vendors,
        expires_at=share.expires_at,
    )


@router.get(
    "/{timeline_id}/share/status",
    response_model=ShareStatusResponse,
    summary="Get public share status",
)
async def get_share_status(
    timeline_id: int,
    request: Request,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> ShareStatusResponse:
    """
    Report whether the timeline is shared.

    - **status**: `not_shared`, `active` or `expired`
    - **share_token** / **share_url**: Only while the link is enabled
    """
    try:
        share_status = await ShareService(db).get_status(timeline_id, current_user.id)
    except TimelineNotFoundError:
        raise timeline_not_found()

    share_url = None
    if share_status.share_token:
        share_url = build_share_url(_share_origin(request), share_status.share_token)

    return ShareStatusResponse(
        status=share_status.state,
        is_shared=share_status.is_shared,
        is_expired=share_status.is_expired,
        show_vendors=share_status.show_vendors,
        expires_at=share_status.expires_at,
        share_token=share_status.share_token,
        share_url=share_url,
    )


@router.delete(
    "/{timeline_id}/share",
    response_model=RevokeResponse,
    summary="Revoke the public share link",
)
async def revoke_share(
    timeline_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> RevokeResponse:
    """
    Disable the public link. Succeeds even when the timeline is not shared.
    """
    try:
        await ShareService(db).revoke(timeline_id, current_user.id)
    except TimelineNotFoundError:
        raise timeline_not_found()
    return RevokeResponse(success=True)

"""
Share service: owner-side management of a timeline's public link.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.models.share import PublicTimelineShare
from timeline_api.services.share_status import (
    Clock,
    ShareStatus,
    resolve,
    to_naive_utc,
    utc_now,
)
from timeline_api.services.timeline import TimelineService
from timeline_api.utils.logger import log_info, log_warning
from timeline_api.utils.prometheus_metrics import share_link_operations_total
from timeline_api.utils.security import generate_share_token

PUBLIC_TIMELINE_PATH = "/public/timeline"


def build_share_url(origin: str, share_token: str) -> str:
    """Public URL of a share: {origin}/public/timeline/{token}."""
    return f"{origin.rstrip('/')}{PUBLIC_TIMELINE_PATH}/{share_token}"


class ShareService:
    """
    Creates, rotates and revokes the public share of a timeline.

    Every operation checks ownership first and raises TimelineNotFoundError
    for both unknown and foreign timelines. A timeline has at most one share
    row; rotation replaces its token in place so the previous link stops
    matching anything.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.timelines = TimelineService(db)

    async def get_share_for_timeline(self, timeline_id: int) -> Optional[PublicTimelineShare]:
        """Share row of a timeline, enabled or not."""
        result = await self.db.execute(
            select(PublicTimelineShare)
            .where(PublicTimelineShare.timeline_id == timeline_id)
        )
        return result.scalar_one_or_none()

    async def create_or_rotate_share(
        self,
        timeline_id: int,
        owner_id: int,
        show_vendors: bool = False,
        expires_at: Optional[datetime] = None,
    ) -> PublicTimelineShare:
        """
        Create the timeline's share, or renew it with a fresh token.

        Args:
            timeline_id: Timeline to share
            owner_id: Authenticated caller, must own the timeline
            show_vendors: Include vendor data in the public view
            expires_at: Expiry instant, None for never

        Returns:
            The enabled share row carrying the newly issued token
        """
        timeline = await self.timelines.get_owned_timeline(timeline_id, owner_id)
        timeline_id = timeline.id
        expires_at = to_naive_utc(expires_at)

        operation = "rotate"
        share = await self.get_share_for_timeline(timeline_id)
        if share is None:
            share = await self._insert_share(timeline_id, show_vendors, expires_at)
            if share is not None:
                operation = "create"
            else:
                # Lost the race to a concurrent first share
                share = await self.get_share_for_timeline(timeline_id)

        if operation == "rotate":
            share.share_token = generate_share_token()
            share.is_enabled = True
            share.show_vendors = show_vendors
            share.expires_at = expires_at

        await self.db.flush()
        await self.db.refresh(share)

        share_link_operations_total.labels(operation=operation).inc()
        log_info(
            "Share link created" if operation == "create" else "Share link rotated",
            event="share",
            share_id=share.id,
            timeline_id=timeline_id,
            show_vendors=show_vendors,
            expires_at=expires_at.isoformat() if expires_at else None,
        )
        return share

    async def _insert_share(
        self,
        timeline_id: int,
        show_vendors: bool,
        expires_at: Optional[datetime],
    ) -> Optional[PublicTimelineShare]:
        """
        Insert the first share of a timeline inside a savepoint.

        Returns None when another request inserted it first; only the
        savepoint is rolled back, the surrounding transaction stays usable.
        """
        share = PublicTimelineShare(
            timeline_id=timeline_id,
            share_token=generate_share_token(),
            is_enabled=True,
            show_vendors=show_vendors,
            expires_at=expires_at,
        )
        try:
            async with self.db.begin_nested():
                self.db.add(share)
        except IntegrityError:
            log_warning("Concurrent share insert", event="share", timeline_id=timeline_id)
            return None
        return share

    async def revoke(self, timeline_id: int, owner_id: int) -> None:
        """
        Disable the timeline's share. The row and its settings are kept.
        Revoking a timeline that is not shared does nothing.
        """
        timeline = await self.timelines.get_owned_timeline(timeline_id, owner_id)

        share = await self.get_share_for_timeline(timeline.id)
        if share is None or not share.is_enabled:
            return

        share.is_enabled = False
        await self.db.flush()

        share_link_operations_total.labels(operation="revoke").inc()
        log_info("Share link revoked", event="share", share_id=share.id, timeline_id=timeline.id)

    async def get_status(self, timeline_id: int, owner_id: int) -> ShareStatus:
        """Owner-facing share status, evaluated against the server clock now."""
        timeline = await self.timelines.get_owned_timeline(timeline_id, owner_id)
        share = await self.get_share_for_timeline(timeline.id)
        return resolve(share, self.clock())

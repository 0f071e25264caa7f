"""
Public timeline service: the read-only view served to anonymous share-link holders.
"""
from typing import Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.exceptions import ShareAccessDeniedError
from timeline_api.models.share import PublicTimelineShare
from timeline_api.models.timeline import Timeline, TimelineCategory, TimelineEvent
from timeline_api.models.vendor import Vendor, VendorType
from timeline_api.schemas.share import (
    PublicCategory,
    PublicEvent,
    PublicTimelineInfo,
    PublicTimelineView,
    PublicVendor,
)
from timeline_api.services.share_status import Clock, is_accessible, utc_now
from timeline_api.services.timeline import TimelineService
from timeline_api.utils.logger import log_warning
from timeline_api.utils.prometheus_metrics import orphaned_shares_total


class PublicTimelineService:
    """
    Builds the projection of a shared timeline.

    The projection is assembled field by field into the Public* schemas;
    nothing is copied from the ORM objects wholesale. It never mutates data.
    """

    def __init__(self, db: AsyncSession, clock: Clock = utc_now):
        self.db = db
        self.clock = clock
        self.timelines = TimelineService(db)

    async def get_share_by_token(self, token: str) -> Optional[PublicTimelineShare]:
        result = await self.db.execute(
            select(PublicTimelineShare)
            .where(PublicTimelineShare.share_token == token)
        )
        return result.scalar_one_or_none()

    async def project_for_token(self, token: str) -> PublicTimelineView:
        """
        Resolve a share token into the public view of its timeline.

        Raises:
            ShareAccessDeniedError: Unknown, revoked or expired token, or a
                share whose timeline no longer exists
        """
        share = await self.get_share_by_token(token)
        if not is_accessible(share, self.clock()):
            raise ShareAccessDeniedError()

        timeline = await self.db.get(Timeline, share.timeline_id)
        if timeline is None:
            orphaned_shares_total.inc()
            log_warning(
                "Orphaned public share",
                event="public",
                share_id=share.id,
                timeline_id=share.timeline_id,
            )
            raise ShareAccessDeniedError()

        categories = await self.timelines.get_categories(timeline.id)
        events = await self.timelines.get_events(timeline.id)

        include_vendors = share.show_vendors and timeline.vendors_enabled
        vendors: Optional[List[PublicVendor]] = None
        event_vendor_ids: Dict[int, List[int]] = {}
        if include_vendors:
            event_vendor_ids = await self.timelines.get_event_vendor_ids(timeline.id)
            vendors = await self._get_public_vendors(timeline.id, event_vendor_ids)

        return PublicTimelineView(
            timeline=PublicTimelineInfo(
                title=timeline.title,
                date=timeline.date,
                type=timeline.type,
                location=timeline.location,
                categories_enabled=timeline.categories_enabled,
            ),
            categories=[self._project_category(c) for c in categories],
            events=[
                self._project_event(
                    e, event_vendor_ids.get(e.id, []) if include_vendors else None
                )
                for e in events
            ],
            vendors=vendors,
        )

    async def _get_public_vendors(
        self,
        timeline_id: int,
        event_vendor_ids: Dict[int, List[int]],
    ) -> List[PublicVendor]:
        """
        Vendors linked to the timeline, followed by vendors linked only to
        its events, with their type name. Every id in an event's vendor_ids
        resolves to an entry of this list.
        """
        vendors = await self.timelines.get_timeline_vendors(timeline_id)
        listed = {v.id for v in vendors}
        event_only = {
            vendor_id
            for ids in event_vendor_ids.values()
            for vendor_id in ids
            if vendor_id not in listed
        }
        if event_only:
            result = await self.db.execute(
                select(Vendor).where(Vendor.id.in_(event_only)).order_by(Vendor.id)
            )
            vendors.extend(result.scalars().all())

        type_ids = {v.type_id for v in vendors if v.type_id is not None}
        type_names: Dict[int, str] = {}
        if type_ids:
            result = await self.db.execute(
                select(VendorType.id, VendorType.name).where(VendorType.id.in_(type_ids))
            )
            type_names = {type_id: name for type_id, name in result.all()}
        return [self._project_vendor(v, type_names.get(v.type_id)) for v in vendors]

    @staticmethod
    def _project_category(category: TimelineCategory) -> PublicCategory:
        return PublicCategory(
            id=category.id,
            name=category.name,
            description=category.description,
            order=category.order,
        )

    @staticmethod
    def _project_event(
        timeline_event: TimelineEvent,
        vendor_ids: Optional[List[int]],
    ) -> PublicEvent:
        return PublicEvent(
            id=timeline_event.id,
            category_id=timeline_event.category_id,
            start_time=timeline_event.start_time,
            end_time=timeline_event.end_time,
            duration=timeline_event.duration,
            title=timeline_event.title,
            description=timeline_event.description,
            location=timeline_event.location,
            type=timeline_event.type,
            order=timeline_event.order,
            vendor_ids=vendor_ids,
        )

    @staticmethod
    def _project_vendor(vendor: Vendor, type_name: Optional[str]) -> PublicVendor:
        # notes and custom fields stay private
        return PublicVendor(
            id=vendor.id,
            name=vendor.name,
            type_name=type_name,
            contact_name=vendor.contact_name,
            email=vendor.email,
            phone=vendor.phone,
            alternative_phone=vendor.alternative_phone,
            address=vendor.address,
        )

"""
Timeline service for managing timelines, their categories and events.
"""
from typing import Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.exceptions import (
    InvalidReferenceError,
    ResourceNotFoundError,
    TimelineNotFoundError,
)
from timeline_api.models.timeline import Timeline, TimelineCategory, TimelineEvent
from timeline_api.models.user import User
from timeline_api.models.vendor import TimelineEventVendor, TimelineVendor, Vendor
from timeline_api.schemas.timeline import (
    CategoryCreate,
    CategoryUpdate,
    EventCreate,
    EventOrder,
    EventUpdate,
    TimelineCreate,
    TimelineUpdate,
)
from timeline_api.utils.logger import log_info


class TimelineService:
    """
    Service for handling timeline operations.
    Every lookup is scoped to the owner; a timeline of another user is
    reported exactly like a missing one.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ============== Timeline CRUD ==============

    async def create_timeline(
        self,
        user: User,
        timeline_data: TimelineCreate,
    ) -> Timeline:
        """
        Create a new timeline.

        Args:
            user: Owner of the timeline
            timeline_data: Timeline creation data

        Returns:
            Created Timeline model
        """
        timeline = Timeline(user_id=user.id, **timeline_data.model_dump())

        self.db.add(timeline)
        await self.db.flush()
        await self.db.refresh(timeline)
        log_info("Timeline created", event="timeline", timeline_id=timeline.id, user_id=user.id)
        return timeline

    async def get_owned_timeline(self, timeline_id: int, user_id: int) -> Timeline:
        """
        Get a timeline owned by the given user.

        Raises:
            TimelineNotFoundError: If the timeline is missing or owned by someone else
        """
        result = await self.db.execute(
            select(Timeline)
            .where(Timeline.id == timeline_id)
            .where(Timeline.user_id == user_id)
        )
        timeline = result.scalar_one_or_none()
        if timeline is None:
            raise TimelineNotFoundError(timeline_id)
        return timeline

    async def get_user_timelines(
        self,
        user_id: int,
        skip: int = 0,
        limit: int = 50,
    ) -> List[Timeline]:
        """
        Get all timelines for a user, newest first.

        Args:
            user_id: User ID
            skip: Number of records to skip
            limit: Maximum number of records to return
        """
        result = await self.db.execute(
            select(Timeline)
            .where(Timeline.user_id == user_id)
            .order_by(Timeline.created_at.desc(), Timeline.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def update_timeline(
        self,
        timeline: Timeline,
        update_data: TimelineUpdate,
    ) -> Timeline:
        """Apply the provided fields to a timeline."""
        for field, value in update_data.model_dump(exclude_unset=True).items():
            if value is None and field in ("title", "date", "categories_enabled",
                                           "vendors_enabled", "custom_field_values"):
                # Not nullable
                continue
            setattr(timeline, field, value)

        await self.db.flush()
        await self.db.refresh(timeline)
        return timeline

    async def delete_timeline(self, timeline: Timeline) -> None:
        """Delete a timeline. The database cascades to its children and share."""
        await self.db.delete(timeline)
        await self.db.flush()
        log_info("Timeline deleted", event="timeline", timeline_id=timeline.id)

    # ============== Categories ==============

    async def get_categories(self, timeline_id: int) -> List[TimelineCategory]:
        """Categories of a timeline by ascending order, ties by insertion."""
        result = await self.db.execute(
            select(TimelineCategory)
            .where(TimelineCategory.timeline_id == timeline_id)
            .order_by(TimelineCategory.order, TimelineCategory.id)
        )
        return list(result.scalars().all())

    async def get_category(self, timeline: Timeline, category_id: int) -> TimelineCategory:
        result = await self.db.execute(
            select(TimelineCategory)
            .where(TimelineCategory.id == category_id)
            .where(TimelineCategory.timeline_id == timeline.id)
        )
        category = result.scalar_one_or_none()
        if category is None:
            raise ResourceNotFoundError("Category not found")
        return category

    async def create_category(
        self,
        timeline: Timeline,
        category_data: CategoryCreate,
    ) -> TimelineCategory:
        """Create a category. Without an explicit order it goes to the end."""
        order = category_data.order
        if order is None:
            order = await self._get_max_order(TimelineCategory, timeline.id) + 1

        category = TimelineCategory(
            timeline_id=timeline.id,
            name=category_data.name,
            description=category_data.description,
            order=order,
        )
        self.db.add(category)
        await self.db.flush()
        await self.db.refresh(category)
        return category

    async def update_category(
        self,
        category: TimelineCategory,
        update_data: CategoryUpdate,
    ) -> TimelineCategory:
        data = update_data.model_dump(exclude_unset=True)
        if data.get("name") is not None:
            category.name = data["name"]
        if "description" in data:
            category.description = data["description"]
        if data.get("order") is not None:
            category.order = data["order"]

        await self.db.flush()
        await self.db.refresh(category)
        return category

    async def delete_category(self, category: TimelineCategory) -> None:
        """Delete a category. Its events stay, with category_id cleared."""
        await self.db.execute(
            update(TimelineEvent)
            .where(TimelineEvent.category_id == category.id)
            .values(category_id=None)
        )
        await self.db.delete(category)
        await self.db.flush()

    # ============== Events ==============

    async def get_events(self, timeline_id: int) -> List[TimelineEvent]:
        """Events of a timeline by ascending order across the whole timeline."""
        result = await self.db.execute(
            select(TimelineEvent)
            .where(TimelineEvent.timeline_id == timeline_id)
            .order_by(TimelineEvent.order, TimelineEvent.id)
        )
        return list(result.scalars().all())

    async def get_event(self, timeline: Timeline, event_id: int) -> TimelineEvent:
        result = await self.db.execute(
            select(TimelineEvent)
            .where(TimelineEvent.id == event_id)
            .where(TimelineEvent.timeline_id == timeline.id)
        )
        timeline_event = result.scalar_one_or_none()
        if timeline_event is None:
            raise ResourceNotFoundError("Event not found")
        return timeline_event

    async def create_event(
        self,
        timeline: Timeline,
        event_data: EventCreate,
    ) -> TimelineEvent:
        """
        Create an event.

        Raises:
            InvalidReferenceError: If category_id belongs to another timeline
        """
        await self._check_category(timeline, event_data.category_id)

        data = event_data.model_dump()
        if data["order"] is None:
            data["order"] = await self._get_max_order(TimelineEvent, timeline.id) + 1

        timeline_event = TimelineEvent(timeline_id=timeline.id, **data)
        self.db.add(timeline_event)
        await self.db.flush()
        await self.db.refresh(timeline_event)
        return timeline_event

    async def update_event(
        self,
        timeline: Timeline,
        timeline_event: TimelineEvent,
        update_data: EventUpdate,
    ) -> TimelineEvent:
        data = update_data.model_dump(exclude_unset=True)
        if "category_id" in data:
            await self._check_category(timeline, data["category_id"])

        nullable = {"description", "location", "category_id"}
        for field, value in data.items():
            if value is None and field not in nullable:
                continue
            setattr(timeline_event, field, value)

        await self.db.flush()
        await self.db.refresh(timeline_event)
        return timeline_event

    async def delete_event(self, timeline_event: TimelineEvent) -> None:
        await self.db.delete(timeline_event)
        await self.db.flush()

    async def reorder_events(
        self,
        timeline: Timeline,
        orders: List[EventOrder],
    ) -> List[TimelineEvent]:
        """
        Assign new order values to events of a timeline.

        Raises:
            ResourceNotFoundError: If an id is not an event of this timeline
        """
        events = {e.id: e for e in await self.get_events(timeline.id)}
        for entry in orders:
            if entry.id not in events:
                raise ResourceNotFoundError("Event not found")
        for entry in orders:
            events[entry.id].order = entry.order

        await self.db.flush()
        return await self.get_events(timeline.id)

    # ============== Vendor links ==============

    async def get_timeline_vendors(self, timeline_id: int) -> List[Vendor]:
        """Vendors linked to a timeline, in link order."""
        result = await self.db.execute(
            select(Vendor)
            .join(TimelineVendor, TimelineVendor.vendor_id == Vendor.id)
            .where(TimelineVendor.timeline_id == timeline_id)
            .order_by(TimelineVendor.id)
        )
        return list(result.scalars().all())

    async def get_event_vendor_ids(self, timeline_id: int) -> Dict[int, List[int]]:
        """Map of event id to the ids of its linked vendors."""
        result = await self.db.execute(
            select(TimelineEventVendor.timeline_event_id, TimelineEventVendor.vendor_id)
            .join(TimelineEvent, TimelineEvent.id == TimelineEventVendor.timeline_event_id)
            .where(TimelineEvent.timeline_id == timeline_id)
            .order_by(TimelineEventVendor.id)
        )
        mapping: Dict[int, List[int]] = {}
        for event_id, vendor_id in result.all():
            mapping.setdefault(event_id, []).append(vendor_id)
        return mapping

    async def set_timeline_vendors(
        self,
        timeline: Timeline,
        vendor_ids: List[int],
    ) -> List[Vendor]:
        """Replace the vendor set of a timeline."""
        vendor_ids = await self._check_vendors(timeline.user_id, vendor_ids)

        await self.db.execute(
            delete(TimelineVendor).where(TimelineVendor.timeline_id == timeline.id)
        )
        for vendor_id in vendor_ids:
            self.db.add(TimelineVendor(timeline_id=timeline.id, vendor_id=vendor_id))
        await self.db.flush()
        return await self.get_timeline_vendors(timeline.id)

    async def set_event_vendors(
        self,
        timeline: Timeline,
        timeline_event: TimelineEvent,
        vendor_ids: List[int],
    ) -> List[int]:
        """Replace the vendor set of a single event."""
        vendor_ids = await self._check_vendors(timeline.user_id, vendor_ids)

        await self.db.execute(
            delete(TimelineEventVendor)
            .where(TimelineEventVendor.timeline_event_id == timeline_event.id)
        )
        for vendor_id in vendor_ids:
            self.db.add(TimelineEventVendor(
                timeline_event_id=timeline_event.id,
                vendor_id=vendor_id,
            ))
        await self.db.flush()
        return vendor_ids

    # ============== Helpers ==============

    async def _get_max_order(self, model, timeline_id: int) -> int:
        """Get the maximum order value among a timeline's categories or events."""
        result = await self.db.execute(
            select(func.max(model.order)).where(model.timeline_id == timeline_id)
        )
        max_order = result.scalar()
        return -1 if max_order is None else max_order

    async def _check_category(self, timeline: Timeline, category_id: Optional[int]) -> None:
        if category_id is None:
            return
        result = await self.db.execute(
            select(TimelineCategory.id)
            .where(TimelineCategory.id == category_id)
            .where(TimelineCategory.timeline_id == timeline.id)
        )
        if result.scalar_one_or_none() is None:
            raise InvalidReferenceError("Category does not belong to this timeline")

    async def _check_vendors(self, user_id: int, vendor_ids: List[int]) -> List[int]:
        """De-duplicate vendor ids and make sure the user owns all of them."""
        unique_ids = list(dict.fromkeys(vendor_ids))
        if not unique_ids:
            return []
        result = await self.db.execute(
            select(Vendor.id)
            .where(Vendor.id.in_(unique_ids))
            .where(Vendor.user_id == user_id)
        )
        owned = {row[0] for row in result.all()}
        if owned != set(unique_ids):
            raise InvalidReferenceError("Unknown vendor")
        return unique_ids

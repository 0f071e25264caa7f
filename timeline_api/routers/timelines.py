"""
Timelines router: timeline, category, event and vendor-link management.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeline_api.database import get_db
from timeline_api.dependencies.auth import get_current_active_user
from timeline_api.dependencies.timeline import get_owned_timeline
from timeline_api.exceptions import InvalidReferenceError, ResourceNotFoundError
from timeline_api.models.timeline import Timeline
from timeline_api.models.user import User
from timeline_api.schemas.timeline import (
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    EventCreate,
    EventReorder,
    EventResponse,
    EventUpdate,
    TimelineCreate,
    TimelineDetail,
    TimelineResponse,
    TimelineUpdate,
)
from timeline_api.schemas.vendor import VendorAssignment, VendorResponse
from timeline_api.services.timeline import TimelineService
from timeline_api.utils.prometheus_metrics import timeline_operations_total

router = APIRouter(prefix="/timelines", tags=["Timelines"])


def _not_found(exc: ResourceNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _bad_reference(exc: InvalidReferenceError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.post(
    "",
    response_model=TimelineResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new timeline",
)
async def create_timeline(
    timeline_data: TimelineCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> TimelineResponse:
    """
    Create a new timeline.

    - **title**: Timeline title (required)
    - **date**: Date of the event (required)
    - **type** / **location**: Optional
    - **categories_enabled** / **vendors_enabled**: Display switches
    """
    timeline = await TimelineService(db).create_timeline(current_user, timeline_data)
    timeline_operations_total.labels(operation="create", result="success").inc()
    return TimelineResponse.model_validate(timeline)


@router.get(
    "",
    response_model=List[TimelineResponse],
    summary="Get user's timelines",
)
async def get_timelines(
    skip: int = 0,
    limit: int = 50,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> List[TimelineResponse]:
    """
    Get all timelines of the current user, newest first.

    - **skip**: Number of timelines to skip (pagination)
    - **limit**: Maximum number of timelines to return (max 100)
    """
    limit = min(limit, 100)
    timelines = await TimelineService(db).get_user_timelines(current_user.id, skip, limit)
    return [TimelineResponse.model_validate(t) for t in timelines]


@router.get(
    "/{timeline_id}",
    response_model=TimelineDetail,
    summary="Get timeline with categories and events",
)
async def get_timeline(
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> TimelineDetail:
    service = TimelineService(db)
    categories = await service.get_categories(timeline.id)
    events = await service.get_events(timeline.id)

    return TimelineDetail(
        **TimelineResponse.model_validate(timeline).model_dump(),
        categories=[CategoryResponse.model_validate(c) for c in categories],
        events=[EventResponse.model_validate(e) for e in events],
    )


@router.patch(
    "/{timeline_id}",
    response_model=TimelineResponse,
    summary="Update timeline",
)
async def update_timeline(
    update_data: TimelineUpdate,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> TimelineResponse:
    updated = await TimelineService(db).update_timeline(timeline, update_data)
    timeline_operations_total.labels(operation="update", result="success").inc()
    return TimelineResponse.model_validate(updated)


@router.delete(
    "/{timeline_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete timeline",
)
async def delete_timeline(
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Delete a timeline together with its categories, events, vendor links
    and public share.
    """
    await TimelineService(db).delete_timeline(timeline)
    timeline_operations_total.labels(operation="delete", result="success").inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Categories ==============


@router.get(
    "/{timeline_id}/categories",
    response_model=List[CategoryResponse],
    summary="List categories",
)
async def get_categories(
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> List[CategoryResponse]:
    categories = await TimelineService(db).get_categories(timeline.id)
    return [CategoryResponse.model_validate(c) for c in categories]


@router.post(
    "/{timeline_id}/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    category_data: CategoryCreate,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """
    Create a category.

    - **order**: Display position; appended after the last category when omitted
    """
    category = await TimelineService(db).create_category(timeline, category_data)
    return CategoryResponse.model_validate(category)


@router.patch(
    "/{timeline_id}/categories/{category_id}",
    response_model=CategoryResponse,
    summary="Update category",
)
async def update_category(
    category_id: int,
    update_data: CategoryUpdate,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    service = TimelineService(db)
    try:
        category = await service.get_category(timeline, category_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    category = await service.update_category(category, update_data)
    return CategoryResponse.model_validate(category)


@router.delete(
    "/{timeline_id}/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete category",
)
async def delete_category(
    category_id: int,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """
    Delete a category. Its events are kept and become uncategorized.
    """
    service = TimelineService(db)
    try:
        category = await service.get_category(timeline, category_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    await service.delete_category(category)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Events ==============


@router.get(
    "/{timeline_id}/events",
    response_model=List[EventResponse],
    summary="List events",
)
async def get_events(
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> List[EventResponse]:
    events = await TimelineService(db).get_events(timeline.id)
    return [EventResponse.model_validate(e) for e in events]


@router.post(
    "/{timeline_id}/events",
    response_model=EventResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create event",
)
async def create_event(
    event_data: EventCreate,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    """
    Create an event.

    - **start_time** / **end_time**: HH:MM wall-clock times
    - **category_id**: Optional, must be a category of this timeline
    - **order**: Display position; appended at the end when omitted
    """
    try:
        timeline_event = await TimelineService(db).create_event(timeline, event_data)
    except InvalidReferenceError as e:
        raise _bad_reference(e)
    return EventResponse.model_validate(timeline_event)


@router.put(
    "/{timeline_id}/events/reorder",
    response_model=List[EventResponse],
    summary="Reorder events",
)
async def reorder_events(
    reorder: EventReorder,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> List[EventResponse]:
    try:
        events = await TimelineService(db).reorder_events(timeline, reorder.events)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    return [EventResponse.model_validate(e) for e in events]


@router.patch(
    "/{timeline_id}/events/{event_id}",
    response_model=EventResponse,
    summary="Update event",
)
async def update_event(
    event_id: int,
    update_data: EventUpdate,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    service = TimelineService(db)
    try:
        timeline_event = await service.get_event(timeline, event_id)
        timeline_event = await service.update_event(timeline, timeline_event, update_data)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    except InvalidReferenceError as e:
        raise _bad_reference(e)
    return EventResponse.model_validate(timeline_event)


@router.delete(
    "/{timeline_id}/events/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
)
async def delete_event(
    event_id: int,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> Response:
    service = TimelineService(db)
    try:
        timeline_event = await service.get_event(timeline, event_id)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    await service.delete_event(timeline_event)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ============== Vendor links ==============


@router.get(
    "/{timeline_id}/vendors",
    response_model=List[VendorResponse],
    summary="List vendors linked to a timeline",
)
async def get_timeline_vendors(
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> List[VendorResponse]:
    vendors = await TimelineService(db).get_timeline_vendors(timeline.id)
    return [VendorResponse.model_validate(v) for v in vendors]


@router.put(
    "/{timeline_id}/vendors",
    response_model=List[VendorResponse],
    summary="Replace the vendors linked to a timeline",
)
async def set_timeline_vendors(
    assignment: VendorAssignment,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> List[VendorResponse]:
    """
    - **vendor_ids**: Vendors of the current user; an empty list unlinks all
    """
    try:
        vendors = await TimelineService(db).set_timeline_vendors(timeline, assignment.vendor_ids)
    except InvalidReferenceError as e:
        raise _bad_reference(e)
    return [VendorResponse.model_validate(v) for v in vendors]


@router.put(
    "/{timeline_id}/events/{event_id}/vendors",
    response_model=VendorAssignment,
    summary="Replace the vendors linked to an event",
)
async def set_event_vendors(
    event_id: int,
    assignment: VendorAssignment,
    timeline: Timeline = Depends(get_owned_timeline),
    db: AsyncSession = Depends(get_db),
) -> VendorAssignment:
    service = TimelineService(db)
    try:
        timeline_event = await service.get_event(timeline, event_id)
        vendor_ids = await service.set_event_vendors(timeline, timeline_event, assignment.vendor_ids)
    except ResourceNotFoundError as e:
        raise _not_found(e)
    except InvalidReferenceError as e:
        raise _bad_reference(e)
    return VendorAssignment(vendor_ids=vendor_ids)

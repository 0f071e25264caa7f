"""Public projection of shared timelines"""
import logging
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from prometheus_client import REGISTRY

from timeline_api.exceptions import ShareAccessDeniedError
from timeline_api.models.share import PublicTimelineShare
from timeline_api.schemas.timeline import CategoryCreate, EventCreate, TimelineUpdate
from timeline_api.schemas.vendor import VendorCreate, VendorTypeCreate
from timeline_api.services.public_timeline import PublicTimelineService
from timeline_api.services.share import ShareService
from timeline_api.services.timeline import TimelineService
from timeline_api.services.vendor import VendorService


def event_data(title: str, order=None, category_id=None) -> EventCreate:
    return EventCreate(
        start_time="14:00",
        end_time="14:30",
        duration="30m",
        title=title,
        order=order,
        category_id=category_id,
    )


@pytest.fixture
def public_service(test_db, fixed_clock):
    return PublicTimelineService(test_db, clock=fixed_clock)


@pytest.fixture
async def populated_timeline(test_db, test_user, timeline):
    """Timeline with a category, two events and a linked vendor carrying private data"""
    timelines = TimelineService(test_db)
    vendors = VendorService(test_db)

    category = await timelines.create_category(timeline, CategoryCreate(name="Ceremony"))
    first = await timelines.create_event(timeline, event_data("Vows", category_id=category.id))
    await timelines.create_event(timeline, event_data("Photos"))

    vendor_type = await vendors.create_vendor_type(test_user, VendorTypeCreate(name="Florist"))
    vendor = await vendors.create_vendor(
        test_user,
        VendorCreate(
            name="Bloom & Co",
            type_id=vendor_type.id,
            phone="555-0100",
            notes="Owes us a refund",
            custom_field_values={"contract_value": 4200},
        ),
    )
    await timelines.set_timeline_vendors(timeline, [vendor.id])
    await timelines.set_event_vendors(timeline, first, [vendor.id])
    return timeline


async def share_timeline(test_db, fixed_clock, timeline, owner_id, **kwargs) -> str:
    share = await ShareService(test_db, clock=fixed_clock).create_or_rotate_share(
        timeline.id, owner_id, **kwargs
    )
    return share.share_token


class TestVendorVisibility:
    @pytest.mark.parametrize(
        "show_vendors,vendors_enabled,expect_vendors",
        [
            (True, True, True),
            (True, False, False),
            (False, True, False),
            (False, False, False),
        ],
    )
    async def test_vendors_require_both_switches(
        self,
        test_db,
        fixed_clock,
        test_user,
        populated_timeline,
        public_service,
        show_vendors,
        vendors_enabled,
        expect_vendors,
    ):
        await TimelineService(test_db).update_timeline(
            populated_timeline, TimelineUpdate(vendors_enabled=vendors_enabled)
        )
        token = await share_timeline(
            test_db, fixed_clock, populated_timeline, test_user.id, show_vendors=show_vendors
        )

        view = await public_service.project_for_token(token)
        body = view.model_dump(mode="json")

        if expect_vendors:
            assert [v["name"] for v in body["vendors"]] == ["Bloom & Co"]
            assert body["vendors"][0]["type_name"] == "Florist"
            vows = next(e for e in body["events"] if e["title"] == "Vows")
            assert vows["vendor_ids"] == [body["vendors"][0]["id"]]
        else:
            assert view.vendors is None
            assert "vendors" not in body
            assert all("vendor_ids" not in e for e in body["events"])

    async def test_private_vendor_fields_are_never_projected(
        self, test_db, fixed_clock, test_user, populated_timeline, public_service
    ):
        await TimelineService(test_db).update_timeline(
            populated_timeline, TimelineUpdate(vendors_enabled=True)
        )
        token = await share_timeline(
            test_db, fixed_clock, populated_timeline, test_user.id, show_vendors=True
        )

        body = (await public_service.project_for_token(token)).model_dump(mode="json")
        vendor = body["vendors"][0]

        assert "notes" not in vendor
        assert "custom_field_values" not in vendor
        assert "user_id" not in vendor
        assert "Owes us a refund" not in str(body)
        assert "4200" not in str(body)

    async def test_event_only_vendor_is_listed(
        self, test_db, fixed_clock, test_user, timeline, public_service
    ):
        timelines = TimelineService(test_db)
        vendors = VendorService(test_db)
        await timelines.update_timeline(timeline, TimelineUpdate(vendors_enabled=True))

        venue = await vendors.create_vendor(test_user, VendorCreate(name="Lakeside Hall"))
        band = await vendors.create_vendor(
            test_user, VendorCreate(name="The Swing Kids", notes="Cash only")
        )
        first_dance = await timelines.create_event(timeline, event_data("First dance"))
        await timelines.set_timeline_vendors(timeline, [venue.id])
        await timelines.set_event_vendors(timeline, first_dance, [band.id])

        token = await share_timeline(
            test_db, fixed_clock, timeline, test_user.id, show_vendors=True
        )
        body = (await public_service.project_for_token(token)).model_dump(mode="json")

        listed_ids = {v["id"] for v in body["vendors"]}
        assert [v["name"] for v in body["vendors"]] == ["Lakeside Hall", "The Swing Kids"]
        for event in body["events"]:
            assert set(event["vendor_ids"]) <= listed_ids
        assert body["events"][0]["vendor_ids"] == [band.id]
        assert "Cash only" not in str(body)


class TestProjection:
    async def test_timeline_fields_are_whitelisted(
        self, test_db, fixed_clock, test_user, populated_timeline, public_service
    ):
        token = await share_timeline(test_db, fixed_clock, populated_timeline, test_user.id)

        body = (await public_service.project_for_token(token)).model_dump(mode="json")

        assert set(body["timeline"]) == {
            "title", "date", "type", "location", "categories_enabled",
        }
        assert body["timeline"]["title"] == "Wedding Day"
        assert token not in str(body)

    async def test_categories_and_events_follow_order(
        self, test_db, fixed_clock, test_user, timeline, public_service
    ):
        timelines = TimelineService(test_db)
        for name, order in (("Reception", 2), ("Prep", 0), ("Ceremony", 1)):
            await timelines.create_category(timeline, CategoryCreate(name=name, order=order))
        await timelines.create_event(timeline, event_data("Late", order=5))
        await timelines.create_event(timeline, event_data("Early", order=1))

        token = await share_timeline(test_db, fixed_clock, timeline, test_user.id)
        view = await public_service.project_for_token(token)

        assert [c.order for c in view.categories] == [0, 1, 2]
        assert [c.name for c in view.categories] == ["Prep", "Ceremony", "Reception"]
        assert [e.title for e in view.events] == ["Early", "Late"]

    async def test_projection_does_not_modify_share(
        self, test_db, fixed_clock, test_user, timeline, public_service
    ):
        token = await share_timeline(test_db, fixed_clock, timeline, test_user.id)

        await public_service.project_for_token(token)
        await public_service.project_for_token(token)

        share = await ShareService(test_db).get_share_for_timeline(timeline.id)
        assert share.share_token == token
        assert share.is_enabled is True


class TestDenial:
    async def test_unknown_token(self, public_service):
        with pytest.raises(ShareAccessDeniedError) as exc_info:
            await public_service.project_for_token("does-not-exist")
        assert str(exc_info.value) == "Timeline share not found"

    async def test_expired_token(self, test_db, fixed_clock, test_user, timeline, public_service):
        token = await share_timeline(
            test_db, fixed_clock, timeline, test_user.id,
            expires_at=fixed_clock() - timedelta(seconds=1),
        )

        with pytest.raises(ShareAccessDeniedError):
            await public_service.project_for_token(token)

    async def test_token_expires_as_clock_advances(self, test_db, fixed_clock, test_user, timeline):
        token = await share_timeline(
            test_db, fixed_clock, timeline, test_user.id,
            expires_at=fixed_clock() + timedelta(minutes=10),
        )

        before = PublicTimelineService(test_db, clock=fixed_clock)
        after = PublicTimelineService(
            test_db, clock=lambda: fixed_clock() + timedelta(minutes=11)
        )

        assert (await before.project_for_token(token)).timeline.title == "Wedding Day"
        with pytest.raises(ShareAccessDeniedError):
            await after.project_for_token(token)

    async def test_orphaned_share_is_denied_and_reported(self, fixed_clock, caplog):
        share = PublicTimelineShare(
            id=7,
            timeline_id=42,
            share_token="orphan-token",
            is_enabled=True,
            show_vendors=False,
            expires_at=None,
        )
        result = MagicMock()
        result.scalar_one_or_none.return_value = share
        db = AsyncMock()
        db.execute.return_value = result
        db.get.return_value = None

        before = REGISTRY.get_sample_value("timeline_api_orphaned_shares_total") or 0
        caplog.set_level(logging.WARNING, logger="timeline_api")

        with pytest.raises(ShareAccessDeniedError):
            await PublicTimelineService(db, clock=fixed_clock).project_for_token("orphan-token")

        after = REGISTRY.get_sample_value("timeline_api_orphaned_shares_total")
        assert after == before + 1
        assert any(r.getMessage() == "Orphaned public share" for r in caplog.records)

"""Owner-side timeline, category and event endpoints"""


async def create_timeline(client, headers, title="Wedding Day"):
    response = await client.post(
        "/timelines",
        json={"title": title, "date": "2026-06-20", "categories_enabled": True},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


def event_payload(title, **overrides):
    payload = {
        "start_time": "15:00",
        "end_time": "15:30",
        "duration": "30m",
        "title": title,
    }
    payload.update(overrides)
    return payload


class TestTimelines:
    async def test_create_and_get(self, client, auth_headers, test_user):
        created = await create_timeline(client, auth_headers)

        assert created["user_id"] == test_user.id
        assert created["categories_enabled"] is True
        assert created["vendors_enabled"] is False

        response = await client.get(f"/timelines/{created['id']}", headers=auth_headers)
        assert response.status_code == 200
        detail = response.json()
        assert detail["title"] == "Wedding Day"
        assert detail["categories"] == []
        assert detail["events"] == []

    async def test_list_only_own_timelines(self, client, auth_headers, other_auth_headers):
        await create_timeline(client, auth_headers, "Mine")
        await create_timeline(client, other_auth_headers, "Theirs")

        response = await client.get("/timelines", headers=auth_headers)

        assert response.status_code == 200
        assert [t["title"] for t in response.json()] == ["Mine"]

    async def test_patch(self, client, auth_headers):
        created = await create_timeline(client, auth_headers)

        response = await client.patch(
            f"/timelines/{created['id']}",
            json={"location": "Garden", "vendors_enabled": True},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["location"] == "Garden"
        assert response.json()["vendors_enabled"] is True
        assert response.json()["title"] == "Wedding Day"

    async def test_delete(self, client, auth_headers):
        created = await create_timeline(client, auth_headers)

        response = await client.delete(f"/timelines/{created['id']}", headers=auth_headers)
        assert response.status_code == 204

        response = await client.get(f"/timelines/{created['id']}", headers=auth_headers)
        assert response.status_code == 404

    async def test_foreign_timeline_looks_missing(self, client, auth_headers, other_auth_headers):
        created = await create_timeline(client, auth_headers)

        foreign = await client.get(f"/timelines/{created['id']}", headers=other_auth_headers)
        missing = await client.get("/timelines/9999", headers=other_auth_headers)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json() == {"detail": "Timeline not found"}

    async def test_requires_authentication(self, client):
        response = await client.get("/timelines")

        assert response.status_code == 401


class TestCategories:
    async def test_default_order_appends(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]

        orders = []
        for name in ("Prep", "Ceremony", "Reception"):
            response = await client.post(
                f"/timelines/{tid}/categories", json={"name": name}, headers=auth_headers
            )
            assert response.status_code == 201
            orders.append(response.json()["order"])

        assert orders == [0, 1, 2]

    async def test_list_is_ordered(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        for name, order in (("C", 2), ("A", 0), ("B", 1)):
            await client.post(
                f"/timelines/{tid}/categories",
                json={"name": name, "order": order},
                headers=auth_headers,
            )

        response = await client.get(f"/timelines/{tid}/categories", headers=auth_headers)

        assert [c["name"] for c in response.json()] == ["A", "B", "C"]

    async def test_patch(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        category = (
            await client.post(f"/timelines/{tid}/categories", json={"name": "Prep"}, headers=auth_headers)
        ).json()

        response = await client.patch(
            f"/timelines/{tid}/categories/{category['id']}",
            json={"name": "Getting ready", "order": 4},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Getting ready"
        assert response.json()["order"] == 4

    async def test_delete_keeps_events_uncategorized(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        category = (
            await client.post(f"/timelines/{tid}/categories", json={"name": "Prep"}, headers=auth_headers)
        ).json()
        event = (
            await client.post(
                f"/timelines/{tid}/events",
                json=event_payload("Hair", category_id=category["id"]),
                headers=auth_headers,
            )
        ).json()
        assert event["category_id"] == category["id"]

        response = await client.delete(
            f"/timelines/{tid}/categories/{category['id']}", headers=auth_headers
        )
        assert response.status_code == 204

        events = (await client.get(f"/timelines/{tid}/events", headers=auth_headers)).json()
        assert [(e["title"], e["category_id"]) for e in events] == [("Hair", None)]

    async def test_unknown_category(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]

        response = await client.patch(
            f"/timelines/{tid}/categories/9999", json={"name": "x"}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json() == {"detail": "Category not found"}


class TestEvents:
    async def test_create_appends_and_lists_in_order(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]

        for title in ("Ceremony", "Dinner"):
            response = await client.post(
                f"/timelines/{tid}/events", json=event_payload(title), headers=auth_headers
            )
            assert response.status_code == 201

        events = (await client.get(f"/timelines/{tid}/events", headers=auth_headers)).json()
        assert [(e["title"], e["order"]) for e in events] == [("Ceremony", 0), ("Dinner", 1)]
        assert events[0]["type"] == "event"

    async def test_invalid_time_is_rejected(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]

        response = await client.post(
            f"/timelines/{tid}/events",
            json=event_payload("Late", start_time="25:00"),
            headers=auth_headers,
        )

        assert response.status_code == 422

    async def test_category_of_another_timeline_is_rejected(self, client, auth_headers):
        first = (await create_timeline(client, auth_headers, "First"))["id"]
        second = (await create_timeline(client, auth_headers, "Second"))["id"]
        category = (
            await client.post(f"/timelines/{first}/categories", json={"name": "Prep"}, headers=auth_headers)
        ).json()

        response = await client.post(
            f"/timelines/{second}/events",
            json=event_payload("Hair", category_id=category["id"]),
            headers=auth_headers,
        )

        assert response.status_code == 400

    async def test_patch_and_delete(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        event = (
            await client.post(f"/timelines/{tid}/events", json=event_payload("Toast"), headers=auth_headers)
        ).json()

        response = await client.patch(
            f"/timelines/{tid}/events/{event['id']}",
            json={"end_time": "16:00", "description": "Best man"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["end_time"] == "16:00"
        assert response.json()["description"] == "Best man"

        response = await client.delete(f"/timelines/{tid}/events/{event['id']}", headers=auth_headers)
        assert response.status_code == 204
        assert (await client.get(f"/timelines/{tid}/events", headers=auth_headers)).json() == []

    async def test_reorder(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        ids = []
        for title in ("A", "B", "C"):
            ids.append((
                await client.post(f"/timelines/{tid}/events", json=event_payload(title), headers=auth_headers)
            ).json()["id"])

        response = await client.put(
            f"/timelines/{tid}/events/reorder",
            json={"events": [{"id": ids[0], "order": 2}, {"id": ids[2], "order": 0}]},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert [e["title"] for e in response.json()] == ["C", "B", "A"]

    async def test_reorder_rejects_foreign_event(self, client, auth_headers):
        first = (await create_timeline(client, auth_headers, "First"))["id"]
        second = (await create_timeline(client, auth_headers, "Second"))["id"]
        event = (
            await client.post(f"/timelines/{first}/events", json=event_payload("A"), headers=auth_headers)
        ).json()

        response = await client.put(
            f"/timelines/{second}/events/reorder",
            json={"events": [{"id": event["id"], "order": 3}]},
            headers=auth_headers,
        )

        assert response.status_code == 404


class TestVendorLinks:
    async def test_timeline_and_event_vendor_sets(self, client, auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        vendor = (await client.post("/vendors", json={"name": "DJ Sam"}, headers=auth_headers)).json()
        event = (
            await client.post(f"/timelines/{tid}/events", json=event_payload("Dance"), headers=auth_headers)
        ).json()

        response = await client.put(
            f"/timelines/{tid}/vendors",
            json={"vendor_ids": [vendor["id"], vendor["id"]]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert [v["id"] for v in response.json()] == [vendor["id"]]

        response = await client.put(
            f"/timelines/{tid}/events/{event['id']}/vendors",
            json={"vendor_ids": [vendor["id"]]},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json() == {"vendor_ids": [vendor["id"]]}

        response = await client.put(
            f"/timelines/{tid}/vendors", json={"vendor_ids": []}, headers=auth_headers
        )
        assert response.json() == []
        assert (await client.get(f"/timelines/{tid}/vendors", headers=auth_headers)).json() == []

    async def test_foreign_vendor_is_rejected(self, client, auth_headers, other_auth_headers):
        tid = (await create_timeline(client, auth_headers))["id"]
        foreign = (await client.post("/vendors", json={"name": "Not yours"}, headers=other_auth_headers)).json()

        response = await client.put(
            f"/timelines/{tid}/vendors",
            json={"vendor_ids": [foreign["id"]]},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"detail": "Unknown vendor"}

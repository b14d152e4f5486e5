from __future__ import annotations


def _regular(seed, **overrides) -> dict:
    payload = {
        "batch_id": seed["batch"]["id"],
        "time_slot_id": seed["morning"]["id"],
        "day_of_week": "MONDAY",
        "subject_id": seed["design"]["id"],
        "faculty_id": seed["faculty"]["id"],
    }
    payload.update(overrides)
    return payload


def test_events_expand_recurring_entries_over_eight_weeks(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()

    body = client.get("/api/calendar/events", params={"reference_date": "2024-03-13"}).json()
    assert body["referenceDate"] == "2024-03-13"
    assert body["skippedEntryIds"] == []

    events = body["events"]
    assert len(events) == 8
    assert len({e["id"] for e in events}) == 8
    assert events[0]["id"] == f"{entry['id']}-2024-02-12"
    assert events[-1]["id"] == f"{entry['id']}-2024-04-01"

    # today is 2024-03-15: Feb 12 is 32 days back, Feb 19 only 25.
    oldest, next_oldest = events[0], events[1]
    assert oldest["editable"] is False
    assert oldest["startEditable"] is False
    assert "past-event" in oldest["className"]
    assert oldest["extendedProps"]["isPastDate"] is True
    assert next_oldest["editable"] is True
    assert next_oldest["className"] is None
    assert next_oldest["extendedProps"]["timetableEntryId"] == entry["id"]
    assert next_oldest["title"] == "Design - Prof. Rao"


def test_events_default_reference_is_today(client, seed):
    client.post("/api/timetable/entries", json=_regular(seed))
    body = client.get("/api/calendar/events").json()
    assert body["referenceDate"] == "2024-03-15"


def test_week_shows_only_dated_entries_by_default(client, seed):
    dated = client.post(
        "/api/timetable/entries",
        json=_regular(seed, date="2024-03-15", time_slot_id=seed["afternoon"]["id"]),
    ).json()
    client.post("/api/timetable/entries", json=_regular(seed))
    client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-09", time_slot_id=seed["afternoon"]["id"]))

    body = client.get("/api/calendar/week", params={"selected_date": "2024-03-13"}).json()
    assert body["weekStart"].startswith("2024-03-10T00:00:00")
    assert body["weekEnd"].startswith("2024-03-16T23:59:59.999")
    assert [e["id"] for e in body["events"]] == [f"{dated['id']}-2024-03-15"]

    event = body["events"][0]
    assert event["start"] == "2024-03-15T14:15:00"
    assert event["end"] == "2024-03-15T15:05:00"
    assert event["editable"] is True


def test_week_can_include_recurring_entries(client, seed):
    weekly = client.post("/api/timetable/entries", json=_regular(seed)).json()
    body = client.get(
        "/api/calendar/week",
        params={"selected_date": "2024-03-13", "include_recurring": True},
    ).json()
    assert [e["id"] for e in body["events"]] == [f"{weekly['id']}-2024-03-11"]


def test_custom_events_get_the_subtle_palette(client, seed):
    client.post(
        "/api/timetable/entries",
        json={
            "batch_id": seed["batch"]["id"],
            "time_slot_id": seed["afternoon"]["id"],
            "day_of_week": "THURSDAY",
            "date": "2024-03-14",
            "is_custom_event": True,
            "custom_event_title": "Studio Jury",
            "custom_event_color": "#22c55e",
        },
    )
    event = client.get("/api/calendar/week", params={"selected_date": "2024-03-14"}).json()["events"][0]
    assert event["title"] == "Studio Jury"
    assert "custom-event" in event["className"]
    assert event["backgroundColor"] == "#fafafa"
    assert event["extendedProps"]["customEventColor"] == "#22c55e"
    assert event["extendedProps"]["isCustomEvent"] is True


def test_batch_filter(client, seed):
    client.post("/api/timetable/entries", json=_regular(seed))
    other = client.post("/api/batches/", json={"name": "BDes UX Sem 3", "semester": 3}).json()
    body = client.get("/api/calendar/events", params={"batch_id": other["id"]}).json()
    assert body["events"] == []


def test_demo_seed_renders_a_full_week(client):
    from datetime import date

    from core.db import SessionLocal
    from migrations.dev_seed_demo_timetable import seed

    with SessionLocal() as db:
        assert seed(db, anchor=date(2024, 3, 13)) == 4
        db.commit()

    body = client.get(
        "/api/calendar/week",
        params={"selected_date": "2024-03-13", "include_recurring": True},
    ).json()
    titles = [e["title"] for e in body["events"]]
    assert titles == [
        "Studio Open House",
        "Design Fundamentals - Prof. Smith",
        "Typography - Prof. Johnson",
        "Color Theory - Prof. Davis",
    ]

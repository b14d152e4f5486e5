from __future__ import annotations

from datetime import date


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


def test_health(client):
    assert client.get("/health").json() == {"app": "ok", "database": "ok"}


def test_time_slot_duration_is_derived(client):
    resp = client.post("/api/time-slots/", json={"name": "09:00 - 09:50"})
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "09:00-09:50"
    assert body["duration_minutes"] == 50


def test_malformed_time_slot_is_rejected(client):
    resp = client.post("/api/time-slots/", json={"name": "25:00-26:00"})
    assert resp.status_code == 422
    assert "MALFORMED_TIME_SLOT" in resp.text


def test_create_and_list_entries(client, seed):
    resp = client.post("/api/timetable/entries", json=_regular(seed))
    assert resp.status_code == 201, resp.text
    created = resp.json()
    assert created["date"] is None
    assert created["subject_name"] == "Design"
    assert created["faculty_name"] == "Prof. Rao"
    assert created["time_slot_name"] == "10:00-11:30"

    listed = client.get("/api/timetable/entries", params={"batch_id": seed["batch"]["id"]}).json()
    assert [e["id"] for e in listed] == [created["id"]]
    assert client.get("/api/timetable/entries", params={"day_of_week": "TUESDAY"}).json() == []


def test_dated_entry_takes_weekday_from_its_date(client, seed):
    resp = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15", day_of_week="MONDAY"))
    assert resp.status_code == 201, resp.text
    assert resp.json()["day_of_week"] == "FRIDAY"


def test_regular_entry_needs_subject_and_faculty(client, seed):
    resp = client.post("/api/timetable/entries", json=_regular(seed, subject_id=None))
    assert resp.status_code == 422
    assert "INVALID_ENTRY" in resp.text


def test_custom_event_needs_title(client, seed):
    payload = {
        "batch_id": seed["batch"]["id"],
        "time_slot_id": seed["afternoon"]["id"],
        "day_of_week": "FRIDAY",
        "date": "2024-03-15",
        "is_custom_event": True,
        "custom_event_title": "   ",
    }
    assert client.post("/api/timetable/entries", json=payload).status_code == 422

    payload["custom_event_title"] = "Holi Break"
    payload["custom_event_color"] = "#f97316"
    resp = client.post("/api/timetable/entries", json=payload)
    assert resp.status_code == 201, resp.text
    assert resp.json()["custom_event_title"] == "Holi Break"
    assert resp.json()["subject_id"] is None


def test_unknown_references_are_404(client, seed):
    resp = client.post(
        "/api/timetable/entries",
        json=_regular(seed, time_slot_id="00000000-0000-0000-0000-000000000000"),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "TIME_SLOT_NOT_FOUND"


def test_batch_double_booking_is_a_conflict(client, seed):
    first = client.post("/api/timetable/entries", json=_regular(seed)).json()
    resp = client.post(
        "/api/timetable/entries",
        json=_regular(seed, subject_id=seed["typography"]["id"], faculty_id=seed["other_faculty"]["id"]),
    )
    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["code"] == "TIMETABLE_CONFLICT"
    assert detail["conflicts"] == [{"kind": "BATCH_DOUBLE_BOOKING", "entry_ids": [first["id"]]}]


def test_dated_entries_on_different_days_do_not_clash(client, seed):
    a = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15"))
    b = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-22"))
    assert a.status_code == 201 and b.status_code == 201

    # A weekly pattern on the same slot collides with both.
    c = client.post("/api/timetable/entries", json=_regular(seed, day_of_week="FRIDAY"))
    assert c.status_code == 409


def test_cannot_create_deep_past_entry(client, seed):
    resp = client.post("/api/timetable/entries", json=_regular(seed, date="2024-01-10"))
    assert resp.status_code == 409
    assert resp.json()["detail"]["code"] == "PAST_EVENT_LOCKED"


def test_recent_past_entry_stays_editable(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-01")).json()
    resp = client.patch(f"/api/timetable/entries/{entry['id']}", json={"notes": "Room 204"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["notes"] == "Room 204"


def test_moving_an_entry_updates_its_weekday(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15")).json()
    resp = client.patch(f"/api/timetable/entries/{entry['id']}", json={"date": "2024-03-19"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["date"] == "2024-03-19"
    assert resp.json()["day_of_week"] == "TUESDAY"


def test_cannot_move_an_entry_into_the_deep_past(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15")).json()
    resp = client.patch(f"/api/timetable/entries/{entry['id']}", json={"date": "2024-02-01"})
    assert resp.status_code == 409


def test_deep_past_entry_is_locked(client, seed, today):
    today.value = date(2024, 1, 10)
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-01-12")).json()

    today.value = date(2024, 3, 15)
    patch = client.patch(f"/api/timetable/entries/{entry['id']}", json={"notes": "late fix"})
    assert patch.status_code == 409
    assert patch.json()["detail"]["days_ago"] == 63

    delete = client.delete(f"/api/timetable/entries/{entry['id']}")
    assert delete.status_code == 409


def test_recurring_entry_guarded_by_occurrence_date(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()
    url = f"/api/timetable/entries/{entry['id']}"

    assert client.delete(url, params={"occurrence_date": "2024-02-05"}).status_code == 409
    assert client.patch(url, params={"occurrence_date": "2024-02-05"}, json={"notes": "x"}).status_code == 409
    assert client.patch(url, params={"occurrence_date": "2024-03-11"}, json={"notes": "x"}).status_code == 200


def test_deleting_one_occurrence_keeps_the_rest_of_the_pattern(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()
    url = f"/api/timetable/entries/{entry['id']}"

    resp = client.delete(url, params={"occurrence_date": "2024-03-18"})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"ok": True, "excluded_date": "2024-03-18"}
    # Deleting the same week twice is harmless.
    assert client.delete(url, params={"occurrence_date": "2024-03-18"}).status_code == 200

    events = client.get("/api/calendar/events", params={"reference_date": "2024-03-13"}).json()["events"]
    ids = [e["id"] for e in events]
    assert len(ids) == 7
    assert f"{entry['id']}-2024-03-18" not in ids
    assert f"{entry['id']}-2024-02-12" in ids
    assert f"{entry['id']}-2024-03-25" in ids

    listed = client.get("/api/timetable/entries").json()
    assert [e["id"] for e in listed] == [entry["id"]]

    week = client.get(
        "/api/calendar/week",
        params={"selected_date": "2024-03-18", "include_recurring": True},
    ).json()
    assert week["events"] == []


def test_deleting_an_occurrence_off_the_pattern_is_rejected(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()
    resp = client.delete(f"/api/timetable/entries/{entry['id']}", params={"occurrence_date": "2024-03-19"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "OCCURRENCE_NOT_IN_PATTERN"


def test_deleting_a_recurring_entry_without_a_date_removes_it(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()
    url = f"/api/timetable/entries/{entry['id']}"
    client.delete(url, params={"occurrence_date": "2024-03-18"})

    assert client.delete(url).json() == {"ok": True}
    assert client.delete(url).status_code == 404
    assert client.get("/api/calendar/events").json()["events"] == []


def test_dated_entry_weekday_cannot_drift_from_its_date(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15")).json()
    resp = client.patch(f"/api/timetable/entries/{entry['id']}", json={"day_of_week": "MONDAY"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["date"] == "2024-03-15"
    assert resp.json()["day_of_week"] == "FRIDAY"


def test_update_keeps_regular_classes_complete(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed, date="2024-03-15")).json()
    url = f"/api/timetable/entries/{entry['id']}"

    resp = client.patch(url, json={"subject_id": None, "faculty_id": None})
    assert resp.status_code == 422
    assert "INVALID_ENTRY" in resp.text

    # Turning it into a custom event is fine once it has a title.
    assert client.patch(url, json={"subject_id": None, "custom_event_title": " "}).status_code == 422
    resp = client.patch(url, json={"subject_id": None, "custom_event_title": "Guest Lecture"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["custom_event_title"] == "Guest Lecture"


def test_update_rejects_null_for_required_fields(client, seed):
    entry = client.post("/api/timetable/entries", json=_regular(seed)).json()
    url = f"/api/timetable/entries/{entry['id']}"
    for field in ("time_slot_id", "day_of_week", "entry_type", "is_active"):
        resp = client.patch(url, json={field: None})
        assert resp.status_code == 422, field
        assert "cannot be null" in resp.text


def test_faculty_double_booking_across_batches_is_a_conflict(client, seed):
    first = client.post("/api/timetable/entries", json=_regular(seed)).json()
    other_batch = client.post("/api/batches/", json={"name": "BDes UX Sem 3", "semester": 3}).json()

    resp = client.post(
        "/api/timetable/entries",
        json=_regular(seed, batch_id=other_batch["id"], subject_id=seed["typography"]["id"]),
    )
    assert resp.status_code == 409
    assert resp.json()["detail"]["conflicts"] == [{"kind": "FACULTY_CONFLICT", "entry_ids": [first["id"]]}]


def test_dated_entry_clashes_with_recurring_faculty_entry(client, seed):
    weekly = client.post("/api/timetable/entries", json=_regular(seed, day_of_week="FRIDAY")).json()
    other_batch = client.post("/api/batches/", json={"name": "BDes UX Sem 3", "semester": 3}).json()

    resp = client.post(
        "/api/timetable/entries",
        json=_regular(seed, batch_id=other_batch["id"], date="2024-03-22"),
    )
    assert resp.status_code == 409
    assert resp.json()["detail"]["conflicts"] == [{"kind": "FACULTY_CONFLICT", "entry_ids": [weekly["id"]]}]


def test_reactivating_an_entry_checks_for_conflicts(client, seed):
    first = client.post("/api/timetable/entries", json=_regular(seed)).json()
    url = f"/api/timetable/entries/{first['id']}"
    assert client.patch(url, json={"is_active": False}).status_code == 200

    second = client.post(
        "/api/timetable/entries",
        json=_regular(seed, subject_id=seed["typography"]["id"], faculty_id=seed["other_faculty"]["id"]),
    )
    assert second.status_code == 201, second.text

    resp = client.patch(url, json={"is_active": True})
    assert resp.status_code == 409
    assert resp.json()["detail"]["conflicts"] == [
        {"kind": "BATCH_DOUBLE_BOOKING", "entry_ids": [second.json()["id"]]}
    ]

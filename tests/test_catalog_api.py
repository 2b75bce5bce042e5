"""API tests for events, stages, artists and lineups."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient

from conftest import FESTIVAL_START, add_performance, auth
from festival.domain.models import Event, EventStatus
from festival.main import (
    artist_repo,
    attendance_repo,
    event_repo,
    performance_repo,
    schedule_repo,
    stage_repo,
)
from festival.repos.seed import seed_festival_data


def _event_payload(**overrides) -> dict:
    payload = {
        "name": "Neon Nights",
        "location": "Central Park, New York",
        "start_date": FESTIVAL_START.isoformat(),
        "end_date": (FESTIVAL_START + timedelta(days=2)).isoformat(),
        "status": "published",
    }
    payload.update(overrides)
    return payload


def _add_event(name: str, status: EventStatus, days_from_start: int = 0, **extra) -> Event:
    start = FESTIVAL_START + timedelta(days=days_from_start)
    event = Event(
        name=name,
        location=extra.pop("location", "Somewhere"),
        start_date=start,
        end_date=start + timedelta(days=1),
        status=status,
        **extra,
    )
    event_repo.add(event)
    return event


def test_list_events_returns_published_latest_first(client: TestClient):
    older = _add_event("Older", EventStatus.PUBLISHED, days_from_start=0)
    newer = _add_event("Newer", EventStatus.PUBLISHED, days_from_start=30)
    _add_event("Draft", EventStatus.DRAFT)

    resp = client.get("/api/events")

    assert resp.status_code == 200
    assert [e["id"] for e in resp.json()] == [newer.id, older.id]


def test_search_matches_name_location_and_description(client: TestClient):
    by_name = _add_event("Digital Euphoria", EventStatus.PUBLISHED)
    by_location = _add_event("Other", EventStatus.PUBLISHED, location="Millennium Park, Chicago")
    by_description = _add_event(
        "Third", EventStatus.PUBLISHED, description="Late-night euphoria sessions"
    )
    _add_event("Euphoria Draft", EventStatus.DRAFT)

    names = {e["id"] for e in client.get("/api/events", params={"search": "EUPHORIA"}).json()}
    assert names == {by_name.id, by_description.id}

    chicago = client.get("/api/events", params={"search": "chicago"}).json()
    assert [e["id"] for e in chicago] == [by_location.id]


def test_admin_listing_includes_drafts(client: TestClient, alice, admin_account):
    _add_event("Published", EventStatus.PUBLISHED)
    _add_event("Draft", EventStatus.DRAFT)

    assert client.get("/api/events", params={"admin": "true"}).status_code == 403
    assert (
        client.get("/api/events", params={"admin": "true"}, headers=auth(alice)).status_code
        == 403
    )

    resp = client.get("/api/events", params={"admin": "true"}, headers=auth(admin_account))
    assert resp.status_code == 200
    assert len(resp.json()) == 2


def test_get_event_404(client: TestClient):
    resp = client.get("/api/events/missing")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Event not found"


def test_create_event_requires_admin(client: TestClient, alice, admin_account):
    assert client.post("/api/events", json=_event_payload()).status_code == 401
    assert client.post("/api/events", json=_event_payload(), headers=auth(alice)).status_code == 403

    resp = client.post("/api/events", json=_event_payload(), headers=auth(admin_account))

    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Neon Nights"
    assert body["status"] == "published"
    assert event_repo.get(body["id"]) is not None


def test_create_event_rejects_inverted_dates(client: TestClient, admin_account):
    payload = _event_payload(
        start_date=FESTIVAL_START.isoformat(),
        end_date=FESTIVAL_START.isoformat(),
    )
    resp = client.post("/api/events", json=payload, headers=auth(admin_account))
    assert resp.status_code == 422


def test_update_event_is_partial(client: TestClient, admin_account):
    event = _add_event("Before", EventStatus.DRAFT, description="keep me")

    resp = client.put(
        f"/api/events/{event.id}",
        json={"name": "After", "status": "published"},
        headers=auth(admin_account),
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "After"
    assert body["status"] == "published"
    assert body["description"] == "keep me"
    assert event_repo.get(event.id).name == "After"


def test_update_event_rejects_end_before_start(client: TestClient, admin_account):
    event = _add_event("Festival", EventStatus.PUBLISHED)

    resp = client.put(
        f"/api/events/{event.id}",
        json={"end_date": (FESTIVAL_START - timedelta(days=1)).isoformat()},
        headers=auth(admin_account),
    )

    assert resp.status_code == 422
    assert event_repo.get(event.id).end_date == event.end_date


def test_delete_event_cascades(client: TestClient, alice, admin_account, festival):
    perf = add_performance(festival, 0, 0, 1, 2)
    schedule_repo.add(alice.id, perf.id)
    attendance_repo.toggle(alice.id, festival.event.id)
    other = _add_event("Untouched", EventStatus.PUBLISHED)

    resp = client.delete(f"/api/events/{festival.event.id}", headers=auth(admin_account))

    assert resp.status_code == 204
    assert event_repo.get(festival.event.id) is None
    assert performance_repo.get(perf.id) is None
    assert stage_repo.list_for_event(festival.event.id) == []
    assert schedule_repo.list_for_user(alice.id) == []
    assert attendance_repo.list_for_event(festival.event.id) == []
    assert event_repo.get(other.id) is not None


def test_delete_missing_event_404(client: TestClient, admin_account):
    assert client.delete("/api/events/nope", headers=auth(admin_account)).status_code == 404


def test_stages(client: TestClient, admin_account, festival):
    resp = client.post(
        "/api/stages",
        json={"event_id": festival.event.id, "name": "Techno Tent", "capacity": 800},
        headers=auth(admin_account),
    )
    assert resp.status_code == 201

    listed = client.get(f"/api/events/{festival.event.id}/stages").json()
    assert {s["name"] for s in listed} == {"Main Stage", "Discovery Stage", "Techno Tent"}

    missing = client.post(
        "/api/stages", json={"event_id": "nope", "name": "X"}, headers=auth(admin_account)
    )
    assert missing.status_code == 404


def test_lineup_is_joined_and_ordered(client: TestClient, festival):
    late = add_performance(festival, 0, 0, 5, 6)
    early = add_performance(festival, 1, 1, 1, 2)

    resp = client.get(f"/api/events/{festival.event.id}/performances")

    assert resp.status_code == 200
    body = resp.json()
    assert [p["id"] for p in body] == [early.id, late.id]
    assert body[0]["artist_name"] == "Disclosure"
    assert body[0]["stage_name"] == "Discovery Stage"


def test_create_performance_validates_references(client: TestClient, admin_account, festival):
    base = {
        "event_id": festival.event.id,
        "artist_id": festival.artists[0].id,
        "stage_id": festival.stages[0].id,
        "start_time": (FESTIVAL_START + timedelta(hours=1)).isoformat(),
        "end_time": (FESTIVAL_START + timedelta(hours=2)).isoformat(),
        "is_headliner": True,
    }

    created = client.post("/api/performances", json=base, headers=auth(admin_account))
    assert created.status_code == 201
    assert performance_repo.get(created.json()["id"]).is_headliner is True

    bad_artist = client.post(
        "/api/performances", json={**base, "artist_id": "nope"}, headers=auth(admin_account)
    )
    assert bad_artist.status_code == 404

    foreign = _add_event("Elsewhere", EventStatus.PUBLISHED)
    wrong_event = client.post(
        "/api/performances", json={**base, "event_id": foreign.id}, headers=auth(admin_account)
    )
    assert wrong_event.status_code == 400


def test_create_performance_rejects_empty_slot(client: TestClient, admin_account, festival):
    instant = (FESTIVAL_START + timedelta(hours=1)).isoformat()
    resp = client.post(
        "/api/performances",
        json={
            "event_id": festival.event.id,
            "artist_id": festival.artists[0].id,
            "stage_id": festival.stages[0].id,
            "start_time": instant,
            "end_time": instant,
        },
        headers=auth(admin_account),
    )
    assert resp.status_code == 422


def test_artists_sorted_by_name(client: TestClient, admin_account):
    for name in ("Madeon", "flume", "Porter Robinson"):
        resp = client.post("/api/artists", json={"name": name}, headers=auth(admin_account))
        assert resp.status_code == 201

    assert [a["name"] for a in client.get("/api/artists").json()] == [
        "flume",
        "Madeon",
        "Porter Robinson",
    ]


def test_seed_festival_data(client: TestClient):
    counts = seed_festival_data(event_repo, artist_repo, stage_repo, performance_repo)

    assert counts == {"artists": 6, "events": 3, "stages": 9, "performances": 18}
    events = client.get("/api/events").json()
    assert len(events) == 3
    lineup = client.get(f"/api/events/{events[0]['id']}/performances").json()
    assert len(lineup) == 6
    assert all(p["artist_name"] and p["stage_name"] for p in lineup)


def test_create_performance_rejects_times_without_offset(
    client: TestClient, alice, admin_account, festival
):
    booked = add_performance(festival, 0, 0, 3, 4.5)
    schedule_repo.add(alice.id, booked.id)

    resp = client.post(
        "/api/performances",
        json={
            "event_id": festival.event.id,
            "artist_id": festival.artists[1].id,
            "stage_id": festival.stages[1].id,
            "start_time": "2026-08-14T20:00:00",
            "end_time": "2026-08-14T21:00:00",
        },
        headers=auth(admin_account),
    )

    assert resp.status_code == 422
    assert [p.id for p in performance_repo.list_for_event(festival.event.id)] == [booked.id]
    assert client.get(f"/api/events/{festival.event.id}/performances").status_code == 200


def test_event_dates_without_offset_are_rejected(client: TestClient, admin_account):
    created = client.post(
        "/api/events",
        json=_event_payload(start_date="2026-08-14T16:00:00"),
        headers=auth(admin_account),
    )
    assert created.status_code == 422

    event = _add_event("Festival", EventStatus.PUBLISHED)
    updated = client.put(
        f"/api/events/{event.id}",
        json={"end_date": "2026-08-20T23:00:00"},
        headers=auth(admin_account),
    )
    assert updated.status_code == 422
    assert event_repo.get(event.id).end_date == event.end_date

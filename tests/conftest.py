"""Shared fixtures for the API tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from festival.domain.models import (
    Artist,
    Event,
    EventStatus,
    Performance,
    Stage,
    User,
)
from festival.main import (
    app,
    artist_repo,
    attendance_repo,
    connection_repo,
    event_repo,
    performance_repo,
    schedule_repo,
    stage_repo,
    user_repo,
)

FESTIVAL_START = datetime(2026, 8, 14, 16, 0, tzinfo=timezone.utc)


def _clear() -> None:
    user_repo._store.clear()
    event_repo._store.clear()
    artist_repo._store.clear()
    stage_repo._store.clear()
    performance_repo._store.clear()
    schedule_repo._entries.clear()
    attendance_repo._entries.clear()
    connection_repo._edges.clear()


@pytest.fixture(autouse=True)
def _clear_repos():
    """Reset in-memory repos before and after each test."""
    _clear()
    yield
    _clear()


@pytest.fixture()
def client():
    return TestClient(app)


def make_user(user_id: str, **overrides) -> User:
    defaults = dict(
        id=user_id,
        email=f"{user_id}@example.com",
        first_name=user_id.capitalize(),
        last_name="Tester",
    )
    defaults.update(overrides)
    user = User(**defaults)
    user_repo.add(user)
    return user


def auth(user: User) -> dict[str, str]:
    return {"X-User-Id": user.id}


@pytest.fixture()
def alice() -> User:
    return make_user("alice")


@pytest.fixture()
def admin_account() -> User:
    return make_user("root", is_admin=True)


@pytest.fixture()
def festival():
    """One published festival with two stages and three artists."""
    event = Event(
        name="Electric Dreams Festival",
        description="Three days of electronic music",
        location="Golden Gate Park, San Francisco",
        start_date=FESTIVAL_START,
        end_date=FESTIVAL_START + timedelta(days=2),
        status=EventStatus.PUBLISHED,
    )
    event_repo.add(event)
    stages = [
        Stage(event_id=event.id, name="Main Stage", capacity=15000),
        Stage(event_id=event.id, name="Discovery Stage", capacity=3000),
    ]
    for stage in stages:
        stage_repo.add(stage)
    artists = [Artist(name="Deadmau5"), Artist(name="Disclosure"), Artist(name="ODESZA")]
    for artist in artists:
        artist_repo.add(artist)

    class Festival:
        pass

    f = Festival()
    f.event = event
    f.stages = stages
    f.artists = artists
    return f


def add_performance(
    festival, artist_idx: int, stage_idx: int, start_h: float, end_h: float
) -> Performance:
    performance = Performance(
        event_id=festival.event.id,
        artist_id=festival.artists[artist_idx].id,
        stage_id=festival.stages[stage_idx].id,
        start_time=FESTIVAL_START + timedelta(hours=start_h),
        end_time=FESTIVAL_START + timedelta(hours=end_h),
    )
    performance_repo.add(performance)
    return performance

"""FastAPI application: entry point for the festival planner service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Response

from festival.config import FESTIVAL_TZ, LOG_LEVEL, SEED_DATA
from festival.domain.bus import EventBus
from festival.domain.errors import (
    PerformanceNotFoundError,
    ScheduleConflictError,
    SelfFollowError,
)
from festival.domain.events import FestivalDeleted
from festival.domain.handlers import HandlerRegistry
from festival.domain.models import (
    AddToScheduleRequest,
    AdminAnalytics,
    Artist,
    ArtistCreate,
    ConflictReport,
    Event,
    EventAttendance,
    EventAttendees,
    EventCreate,
    EventUpdate,
    FollowRequest,
    Performance,
    PerformanceCreate,
    PerformanceDetail,
    ScheduleEntry,
    Stage,
    StageCreate,
    Timetable,
    User,
    UserConnection,
    UserStatusUpdate,
    UserUpsert,
    UserWithStats,
)
from festival.repos.memory import (
    ArtistRepository,
    AttendanceRepository,
    ConnectionRepository,
    EventRepository,
    PerformanceRepository,
    ScheduleRepository,
    StageRepository,
    UserRepository,
)
from festival.repos.seed import seed_festival_data
from festival.services import admin, social
from festival.services.schedule import ScheduleService, build_timetable

logging.basicConfig(
    level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Festival Planner")

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
user_repo = UserRepository()
event_repo = EventRepository()
artist_repo = ArtistRepository()
stage_repo = StageRepository()
performance_repo = PerformanceRepository()
schedule_repo = ScheduleRepository()
attendance_repo = AttendanceRepository()
connection_repo = ConnectionRepository()

schedule_service = ScheduleService(
    schedule_repo=schedule_repo,
    performance_repo=performance_repo,
    artist_repo=artist_repo,
    stage_repo=stage_repo,
    event_repo=event_repo,
)

handler_registry = HandlerRegistry(
    bus=event_bus,
    stage_repo=stage_repo,
    performance_repo=performance_repo,
    schedule_repo=schedule_repo,
    attendance_repo=attendance_repo,
)

if SEED_DATA and not event_repo.list_all():
    seed_festival_data(event_repo, artist_repo, stage_repo, performance_repo)

# Fields that may be cleared to null through a partial event update.
_NULLABLE_EVENT_FIELDS = {"description", "image_url"}


# ── Dependencies ──────────────────────────────────────────────────────


def optional_user(x_user_id: str | None = Header(default=None)) -> User | None:
    """Resolve the acting user from the ``X-User-Id`` header, if any."""
    if not x_user_id:
        return None
    return user_repo.get(x_user_id)


def current_user(user: User | None = Depends(optional_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is disabled")
    return user


def admin_user(user: User = Depends(current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def _get_event_or_404(event_id: str) -> Event:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# ── Users ─────────────────────────────────────────────────────────────


@app.put("/api/users/{user_id}", response_model=User)
def upsert_user(user_id: str, body: UserUpsert) -> User:
    """Create a user profile, or update the profile fields of an existing one."""
    existing = user_repo.get(user_id)
    if existing is None:
        user = User(id=user_id, **body.model_dump())
        user_repo.add(user)
        return user
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(existing, field, value)
    existing.updated_at = datetime.now(timezone.utc)
    return existing


@app.get("/api/user", response_model=User)
def get_current_user(user: User = Depends(current_user)) -> User:
    return user


@app.get("/api/users", response_model=list[User])
def discover_users(search: str | None = None, user: User = Depends(current_user)) -> list[User]:
    return user_repo.search(search, exclude_id=user.id)


# ── Events ────────────────────────────────────────────────────────────


@app.get("/api/events", response_model=list[Event])
def list_events(
    search: str | None = None,
    admin_view: bool = Query(default=False, alias="admin"),
    user: User | None = Depends(optional_user),
) -> list[Event]:
    """Return published events, optionally filtered by a search term.

    Admins may pass ``admin=true`` to list drafts and archived events too.
    """
    if admin_view:
        if user is None or not user.is_admin:
            raise HTTPException(status_code=403, detail="Admin access required")
        return event_repo.list_all()
    if search:
        return event_repo.search(search)
    return event_repo.list_published()


@app.get("/api/events/{event_id}", response_model=Event)
def get_event(event_id: str) -> Event:
    return _get_event_or_404(event_id)


@app.post("/api/events", response_model=Event, status_code=201)
def create_event(body: EventCreate, _: User = Depends(admin_user)) -> Event:
    if body.end_date <= body.start_date:
        raise HTTPException(status_code=422, detail="end_date must be after start_date")
    event = Event(**body.model_dump())
    event_repo.add(event)
    logger.info("Created event %s (%s)", event.id, event.name)
    return event


@app.put("/api/events/{event_id}", response_model=Event)
def update_event(event_id: str, body: EventUpdate, _: User = Depends(admin_user)) -> Event:
    event = _get_event_or_404(event_id)
    changes = {
        field: value
        for field, value in body.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_EVENT_FIELDS
    }
    updated = event.model_copy(
        update={**changes, "updated_at": datetime.now(timezone.utc)}
    )
    if updated.end_date <= updated.start_date:
        raise HTTPException(status_code=422, detail="end_date must be after start_date")
    event_repo.add(updated)
    return updated


@app.delete("/api/events/{event_id}", status_code=204)
def delete_event(event_id: str, _: User = Depends(admin_user)) -> Response:
    _get_event_or_404(event_id)
    event_repo.delete(event_id)
    event_bus.publish(FestivalDeleted(event_id=event_id))
    return Response(status_code=204)


# ── Stages & lineup ──────────────────────────────────────────────────


@app.get("/api/events/{event_id}/stages", response_model=list[Stage])
def list_stages(event_id: str) -> list[Stage]:
    _get_event_or_404(event_id)
    return stage_repo.list_for_event(event_id)


@app.post("/api/stages", response_model=Stage, status_code=201)
def create_stage(body: StageCreate, _: User = Depends(admin_user)) -> Stage:
    _get_event_or_404(body.event_id)
    stage = Stage(**body.model_dump())
    stage_repo.add(stage)
    return stage


@app.get("/api/events/{event_id}/performances", response_model=list[PerformanceDetail])
def list_performances(event_id: str) -> list[PerformanceDetail]:
    """Return an event's lineup joined with artist and stage, ordered by start."""
    _get_event_or_404(event_id)
    return schedule_service.event_lineup(event_id)


@app.post("/api/performances", response_model=Performance, status_code=201)
def create_performance(body: PerformanceCreate, _: User = Depends(admin_user)) -> Performance:
    _get_event_or_404(body.event_id)
    if artist_repo.get(body.artist_id) is None:
        raise HTTPException(status_code=404, detail="Artist not found")
    stage = stage_repo.get(body.stage_id)
    if stage is None:
        raise HTTPException(status_code=404, detail="Stage not found")
    if stage.event_id != body.event_id:
        raise HTTPException(status_code=400, detail="Stage does not belong to event")
    performance = Performance(**body.model_dump())
    performance_repo.add(performance)
    return performance


# ── Artists ───────────────────────────────────────────────────────────


@app.get("/api/artists", response_model=list[Artist])
def list_artists() -> list[Artist]:
    return artist_repo.list_all()


@app.post("/api/artists", response_model=Artist, status_code=201)
def create_artist(body: ArtistCreate, _: User = Depends(admin_user)) -> Artist:
    artist = Artist(**body.model_dump())
    artist_repo.add(artist)
    return artist


# ── Attendance ────────────────────────────────────────────────────────


@app.post("/api/events/{event_id}/attend")
def toggle_attendance(event_id: str, user: User = Depends(current_user)) -> dict:
    _get_event_or_404(event_id)
    attending = social.toggle_attendance(user.id, event_id, attendance_repo)
    return {"attending": attending}


@app.get("/api/events/{event_id}/attendees", response_model=EventAttendees)
def list_attendees(
    event_id: str, user: User | None = Depends(optional_user)
) -> EventAttendees:
    """Return attendees split into the acting user's friends and everyone else."""
    _get_event_or_404(event_id)
    return social.event_attendees(
        event_id,
        current_user_id=user.id if user else "",
        user_repo=user_repo,
        attendance_repo=attendance_repo,
        connection_repo=connection_repo,
    )


@app.get("/api/user/attendances", response_model=list[EventAttendance])
def list_user_attendances(user: User = Depends(current_user)) -> list[EventAttendance]:
    return attendance_repo.list_for_user(user.id)


# ── Personal schedule ────────────────────────────────────────────────


@app.get("/api/user/schedule", response_model=list[PerformanceDetail])
def get_schedule(user: User = Depends(current_user)) -> list[PerformanceDetail]:
    return schedule_service.user_schedule(user.id)


@app.post("/api/user/schedule", response_model=ScheduleEntry, status_code=201)
def add_to_schedule(
    body: AddToScheduleRequest,
    response: Response,
    user: User = Depends(current_user),
) -> ScheduleEntry:
    """Add a performance to the acting user's schedule.

    Refuses with 409 and the list of conflicting performances when the new
    slot overlaps anything already scheduled. Re-adding a scheduled
    performance is a no-op answered with 200.
    """
    try:
        entry, created = schedule_service.add_to_schedule(user.id, body.performance_id)
    except PerformanceNotFoundError:
        raise HTTPException(status_code=404, detail="Performance not found")
    except ScheduleConflictError as exc:
        raise HTTPException(
            status_code=409,
            detail={
                "message": "Performance conflicts with existing schedule",
                "conflicts": [c.model_dump(mode="json") for c in exc.conflicts],
            },
        )
    if not created:
        response.status_code = 200
    return entry


@app.delete("/api/user/schedule/{performance_id}")
def remove_from_schedule(performance_id: str, user: User = Depends(current_user)) -> dict:
    schedule_service.remove_from_schedule(user.id, performance_id)
    return {"message": "Removed from schedule"}


@app.get("/api/user/schedule/conflicts/{performance_id}", response_model=ConflictReport)
def check_conflicts(performance_id: str, user: User = Depends(current_user)) -> ConflictReport:
    try:
        conflicts = schedule_service.check_conflicts(user.id, performance_id)
    except PerformanceNotFoundError:
        raise HTTPException(status_code=404, detail="Performance not found")
    return ConflictReport(conflicts=conflicts)


@app.get("/api/user/timetable", response_model=Timetable)
def get_timetable(user: User = Depends(current_user)) -> Timetable:
    """Return the schedule grouped by festival day, with overlapping sets flagged."""
    return build_timetable(schedule_service.user_schedule(user.id), FESTIVAL_TZ)


# ── Connections ───────────────────────────────────────────────────────


@app.get("/api/user/connections", response_model=list[User])
def list_connections(user: User = Depends(current_user)) -> list[User]:
    return social.user_connections(user.id, user_repo, connection_repo)


@app.post("/api/user/follow", response_model=UserConnection, status_code=201)
def follow(body: FollowRequest, user: User = Depends(current_user)) -> UserConnection:
    if user_repo.get(body.following_id) is None:
        raise HTTPException(status_code=404, detail="User not found")
    try:
        return social.follow_user(user.id, body.following_id, connection_repo)
    except SelfFollowError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.delete("/api/user/follow/{following_id}", status_code=204)
def unfollow(following_id: str, user: User = Depends(current_user)) -> Response:
    connection_repo.unfollow(user.id, following_id)
    return Response(status_code=204)


# ── Admin ─────────────────────────────────────────────────────────────


@app.get("/api/admin/analytics", response_model=AdminAnalytics)
def get_analytics(_: User = Depends(admin_user)) -> AdminAnalytics:
    return admin.analytics(event_repo, user_repo, attendance_repo)


@app.get("/api/admin/users", response_model=list[UserWithStats])
def list_users_with_stats(_: User = Depends(admin_user)) -> list[UserWithStats]:
    return admin.users_with_stats(user_repo, attendance_repo)


@app.put("/api/admin/users/{user_id}/status", response_model=User)
def update_user_status(
    user_id: str, body: UserStatusUpdate, _: User = Depends(admin_user)
) -> User:
    target = user_repo.get(user_id)
    if target is None:
        raise HTTPException(status_code=404, detail="User not found")
    return admin.set_user_active(target, body.is_active)

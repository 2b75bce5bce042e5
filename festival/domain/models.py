"""Domain models for the festival planner."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import AwareDatetime, BaseModel, Field, model_validator


class EventStatus(StrEnum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class User(BaseModel):
    id: str = Field(default_factory=_new_id)
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None
    is_admin: bool = False
    is_active: bool = True
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class Event(BaseModel):
    """A festival, spanning one or more days."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    location: str = Field(min_length=1, max_length=255)
    start_date: AwareDatetime
    end_date: AwareDatetime
    image_url: str | None = None
    status: EventStatus = EventStatus.DRAFT
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _end_after_start(self) -> Event:
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class Artist(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1, max_length=255)
    bio: str | None = None
    image_url: str | None = None
    social_links: dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


class Stage(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    capacity: int | None = Field(default=None, ge=0)


class Performance(BaseModel):
    """One artist's timed slot on one stage of one event."""

    id: str = Field(default_factory=_new_id)
    event_id: str
    artist_id: str
    stage_id: str
    start_time: AwareDatetime
    end_time: AwareDatetime
    is_headliner: bool = False

    @model_validator(mode="after")
    def _end_after_start(self) -> Performance:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class PerformanceDetail(Performance):
    """A performance joined with the names needed to display it.

    Names are ``None`` when the referenced artist, stage or event no longer
    resolves.
    """

    artist_name: str | None = None
    stage_name: str | None = None
    event_name: str | None = None


class ScheduleEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    performance_id: str
    created_at: datetime = Field(default_factory=_utcnow)


class EventAttendance(BaseModel):
    id: str = Field(default_factory=_new_id)
    user_id: str
    event_id: str
    created_at: datetime = Field(default_factory=_utcnow)


class UserConnection(BaseModel):
    id: str = Field(default_factory=_new_id)
    follower_id: str
    following_id: str
    created_at: datetime = Field(default_factory=_utcnow)


class Conflict(BaseModel):
    """A scheduled performance whose time slot overlaps another one."""

    id: str
    artist_name: str | None = None
    stage_name: str | None = None
    start_time: AwareDatetime
    end_time: AwareDatetime


class ScheduleClash(BaseModel):
    """Two consecutive (by start time) schedule entries that overlap."""

    earlier: Conflict
    later: Conflict


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class UserUpsert(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    profile_image_url: str | None = None


class EventCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    location: str = Field(min_length=1, max_length=255)
    start_date: AwareDatetime
    end_date: AwareDatetime
    image_url: str | None = None
    status: EventStatus = EventStatus.DRAFT


class EventUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    location: str | None = Field(default=None, min_length=1, max_length=255)
    start_date: AwareDatetime | None = None
    end_date: AwareDatetime | None = None
    image_url: str | None = None
    status: EventStatus | None = None


class ArtistCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    bio: str | None = None
    image_url: str | None = None
    social_links: dict[str, str] = Field(default_factory=dict)


class StageCreate(BaseModel):
    event_id: str
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    capacity: int | None = Field(default=None, ge=0)


class PerformanceCreate(BaseModel):
    event_id: str
    artist_id: str
    stage_id: str
    start_time: AwareDatetime
    end_time: AwareDatetime
    is_headliner: bool = False

    @model_validator(mode="after")
    def _end_after_start(self) -> PerformanceCreate:
        if self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class AddToScheduleRequest(BaseModel):
    performance_id: str


class FollowRequest(BaseModel):
    following_id: str


class UserStatusUpdate(BaseModel):
    is_active: bool


class ConflictReport(BaseModel):
    conflicts: list[Conflict] = Field(default_factory=list)


class TimetableSlot(PerformanceDetail):
    time_range: str
    has_conflict: bool = False


class TimetableDay(BaseModel):
    date: str
    performances: list[TimetableSlot] = Field(default_factory=list)


class Timetable(BaseModel):
    days: list[TimetableDay] = Field(default_factory=list)
    clashes: list[ScheduleClash] = Field(default_factory=list)


class SocialAttendee(User):
    is_friend: bool


class EventAttendees(BaseModel):
    total_attendees: int
    friends_attending: list[SocialAttendee] = Field(default_factory=list)
    other_attendees: list[SocialAttendee] = Field(default_factory=list)


class UserWithStats(User):
    events_attended: int = 0


class AdminAnalytics(BaseModel):
    total_events: int
    published_events: int
    total_users: int
    total_attendees: int
    recent_events: list[Event] = Field(default_factory=list)
    recent_users: list[User] = Field(default_factory=list)

"""In-memory repositories for the festival catalog, schedules and social graph."""

from __future__ import annotations

from festival.domain.models import (
    Artist,
    Event,
    EventAttendance,
    EventStatus,
    Performance,
    ScheduleEntry,
    Stage,
    User,
    UserConnection,
)


def _matches(needle: str, *haystacks: str | None) -> bool:
    needle = needle.lower()
    return any(h is not None and needle in h.lower() for h in haystacks)


class UserRepository:
    """Dict-backed store for User instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, User] = {}

    def add(self, user: User) -> None:
        self._store[user.id] = user

    def get(self, user_id: str) -> User | None:
        return self._store.get(user_id)

    def list_all(self) -> list[User]:
        """Return every user, newest first."""
        return sorted(self._store.values(), key=lambda u: u.created_at, reverse=True)

    def search(self, query: str | None, exclude_id: str, limit: int = 20) -> list[User]:
        users = [u for u in self._store.values() if u.id != exclude_id]
        if query and query.strip():
            q = query.strip()
            users = [u for u in users if _matches(q, u.first_name, u.last_name, u.email)]
        return users[:limit]


class EventRepository:
    """Dict-backed store for Event instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> Event | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        """Return every event regardless of status, latest start first."""
        return sorted(self._store.values(), key=lambda e: e.start_date, reverse=True)

    def list_published(self) -> list[Event]:
        return [e for e in self.list_all() if e.status == EventStatus.PUBLISHED]

    def search(self, query: str) -> list[Event]:
        """Case-insensitive search over name, location and description."""
        return [
            e
            for e in self.list_published()
            if _matches(query, e.name, e.location, e.description)
        ]

    def delete(self, event_id: str) -> None:
        self._store.pop(event_id, None)


class ArtistRepository:
    """Dict-backed store for Artist instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Artist] = {}

    def add(self, artist: Artist) -> None:
        self._store[artist.id] = artist

    def get(self, artist_id: str) -> Artist | None:
        return self._store.get(artist_id)

    def list_all(self) -> list[Artist]:
        return sorted(self._store.values(), key=lambda a: a.name.lower())


class StageRepository:
    """Dict-backed store for Stage instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Stage] = {}

    def add(self, stage: Stage) -> None:
        self._store[stage.id] = stage

    def get(self, stage_id: str) -> Stage | None:
        return self._store.get(stage_id)

    def list_for_event(self, event_id: str) -> list[Stage]:
        return [s for s in self._store.values() if s.event_id == event_id]

    def delete_for_event(self, event_id: str) -> list[str]:
        """Delete every stage of an event and return the removed ids."""
        removed = [sid for sid, s in self._store.items() if s.event_id == event_id]
        for sid in removed:
            del self._store[sid]
        return removed


class PerformanceRepository:
    """Dict-backed store for Performance instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Performance] = {}

    def add(self, performance: Performance) -> None:
        self._store[performance.id] = performance

    def get(self, performance_id: str) -> Performance | None:
        return self._store.get(performance_id)

    def list_for_event(self, event_id: str) -> list[Performance]:
        """Return an event's performances ordered by start time."""
        return sorted(
            [p for p in self._store.values() if p.event_id == event_id],
            key=lambda p: (p.start_time, p.id),
        )

    def delete_for_event(self, event_id: str) -> list[str]:
        """Delete every performance of an event and return the removed ids."""
        removed = [pid for pid, p in self._store.items() if p.event_id == event_id]
        for pid in removed:
            del self._store[pid]
        return removed


class ScheduleRepository:
    """List-backed store for ScheduleEntry instances.

    Holds at most one entry per (user, performance) pair.
    """

    def __init__(self) -> None:
        self._entries: list[ScheduleEntry] = []

    def get(self, user_id: str, performance_id: str) -> ScheduleEntry | None:
        for entry in self._entries:
            if entry.user_id == user_id and entry.performance_id == performance_id:
                return entry
        return None

    def add(self, user_id: str, performance_id: str) -> ScheduleEntry:
        """Store a new entry, or return the existing one for the pair."""
        existing = self.get(user_id, performance_id)
        if existing is not None:
            return existing
        entry = ScheduleEntry(user_id=user_id, performance_id=performance_id)
        self._entries.append(entry)
        return entry

    def remove(self, user_id: str, performance_id: str) -> bool:
        entry = self.get(user_id, performance_id)
        if entry is None:
            return False
        self._entries.remove(entry)
        return True

    def list_for_user(self, user_id: str) -> list[ScheduleEntry]:
        return [e for e in self._entries if e.user_id == user_id]

    def remove_performances(self, performance_ids: list[str]) -> int:
        """Drop every entry pointing at one of the given performances."""
        ids = set(performance_ids)
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.performance_id not in ids]
        return before - len(self._entries)


class AttendanceRepository:
    """List-backed store for EventAttendance instances."""

    def __init__(self) -> None:
        self._entries: list[EventAttendance] = []

    def get(self, user_id: str, event_id: str) -> EventAttendance | None:
        for entry in self._entries:
            if entry.user_id == user_id and entry.event_id == event_id:
                return entry
        return None

    def toggle(self, user_id: str, event_id: str) -> EventAttendance | None:
        """Remove the attendance if present, otherwise create it.

        Returns the new attendance, or ``None`` when it was removed.
        """
        existing = self.get(user_id, event_id)
        if existing is not None:
            self._entries.remove(existing)
            return None
        attendance = EventAttendance(user_id=user_id, event_id=event_id)
        self._entries.append(attendance)
        return attendance

    def list_for_user(self, user_id: str) -> list[EventAttendance]:
        return [e for e in self._entries if e.user_id == user_id]

    def list_for_event(self, event_id: str) -> list[EventAttendance]:
        return [e for e in self._entries if e.event_id == event_id]

    def count(self) -> int:
        return len(self._entries)

    def delete_for_event(self, event_id: str) -> None:
        self._entries = [e for e in self._entries if e.event_id != event_id]


class ConnectionRepository:
    """List-backed store for UserConnection (follower -> following) edges."""

    def __init__(self) -> None:
        self._edges: list[UserConnection] = []

    def get(self, follower_id: str, following_id: str) -> UserConnection | None:
        for edge in self._edges:
            if edge.follower_id == follower_id and edge.following_id == following_id:
                return edge
        return None

    def follow(self, follower_id: str, following_id: str) -> UserConnection:
        existing = self.get(follower_id, following_id)
        if existing is not None:
            return existing
        edge = UserConnection(follower_id=follower_id, following_id=following_id)
        self._edges.append(edge)
        return edge

    def unfollow(self, follower_id: str, following_id: str) -> None:
        self._edges = [
            e
            for e in self._edges
            if not (e.follower_id == follower_id and e.following_id == following_id)
        ]

    def following_ids(self, follower_id: str) -> list[str]:
        return [e.following_id for e in self._edges if e.follower_id == follower_id]

"""Service for building and checking a user's personal performance schedule."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Collection, Iterable
from datetime import datetime, tzinfo

from festival.domain.errors import PerformanceNotFoundError, ScheduleConflictError
from festival.domain.models import (
    Conflict,
    Performance,
    PerformanceDetail,
    ScheduleClash,
    ScheduleEntry,
    Timetable,
    TimetableDay,
    TimetableSlot,
)
from festival.repos.memory import (
    ArtistRepository,
    EventRepository,
    PerformanceRepository,
    ScheduleRepository,
    StageRepository,
)
from festival.services.conflicts import find_conflicts, find_schedule_clashes

logger = logging.getLogger(__name__)


class ScheduleService:
    """Resolves schedules to performance details and guards insertions.

    The conflict check and the insert for one user run under that user's
    lock, so two concurrent additions cannot both pass the check.
    """

    def __init__(
        self,
        schedule_repo: ScheduleRepository,
        performance_repo: PerformanceRepository,
        artist_repo: ArtistRepository,
        stage_repo: StageRepository,
        event_repo: EventRepository,
    ) -> None:
        self.schedule_repo = schedule_repo
        self.performance_repo = performance_repo
        self.artist_repo = artist_repo
        self.stage_repo = stage_repo
        self.event_repo = event_repo
        self._locks: dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._locks_guard = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks[user_id]

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def detail(self, performance: Performance) -> PerformanceDetail:
        """Join a performance with its artist, stage and event names."""
        artist = self.artist_repo.get(performance.artist_id)
        stage = self.stage_repo.get(performance.stage_id)
        event = self.event_repo.get(performance.event_id)
        return PerformanceDetail(
            **performance.model_dump(),
            artist_name=artist.name if artist else None,
            stage_name=stage.name if stage else None,
            event_name=event.name if event else None,
        )

    def resolve_performance(self, performance_id: str) -> PerformanceDetail:
        performance = self.performance_repo.get(performance_id)
        if performance is None:
            raise PerformanceNotFoundError(performance_id)
        return self.detail(performance)

    def event_lineup(self, event_id: str) -> list[PerformanceDetail]:
        return [self.detail(p) for p in self.performance_repo.list_for_event(event_id)]

    def user_schedule(self, user_id: str) -> list[PerformanceDetail]:
        """Return the user's scheduled performances ordered by start time."""
        resolved: list[PerformanceDetail] = []
        for entry in self.schedule_repo.list_for_user(user_id):
            performance = self.performance_repo.get(entry.performance_id)
            if performance is None:
                continue
            resolved.append(self.detail(performance))
        resolved.sort(key=lambda p: (p.start_time, p.id))
        return resolved

    # ------------------------------------------------------------------
    # Conflict checks
    # ------------------------------------------------------------------

    def check_conflicts(self, user_id: str, performance_id: str) -> list[Conflict]:
        """Return the scheduled performances that overlap the given one."""
        candidate = self.resolve_performance(performance_id)
        return find_conflicts(candidate, self.user_schedule(user_id))

    def schedule_clashes(self, user_id: str) -> list[ScheduleClash]:
        return find_schedule_clashes(self.user_schedule(user_id))

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_to_schedule(self, user_id: str, performance_id: str) -> tuple[ScheduleEntry, bool]:
        """Add a performance to the user's schedule.

        Returns ``(entry, created)``. Adding an already scheduled performance
        returns the existing entry with ``created`` False. Raises
        ``ScheduleConflictError`` when the performance overlaps the schedule.
        """
        candidate = self.resolve_performance(performance_id)
        with self._user_lock(user_id):
            existing = self.schedule_repo.get(user_id, performance_id)
            if existing is not None:
                return existing, False

            conflicts = find_conflicts(candidate, self.user_schedule(user_id))
            if conflicts:
                logger.info(
                    "Rejected performance %s for user %s: conflicts with %s",
                    performance_id,
                    user_id,
                    [c.id for c in conflicts],
                )
                raise ScheduleConflictError(performance_id, conflicts)

            entry = self.schedule_repo.add(user_id, performance_id)
        logger.info("Scheduled performance %s for user %s", performance_id, user_id)
        return entry, True

    def remove_from_schedule(self, user_id: str, performance_id: str) -> None:
        with self._user_lock(user_id):
            removed = self.schedule_repo.remove(user_id, performance_id)
        if removed:
            logger.info("Removed performance %s from user %s", performance_id, user_id)


# ---------------------------------------------------------------------------
# Display helpers
# ---------------------------------------------------------------------------


def group_by_day(
    performances: Iterable[PerformanceDetail],
    local_tz: tzinfo,
    clashing_ids: Collection[str] = (),
) -> list[TimetableDay]:
    """Bucket performances by local calendar date, each day sorted by start.

    Performances whose id is in *clashing_ids* are flagged ``has_conflict``.
    """
    days: dict[str, list[TimetableSlot]] = defaultdict(list)
    for performance in performances:
        day = performance.start_time.astimezone(local_tz).strftime("%Y-%m-%d")
        days[day].append(
            TimetableSlot(
                **performance.model_dump(),
                time_range=format_time_range(
                    performance.start_time, performance.end_time, local_tz
                ),
                has_conflict=performance.id in clashing_ids,
            )
        )
    return [
        TimetableDay(
            date=day,
            performances=sorted(slots, key=lambda p: (p.start_time, p.id)),
        )
        for day, slots in sorted(days.items())
    ]


def build_timetable(
    performances: list[PerformanceDetail], local_tz: tzinfo
) -> Timetable:
    """Group a resolved schedule by day and flag adjacent clashes."""
    clashes = find_schedule_clashes(performances)
    clashing_ids = {c.earlier.id for c in clashes} | {c.later.id for c in clashes}
    return Timetable(
        days=group_by_day(performances, local_tz, clashing_ids),
        clashes=clashes,
    )


def _clock(value: datetime, local_tz: tzinfo) -> str:
    return value.astimezone(local_tz).strftime("%I:%M %p").lstrip("0")


def format_time_range(start: datetime, end: datetime, local_tz: tzinfo) -> str:
    """Render a slot as e.g. ``"7:00 PM - 8:30 PM"`` in the festival timezone."""
    return f"{_clock(start, local_tz)} - {_clock(end, local_tz)}"

"""Service for detecting time conflicts between scheduled performances."""

from __future__ import annotations

from collections.abc import Iterable

from festival.domain.models import Conflict, PerformanceDetail, ScheduleClash


def overlaps(a: PerformanceDetail, b: PerformanceDetail) -> bool:
    """Return True when the half-open slots ``[start, end)`` of a and b overlap.

    Back-to-back sets (one ends exactly when the other starts) do not overlap.
    """
    return a.start_time < b.end_time and a.end_time > b.start_time


def to_conflict(performance: PerformanceDetail) -> Conflict:
    return Conflict(
        id=performance.id,
        artist_name=performance.artist_name,
        stage_name=performance.stage_name,
        start_time=performance.start_time,
        end_time=performance.end_time,
    )


def find_conflicts(
    candidate: PerformanceDetail,
    scheduled: Iterable[PerformanceDetail],
) -> list[Conflict]:
    """Return the scheduled performances that overlap *candidate*.

    Results keep the order of *scheduled*; duplicates are reported once each.
    An empty list means no conflict.
    """
    return [to_conflict(p) for p in scheduled if overlaps(candidate, p)]


def find_schedule_clashes(schedule: Iterable[PerformanceDetail]) -> list[ScheduleClash]:
    """Report overlaps between consecutive performances of a whole schedule.

    Performances are ordered by ``(start_time, id)`` and only neighbouring
    pairs are compared, so an entry that overlaps one two places later is
    reported only through its neighbours.
    """
    ordered = sorted(schedule, key=lambda p: (p.start_time, p.id))
    clashes: list[ScheduleClash] = []
    for current, following in zip(ordered, ordered[1:]):
        if current.end_time > following.start_time:
            clashes.append(
                ScheduleClash(earlier=to_conflict(current), later=to_conflict(following))
            )
    return clashes

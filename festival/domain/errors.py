"""Business errors raised by the schedule and social services."""

from __future__ import annotations

from festival.domain.models import Conflict


class PerformanceNotFoundError(LookupError):
    """Raised when a performance id does not resolve to a record."""

    def __init__(self, performance_id: str) -> None:
        super().__init__(f"Performance not found: {performance_id}")
        self.performance_id = performance_id


class ScheduleConflictError(Exception):
    """Raised when a performance overlaps the user's existing schedule."""

    def __init__(self, performance_id: str, conflicts: list[Conflict]) -> None:
        super().__init__(
            f"Performance {performance_id} conflicts with "
            f"{len(conflicts)} scheduled performance(s)"
        )
        self.performance_id = performance_id
        self.conflicts = conflicts


class SelfFollowError(ValueError):
    """Raised when a user tries to follow themself."""

    def __init__(self, user_id: str) -> None:
        super().__init__("Users cannot follow themselves")
        self.user_id = user_id

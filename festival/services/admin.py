"""Service for admin analytics and user management."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from festival.domain.models import AdminAnalytics, EventStatus, User, UserWithStats
from festival.repos.memory import AttendanceRepository, EventRepository, UserRepository

logger = logging.getLogger(__name__)

RECENT_LIMIT = 5


def analytics(
    event_repo: EventRepository,
    user_repo: UserRepository,
    attendance_repo: AttendanceRepository,
) -> AdminAnalytics:
    events = event_repo.list_all()
    users = user_repo.list_all()
    return AdminAnalytics(
        total_events=len(events),
        published_events=sum(1 for e in events if e.status == EventStatus.PUBLISHED),
        total_users=len(users),
        total_attendees=attendance_repo.count(),
        recent_events=sorted(events, key=lambda e: e.created_at, reverse=True)[:RECENT_LIMIT],
        recent_users=users[:RECENT_LIMIT],
    )


def users_with_stats(
    user_repo: UserRepository, attendance_repo: AttendanceRepository
) -> list[UserWithStats]:
    return [
        UserWithStats(
            **user.model_dump(),
            events_attended=len(attendance_repo.list_for_user(user.id)),
        )
        for user in user_repo.list_all()
    ]


def set_user_active(user: User, is_active: bool) -> User:
    user.is_active = is_active
    user.updated_at = datetime.now(timezone.utc)
    logger.info("User %s is_active set to %s", user.id, is_active)
    return user

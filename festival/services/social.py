"""Service for attendance and friend (follow) relationships."""

from __future__ import annotations

import logging

from festival.domain.errors import SelfFollowError
from festival.domain.models import EventAttendees, SocialAttendee, User, UserConnection
from festival.repos.memory import AttendanceRepository, ConnectionRepository, UserRepository

logger = logging.getLogger(__name__)


def toggle_attendance(
    user_id: str, event_id: str, attendance_repo: AttendanceRepository
) -> bool:
    """Flip the user's attendance at an event; return whether they now attend."""
    attendance = attendance_repo.toggle(user_id, event_id)
    attending = attendance is not None
    logger.info(
        "User %s %s event %s",
        user_id,
        "attending" if attending else "no longer attending",
        event_id,
    )
    return attending


def user_connections(
    user_id: str, user_repo: UserRepository, connection_repo: ConnectionRepository
) -> list[User]:
    """Return the users that *user_id* follows."""
    followed = (user_repo.get(uid) for uid in connection_repo.following_ids(user_id))
    return [u for u in followed if u is not None]


def follow_user(
    follower_id: str, following_id: str, connection_repo: ConnectionRepository
) -> UserConnection:
    if follower_id == following_id:
        raise SelfFollowError(follower_id)
    return connection_repo.follow(follower_id, following_id)


def event_attendees(
    event_id: str,
    current_user_id: str,
    user_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    connection_repo: ConnectionRepository,
) -> EventAttendees:
    """Split an event's attendees into friends and everyone else.

    "Friends" are the users the current user follows. The current user is
    counted in the total but listed in neither group.
    """
    attendees = [
        user
        for user in (user_repo.get(a.user_id) for a in attendance_repo.list_for_event(event_id))
        if user is not None
    ]
    friend_ids = set(connection_repo.following_ids(current_user_id))

    friends: list[SocialAttendee] = []
    others: list[SocialAttendee] = []
    for user in attendees:
        if user.id == current_user_id:
            continue
        is_friend = user.id in friend_ids
        entry = SocialAttendee(**user.model_dump(), is_friend=is_friend)
        (friends if is_friend else others).append(entry)

    return EventAttendees(
        total_attendees=len(attendees),
        friends_attending=friends,
        other_attendees=others,
    )

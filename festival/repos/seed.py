"""Sample festival data for local development."""

from __future__ import annotations

import logging
from datetime import timedelta

from dateutil import parser

from festival.domain.models import Artist, Event, EventStatus, Performance, Stage
from festival.repos.memory import (
    ArtistRepository,
    EventRepository,
    PerformanceRepository,
    StageRepository,
)

logger = logging.getLogger(__name__)

_ARTISTS = [
    ("Deadmau5", "Electronic music producer and DJ known for progressive house and electro house", "@deadmau5"),
    ("Disclosure", "English electronic music duo consisting of brothers Howard and Guy Lawrence", "@disclosure"),
    ("ODESZA", "American electronic music duo from Seattle, known for melodic dubstep and future bass", "@odesza"),
    ("Flume", "Australian record producer, musician and DJ known for electronic and ambient music", "@flumemusic"),
    ("Porter Robinson", "American DJ and music producer specializing in electronic dance music", "@porterrobinson"),
    ("Madeon", "French musician, DJ, songwriter and record producer", "@madeon"),
]

_EVENTS = [
    (
        "Electric Dreams Festival",
        "A three-day celebration of electronic music culture.",
        "Golden Gate Park, San Francisco",
        "2024-08-15T16:00:00Z",
        "2024-08-17T23:00:00Z",
    ),
    (
        "Neon Nights Music Festival",
        "The future of electronic music with immersive light shows across multiple stages.",
        "Central Park, New York",
        "2024-09-20T17:00:00Z",
        "2024-09-22T23:00:00Z",
    ),
    (
        "Digital Euphoria",
        "A journey through electronic soundscapes with cutting-edge stage production.",
        "Millennium Park, Chicago",
        "2024-10-10T18:00:00Z",
        "2024-10-12T23:00:00Z",
    ),
]

_STAGES = [
    ("Main Stage", "The primary performance area with the biggest acts", 15000),
    ("Electronic Stage", "Dedicated electronic and techno music venue", 8000),
    ("Discovery Stage", "Showcase for emerging and underground artists", 3000),
]

# (day offset, artist index, stage index, start hours, end hours, headliner)
_LINEUP = [
    (0, 0, 0, 3.0, 4.5, True),
    (0, 1, 1, 2.0, 3.5, False),
    (0, 2, 2, 1.0, 2.0, False),
    (1, 3, 0, 3.0, 4.5, True),
    (1, 4, 1, 2.0, 3.5, False),
    (1, 5, 2, 1.0, 2.0, False),
]


def seed_festival_data(
    event_repo: EventRepository,
    artist_repo: ArtistRepository,
    stage_repo: StageRepository,
    performance_repo: PerformanceRepository,
) -> dict[str, int]:
    """Load three published festivals with stages and a two-day lineup.

    Returns how many records of each kind were created.
    """
    artists = [
        Artist(name=name, bio=bio, social_links={"twitter": handle, "instagram": handle})
        for name, bio, handle in _ARTISTS
    ]
    for artist in artists:
        artist_repo.add(artist)

    counts = {"artists": len(artists), "events": 0, "stages": 0, "performances": 0}
    for name, description, location, start, end in _EVENTS:
        event = Event(
            name=name,
            description=description,
            location=location,
            start_date=parser.isoparse(start),
            end_date=parser.isoparse(end),
            status=EventStatus.PUBLISHED,
        )
        event_repo.add(event)
        counts["events"] += 1

        stages = [
            Stage(event_id=event.id, name=s_name, description=s_desc, capacity=capacity)
            for s_name, s_desc, capacity in _STAGES
        ]
        for stage in stages:
            stage_repo.add(stage)
        counts["stages"] += len(stages)

        for day, artist_idx, stage_idx, start_h, end_h, headliner in _LINEUP:
            day_start = event.start_date + timedelta(days=day)
            performance_repo.add(
                Performance(
                    event_id=event.id,
                    artist_id=artists[artist_idx].id,
                    stage_id=stages[stage_idx].id,
                    start_time=day_start + timedelta(hours=start_h),
                    end_time=day_start + timedelta(hours=end_h),
                    is_headliner=headliner,
                )
            )
            counts["performances"] += 1

    logger.info("Seeded festival data: %s", counts)
    return counts

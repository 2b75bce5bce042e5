"""Domain-event handlers, wired up at application startup."""

from __future__ import annotations

import logging

from festival.domain.bus import EventBus
from festival.domain.events import FestivalDeleted
from festival.repos.memory import (
    AttendanceRepository,
    PerformanceRepository,
    ScheduleRepository,
    StageRepository,
)

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Subscribes catalog handlers to the bus with access to the repositories."""

    def __init__(
        self,
        bus: EventBus,
        stage_repo: StageRepository,
        performance_repo: PerformanceRepository,
        schedule_repo: ScheduleRepository,
        attendance_repo: AttendanceRepository,
    ) -> None:
        self.bus = bus
        self.stage_repo = stage_repo
        self.performance_repo = performance_repo
        self.schedule_repo = schedule_repo
        self.attendance_repo = attendance_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(FestivalDeleted, self.on_festival_deleted)

    def on_festival_deleted(self, event: FestivalDeleted) -> None:
        # The removed performance ids drive the schedule cleanup.
        performance_ids = self.performance_repo.delete_for_event(event.event_id)
        dropped_entries = self.schedule_repo.remove_performances(performance_ids)
        stage_ids = self.stage_repo.delete_for_event(event.event_id)
        self.attendance_repo.delete_for_event(event.event_id)

        logger.info(
            "Cascaded delete of event %s: %d performances, %d stages, %d schedule entries",
            event.event_id,
            len(performance_ids),
            len(stage_ids),
            dropped_entries,
        )

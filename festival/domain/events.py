"""Domain events emitted when the festival catalog changes."""

from __future__ import annotations

from pydantic import BaseModel


class FestivalDeleted(BaseModel):
    """Fired after an Event (festival) record has been removed."""

    event_id: str

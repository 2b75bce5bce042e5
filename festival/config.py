"""Runtime settings read from the environment."""

from __future__ import annotations

import os

from dateutil import tz

LOG_LEVEL = (os.getenv("FESTIVAL_LOG_LEVEL") or "INFO").upper()

# Load the sample festivals on start-up when set to a truthy value.
SEED_DATA = (os.getenv("FESTIVAL_SEED_DATA") or "").lower() in {"1", "true", "yes"}

TIMEZONE_NAME = os.getenv("FESTIVAL_TIMEZONE") or "UTC"
FESTIVAL_TZ = tz.gettz(TIMEZONE_NAME)
if FESTIVAL_TZ is None:
    raise RuntimeError(f"FESTIVAL_TIMEZONE is not a known timezone: {TIMEZONE_NAME}")

from __future__ import annotations

import logging
from datetime import tzinfo
from typing import Optional

from habitflow import dates
from habitflow.constants import WINDOW_CURRENT, WINDOW_FUTURE, WINDOW_PAST
from habitflow.errors import WindowViolation

logger = logging.getLogger(__name__)


def window_for(key: str, today_key: str) -> str:
    relation = dates.compare(key, today_key)
    if relation == dates.BEFORE:
        return WINDOW_PAST
    if relation == dates.AFTER:
        return WINDOW_FUTURE
    return WINDOW_CURRENT


class EditWindowPolicy:
    """Completion may only change on the current local day.

    "Today" is recomputed on every decision so a session left open across
    midnight moves its window with the clock.
    """

    def __init__(self, zone: Optional[tzinfo] = None, clock: Optional[dates.Clock] = None):
        self.zone = zone
        self.clock = clock

    def today(self) -> str:
        return dates.today(self.zone, self.clock)

    def classify(self, key: str) -> str:
        return window_for(dates.parse_date_key(key), self.today())

    def can_mutate(self, key: str) -> bool:
        return self.classify(key) == WINDOW_CURRENT

    def ensure_mutable(self, key: str) -> str:
        window = self.classify(key)
        if window != WINDOW_CURRENT:
            logger.info("Rejected change for %s (%s)", key, window)
            raise WindowViolation(dates.parse_date_key(key), window)
        return key

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


class Topic(str, Enum):
    HABITS_CHANGED = "habits.changed"
    MUTATION_FAILED = "mutation.failed"
    PROFILE_UPDATED = "profile.updated"
    THEME_CHANGED = "theme.changed"


@dataclass(frozen=True)
class HabitsChanged:
    habits: Tuple[Any, ...]
    reason: str


@dataclass(frozen=True)
class MutationFailed:
    operation: str
    notice: str
    error: Exception
    habit_id: Optional[str] = None
    date_key: Optional[str] = None


@dataclass(frozen=True)
class ProfileUpdated:
    profile: Any


@dataclass(frozen=True)
class ThemeChanged:
    theme: str
    previous: str


PAYLOAD_TYPES = {
    Topic.HABITS_CHANGED: HabitsChanged,
    Topic.MUTATION_FAILED: MutationFailed,
    Topic.PROFILE_UPDATED: ProfileUpdated,
    Topic.THEME_CHANGED: ThemeChanged,
}


class EventChannel:
    """In-process publish/subscribe with one payload type per topic."""

    def __init__(self):
        self._subscribers: Dict[Topic, List[Callable[[Any], None]]] = {topic: [] for topic in Topic}

    def subscribe(self, topic, handler: Callable[[Any], None]) -> Callable[[], None]:
        handlers = self._subscribers[Topic(topic)]
        handlers.append(handler)

        def unsubscribe():
            if handler in handlers:
                handlers.remove(handler)

        return unsubscribe

    def publish(self, topic, payload) -> None:
        topic = Topic(topic)
        expected = PAYLOAD_TYPES[topic]
        if not isinstance(payload, expected):
            raise TypeError(f"{topic.value} expects {expected.__name__}, got {type(payload).__name__}")
        for handler in list(self._subscribers[topic]):
            try:
                handler(payload)
            except Exception:
                logger.exception("Subscriber for %s failed", topic.value)

    def subscriber_count(self, topic) -> int:
        return len(self._subscribers[Topic(topic)])

from __future__ import annotations

import logging
from typing import List, Optional

from habitflow import dates
from habitflow.constants import HABIT_TITLE_MAX_LENGTH
from habitflow.data import habits_api
from habitflow.data.schemas import Habit
from habitflow.edit_window import EditWindowPolicy
from habitflow.errors import HabitflowError, HabitNotFound, MalformedInput
from habitflow.events import EventChannel, HabitsChanged, MutationFailed, Topic
from habitflow.state.optimistic import OptimisticMutationController

logger = logging.getLogger(__name__)

COLLECTION_KEY = ("collection",)


def normalize_title(raw_value) -> str:
    clean = " ".join(str(raw_value or "").split())[:HABIT_TITLE_MAX_LENGTH].strip()
    if not clean:
        raise MalformedInput("Habit title cannot be empty")
    return clean


class HabitCollectionStore:
    """The session's habits, changed only through optimistic transactions.

    Readers get deep copies; the list held here is never handed out.
    Mutations of one habit share a key, so they run one at a time.
    """

    def __init__(
        self,
        remote=habits_api,
        policy: Optional[EditWindowPolicy] = None,
        channel: Optional[EventChannel] = None,
        controller: Optional[OptimisticMutationController] = None,
    ):
        self._remote = remote
        self._policy = policy or EditWindowPolicy()
        self._channel = channel or EventChannel()
        self._controller = controller or OptimisticMutationController(on_change=self._publish_change)
        self._habits: List[Habit] = []

    @property
    def policy(self) -> EditWindowPolicy:
        return self._policy

    @property
    def channel(self) -> EventChannel:
        return self._channel

    @property
    def controller(self) -> OptimisticMutationController:
        return self._controller

    def _publish_change(self, reason):
        self._channel.publish(
            Topic.HABITS_CHANGED,
            HabitsChanged(habits=tuple(self.list()), reason=reason),
        )

    def _publish_failure(self, operation, exc, habit_id=None, date_key=None):
        notice = getattr(exc, "notice", None) or str(exc)
        self._channel.publish(
            Topic.MUTATION_FAILED,
            MutationFailed(
                operation=operation,
                notice=notice,
                error=exc,
                habit_id=habit_id,
                date_key=date_key,
            ),
        )

    def _find(self, habit_id) -> Optional[Habit]:
        for habit in self._habits:
            if habit.id == habit_id:
                return habit
        return None

    def _index(self, habit_id) -> int:
        for idx, habit in enumerate(self._habits):
            if habit.id == habit_id:
                return idx
        return -1

    def _require(self, habit_id) -> Habit:
        habit = self._find(habit_id)
        if habit is None:
            raise HabitNotFound(habit_id)
        return habit

    # Reads

    def list(self) -> List[Habit]:
        return [habit.snapshot() for habit in self._habits]

    def get(self, habit_id) -> Habit:
        return self._require(habit_id).snapshot()

    def __len__(self):
        return len(self._habits)

    def completed_on(self, date_key) -> List[Habit]:
        key = dates.parse_date_key(date_key)
        return [habit.snapshot() for habit in self._habits if habit.is_done(key)]

    def completion_count(self, date_key) -> int:
        return len(self.completed_on(date_key))

    async def load(self) -> List[Habit]:
        habits = await self._remote.fetch_habits()
        self._habits = [habit.snapshot() for habit in habits]
        logger.debug("Loaded %d habits", len(self._habits))
        self._publish_change("load")
        return self.list()

    def clear(self) -> None:
        self._habits = []
        self._publish_change("clear")

    # Mutations

    async def toggle(self, habit_id, date_key) -> bool:
        """Flip completion for ``date_key``; returns the new state."""
        try:
            key = dates.parse_date_key(date_key)
            self._policy.ensure_mutable(key)
            self._require(habit_id)
        except HabitflowError as exc:
            self._publish_failure("toggle", exc, habit_id=habit_id, date_key=str(date_key))
            raise

        def guard():
            self._policy.ensure_mutable(key)
            self._require(habit_id)

        def read():
            return self._require(habit_id).logs

        def write(logs):
            habit = self._find(habit_id)
            if habit is not None:
                habit.logs = logs

        def flip(logs):
            logs[key] = not logs.get(key, False)
            return logs

        try:
            await self._controller.mutate(
                ("habit", habit_id),
                read=read,
                write=write,
                apply=flip,
                op=lambda: self._remote.toggle_habit(habit_id, key),
                guard=guard,
                label="toggle",
            )
        except HabitflowError as exc:
            self._publish_failure("toggle", exc, habit_id=habit_id, date_key=key)
            raise
        habit = self._find(habit_id)
        return habit.is_done(key) if habit is not None else False

    async def create(self, title) -> Habit:
        clean = normalize_title(title)

        def write(habit):
            if habit is not None and self._find(habit.id) is None:
                self._habits.append(habit)

        try:
            created = await self._controller.mutate(
                ("create", clean.lower()),
                read=lambda: None,
                write=write,
                op=lambda: self._remote.create_habit(clean),
                reconcile=lambda habit: habit.snapshot(),
                label="create",
            )
        except HabitflowError as exc:
            self._publish_failure("create", exc)
            raise
        return created.snapshot()

    async def rename(self, habit_id, title) -> Habit:
        clean = normalize_title(title)
        self._require(habit_id)

        def write(value):
            habit = self._find(habit_id)
            if habit is not None:
                habit.title = value

        try:
            await self._controller.mutate(
                ("habit", habit_id),
                read=lambda: self._require(habit_id).title,
                write=write,
                apply=lambda _previous: clean,
                op=lambda: self._remote.rename_habit(habit_id, clean),
                reconcile=lambda habit: habit.title,
                guard=lambda: self._require(habit_id),
                label="rename",
            )
        except HabitflowError as exc:
            self._publish_failure("rename", exc, habit_id=habit_id)
            raise
        return self.get(habit_id)

    async def delete(self, habit_id) -> None:
        self._require(habit_id)

        def read():
            idx = self._index(habit_id)
            return None if idx < 0 else (idx, self._habits[idx])

        def write(entry):
            idx = self._index(habit_id)
            if entry is None:
                if idx >= 0:
                    del self._habits[idx]
                return
            if idx < 0:
                position, habit = entry
                self._habits.insert(min(position, len(self._habits)), habit)

        try:
            await self._controller.mutate(
                ("habit", habit_id),
                read=read,
                write=write,
                apply=lambda _entry: None,
                op=lambda: self._remote.delete_habit(habit_id),
                guard=lambda: self._require(habit_id),
                label="delete",
            )
        except HabitflowError as exc:
            self._publish_failure("delete", exc, habit_id=habit_id)
            raise

    async def apply_template(self, template_id) -> List[Habit]:
        def write(habits):
            self._habits = [habit.snapshot() for habit in habits]

        try:
            await self._controller.mutate(
                COLLECTION_KEY,
                read=lambda: None,
                write=write,
                op=lambda: self._remote.apply_template(template_id),
                reconcile=lambda habits: habits,
                label="template.apply",
            )
        except HabitflowError as exc:
            self._publish_failure("template.apply", exc)
            raise
        return self.list()

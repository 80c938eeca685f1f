from __future__ import annotations

from habitflow.constants import WINDOW_NOTICES


class HabitflowError(Exception):
    """Base class for every error the client recovers from locally."""


class MalformedInput(HabitflowError, ValueError):
    pass


class WindowViolation(HabitflowError, ValueError):
    """A completion change was requested for a day outside the edit window."""

    def __init__(self, date_key: str, window: str):
        self.date_key = date_key
        self.window = window
        self.notice = WINDOW_NOTICES.get(window, "Only today can be updated.")
        super().__init__(f"{date_key}: {self.notice}")


class RemoteRejection(HabitflowError, RuntimeError):
    """The remote service failed or refused a request."""

    def __init__(self, message: str, status_code: int | None = None, detail=None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)

    @property
    def notice(self) -> str:
        if isinstance(self.detail, str) and self.detail.strip():
            return self.detail.strip()
        if isinstance(self.detail, dict):
            for key in ("message", "detail", "error"):
                value = self.detail.get(key)
                if value:
                    return str(value)
        return "Failed to update, please try again."


class NotAuthenticated(RemoteRejection):
    pass


class HabitNotFound(HabitflowError, KeyError):
    def __init__(self, habit_id: str):
        self.habit_id = habit_id
        super().__init__(habit_id)

    def __str__(self):
        return f"Habit not found: {self.habit_id}"

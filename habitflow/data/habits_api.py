from __future__ import annotations

from typing import List
from urllib.parse import quote

from habitflow.constants import HABITS_PATH, TEMPLATES_PATH
from habitflow.data import api_client
from habitflow.data.schemas import Habit, HabitCreate


def _habit_path(habit_id):
    return f"{HABITS_PATH}/{quote(str(habit_id), safe='')}"


def _habit_list(payload) -> List[Habit]:
    return [Habit.model_validate(item) for item in (payload or [])]


async def fetch_habits() -> List[Habit]:
    return _habit_list(await api_client.async_request("GET", HABITS_PATH))


async def create_habit(title: str) -> Habit:
    payload = await api_client.async_request("POST", HABITS_PATH, json=HabitCreate(title=title).to_payload())
    return Habit.model_validate(payload)


async def rename_habit(habit_id: str, title: str) -> Habit:
    payload = await api_client.async_request("PUT", _habit_path(habit_id), json=HabitCreate(title=title).to_payload())
    return Habit.model_validate(payload)


async def delete_habit(habit_id: str) -> None:
    await api_client.async_request("DELETE", _habit_path(habit_id))


async def toggle_habit(habit_id: str, date_key: str) -> None:
    await api_client.async_request("POST", f"{_habit_path(habit_id)}/toggle", params={"date": date_key})


async def apply_template(template_id: str) -> List[Habit]:
    path = f"{TEMPLATES_PATH}/{quote(str(template_id), safe='')}/apply"
    return _habit_list(await api_client.async_request("POST", path))

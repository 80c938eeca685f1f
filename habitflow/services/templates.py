from __future__ import annotations

from typing import List
from urllib.parse import quote

from habitflow.constants import TEMPLATES_PATH
from habitflow.data import api_client
from habitflow.data.schemas import Habit, HabitTemplate, HabitTemplateCreate
from habitflow.errors import MalformedInput
from habitflow.state.habit_store import HabitCollectionStore, normalize_title


class TemplateService:
    def __init__(self, store: HabitCollectionStore):
        self._store = store

    def list(self) -> List[HabitTemplate]:
        payload = api_client.request("GET", TEMPLATES_PATH)
        return [HabitTemplate.model_validate(item) for item in (payload or [])]

    def create(self, name, habit_titles) -> HabitTemplate:
        clean_name = " ".join(str(name or "").split())
        if not clean_name:
            raise MalformedInput("Template name cannot be empty")
        titles = []
        for raw in habit_titles or []:
            if not str(raw or "").strip():
                continue
            titles.append(normalize_title(raw))
        if not titles:
            raise MalformedInput("Add at least one habit to the template")
        body = HabitTemplateCreate(name=clean_name, habit_titles=titles).to_payload()
        return HabitTemplate.model_validate(api_client.request("POST", TEMPLATES_PATH, json=body))

    def delete(self, template_id) -> None:
        api_client.request("DELETE", f"{TEMPLATES_PATH}/{quote(str(template_id), safe='')}")

    async def apply(self, template_id) -> List[Habit]:
        return await self._store.apply_template(template_id)

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class Habit(WireModel):
    id: str
    title: str
    logs: Dict[str, bool] = Field(default_factory=dict)
    user_id: Optional[str] = Field(None, alias="userId")
    created_at: Optional[datetime] = Field(None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        return str(value) if isinstance(value, int) else value

    @field_validator("logs", mode="before")
    @classmethod
    def _logs_default(cls, value):
        return {} if value is None else value

    def is_done(self, date_key: str) -> bool:
        return bool(self.logs.get(date_key, False))

    def snapshot(self) -> "Habit":
        return self.model_copy(deep=True)


class HabitCreate(WireModel):
    title: str


class HabitTemplate(WireModel):
    id: str
    name: str
    habit_titles: List[str] = Field(default_factory=list, alias="habitTitles")

    @field_validator("habit_titles", mode="before")
    @classmethod
    def _titles_default(cls, value):
        return [] if value is None else value


class HabitTemplateCreate(WireModel):
    name: str
    habit_titles: List[str] = Field(default_factory=list, alias="habitTitles")


class UserProfile(WireModel):
    email: Optional[str] = None
    username: Optional[str] = None
    name: Optional[str] = None
    age: Optional[str] = None
    height: Optional[str] = None
    weight: Optional[str] = None
    profile_picture: Optional[str] = Field(None, alias="profilePicture")


class Credentials(WireModel):
    email: str
    password: str

from __future__ import annotations

import logging

from habitflow.constants import PROFILE_PATH
from habitflow.data import api_client
from habitflow.data.schemas import UserProfile
from habitflow.events import EventChannel, ProfileUpdated, Topic
from habitflow.services.auth import TokenStore
from habitflow.state.habit_store import HabitCollectionStore

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, channel: EventChannel, tokens: TokenStore, store: HabitCollectionStore):
        self._channel = channel
        self._tokens = tokens
        self._store = store

    def get(self) -> UserProfile:
        return UserProfile.model_validate(api_client.request("GET", PROFILE_PATH) or {})

    def update(self, profile: UserProfile) -> UserProfile:
        payload = api_client.request("PUT", PROFILE_PATH, json=profile.to_payload())
        saved = UserProfile.model_validate(payload) if isinstance(payload, dict) else profile
        self._channel.publish(Topic.PROFILE_UPDATED, ProfileUpdated(profile=saved))
        return saved

    def delete_account(self) -> None:
        api_client.request("DELETE", PROFILE_PATH)
        self._tokens.clear()
        self._store.clear()
        logger.info("Account deleted")

    def clear_data(self) -> None:
        """Remove every habit, template and log; the account stays."""
        api_client.request("DELETE", f"{PROFILE_PATH}/data")
        self._store.clear()

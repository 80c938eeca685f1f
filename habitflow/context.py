from dataclasses import dataclass
from typing import List, Optional

from habitflow import calendar_grid, dates
from habitflow.data import api_client
from habitflow.edit_window import EditWindowPolicy
from habitflow.events import EventChannel
from habitflow.services.auth import AuthService, TokenStore
from habitflow.services.preferences import Preferences
from habitflow.services.profile import ProfileService
from habitflow.services.templates import TemplateService
from habitflow.settings import Settings, get_settings
from habitflow.state.habit_store import HabitCollectionStore


@dataclass
class ClientContext:
    settings: Settings
    channel: EventChannel
    tokens: TokenStore
    auth: AuthService
    policy: EditWindowPolicy
    store: HabitCollectionStore
    templates: TemplateService
    profile: ProfileService
    preferences: Preferences

    def month_grid(self, month: int, year: int) -> calendar_grid.MonthGrid:
        return calendar_grid.build_month_grid(month, year, self.policy.zone, self.policy.clock)

    def week_strip(self, reference=None) -> List[str]:
        return calendar_grid.build_week_strip(reference, self.policy.zone, self.policy.clock)

    def month_cursor(self) -> calendar_grid.MonthCursor:
        return calendar_grid.MonthCursor.current(self.policy.zone, self.policy.clock)


def build_context(settings: Optional[Settings] = None, clock: Optional[dates.Clock] = None, remote=None) -> ClientContext:
    settings = settings or get_settings()
    channel = EventChannel()
    tokens = TokenStore(settings.api_token)
    api_client.configure(token_getter=tokens.get)
    policy = EditWindowPolicy(zone=settings.observer_zone(), clock=clock)
    if remote is None:
        store = HabitCollectionStore(policy=policy, channel=channel)
    else:
        store = HabitCollectionStore(remote=remote, policy=policy, channel=channel)
    return ClientContext(
        settings=settings,
        channel=channel,
        tokens=tokens,
        auth=AuthService(tokens),
        policy=policy,
        store=store,
        templates=TemplateService(store),
        profile=ProfileService(channel, tokens, store),
        preferences=Preferences(channel),
    )

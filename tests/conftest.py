import asyncio
import json
from datetime import datetime, timedelta
from types import SimpleNamespace

import httpx
import pytest
import requests

from habitflow.data import api_client
from habitflow.data.schemas import Habit
from habitflow.edit_window import EditWindowPolicy
from habitflow.errors import RemoteRejection
from habitflow.events import EventChannel, Topic
from habitflow.settings import reset_settings
from habitflow.state.habit_store import HabitCollectionStore

TODAY = "2025-06-10"


class MutableClock:
    def __init__(self, value):
        self.value = value

    def __call__(self):
        return self.value

    def advance(self, **kwargs):
        self.value = self.value + timedelta(**kwargs)


class FakeRemote:
    """Stands in for habitflow.data.habits_api."""

    def __init__(self, habits=None):
        self.habits = list(habits or [])
        self.calls = []
        self.fail = set()
        self.gate = None
        self.on_call = None
        self.templates = {}

    async def _call(self, name, *args):
        self.calls.append((name,) + args)
        if self.on_call is not None:
            self.on_call(name, *args)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if name in self.fail:
            raise RemoteRejection(f"{name} rejected", status_code=500, detail="Failed to update")

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]

    async def fetch_habits(self):
        await self._call("fetch")
        return [habit.snapshot() for habit in self.habits]

    async def create_habit(self, title):
        await self._call("create", title)
        return Habit(id=f"srv-{len(self.calls)}", title=title, logs={})

    async def rename_habit(self, habit_id, title):
        await self._call("rename", habit_id, title)
        return Habit(id=habit_id, title=title.upper(), logs={})

    async def delete_habit(self, habit_id):
        await self._call("delete", habit_id)

    async def toggle_habit(self, habit_id, date_key):
        await self._call("toggle", habit_id, date_key)

    async def apply_template(self, template_id):
        await self._call("apply", template_id)
        return [habit.snapshot() for habit in self.templates.get(template_id, [])]


@pytest.fixture
def clock():
    return MutableClock(datetime(2025, 6, 10, 9, 30))


@pytest.fixture
def policy(clock):
    return EditWindowPolicy(clock=clock)


@pytest.fixture
def channel():
    return EventChannel()


@pytest.fixture
def events(channel):
    received = {topic: [] for topic in Topic}
    for topic in Topic:
        channel.subscribe(topic, received[topic].append)
    return received


@pytest.fixture
def remote():
    return FakeRemote(
        [
            Habit(id="h1", title="Read", logs={}),
            Habit(id="h2", title="Walk", logs={"2025-06-09": True}),
        ]
    )


@pytest.fixture
def store(remote, policy, channel):
    habit_store = HabitCollectionStore(remote=remote, policy=policy, channel=channel)
    asyncio.run(habit_store.load())
    remote.calls.clear()
    return habit_store


def _to_requests_response(request, response):
    converted = requests.Response()
    converted.status_code = response.status_code
    converted.reason = response.reason_phrase
    converted._content = response.content
    converted.headers.update(response.headers)
    converted.url = str(request.url)
    converted.encoding = "utf-8"
    return converted


class StubSession:
    """Routes requests.Session calls into the same handler as the httpx mock."""

    def __init__(self, handler):
        self._handler = handler

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        request = httpx.Request(method, url, params=params, json=json, headers=headers)
        return _to_requests_response(request, self._handler(request))


@pytest.fixture
def mock_api(monkeypatch):
    monkeypatch.setenv("HABITFLOW_API_BASE_URL", "http://habits.test/api")
    monkeypatch.setenv("HABITFLOW_API_TOKEN", "test-token")
    reset_settings()
    routes = {}
    recorded = []

    def handler(request):
        recorded.append(request)
        responder = routes.get((request.method, request.url.path))
        if responder is None:
            return httpx.Response(404, json={"message": "not found"})
        if callable(responder):
            return responder(request)
        status, body = responder
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    api_client.reset()
    api_client.configure(session=StubSession(handler), async_transport=httpx.MockTransport(handler))
    yield SimpleNamespace(routes=routes, requests=recorded, body=lambda request: json.loads(request.content))
    api_client.reset()
    reset_settings()

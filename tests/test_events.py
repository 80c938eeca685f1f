import pytest

from habitflow.events import EventChannel, HabitsChanged, ThemeChanged, Topic


def test_publish_reaches_subscribers_of_that_topic_only():
    channel = EventChannel()
    themes, habits = [], []
    channel.subscribe(Topic.THEME_CHANGED, themes.append)
    channel.subscribe("habits.changed", habits.append)

    channel.publish(Topic.THEME_CHANGED, ThemeChanged(theme="light", previous="dark"))

    assert themes == [ThemeChanged(theme="light", previous="dark")]
    assert habits == []


def test_wrong_payload_type_is_rejected():
    channel = EventChannel()
    with pytest.raises(TypeError):
        channel.publish(Topic.THEME_CHANGED, HabitsChanged(habits=(), reason="load"))
    with pytest.raises(ValueError):
        channel.subscribe("no.such.topic", print)


def test_unsubscribe_stops_delivery():
    channel = EventChannel()
    received = []
    unsubscribe = channel.subscribe(Topic.THEME_CHANGED, received.append)
    unsubscribe()
    unsubscribe()
    channel.publish(Topic.THEME_CHANGED, ThemeChanged(theme="light", previous="dark"))
    assert received == []
    assert channel.subscriber_count(Topic.THEME_CHANGED) == 0


def test_failing_subscriber_does_not_block_others(caplog):
    channel = EventChannel()
    received = []

    def broken(_payload):
        raise RuntimeError("boom")

    channel.subscribe(Topic.THEME_CHANGED, broken)
    channel.subscribe(Topic.THEME_CHANGED, received.append)
    channel.publish(Topic.THEME_CHANGED, ThemeChanged(theme="light", previous="dark"))

    assert len(received) == 1
    assert "theme.changed" in caplog.text

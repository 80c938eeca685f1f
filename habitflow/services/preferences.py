from habitflow.constants import THEME_DARK, THEME_LIGHT, THEMES
from habitflow.errors import MalformedInput
from habitflow.events import EventChannel, ThemeChanged, Topic


class Preferences:
    def __init__(self, channel: EventChannel, theme=THEME_DARK):
        self._channel = channel
        if theme not in THEMES:
            raise MalformedInput(f"Unknown theme: {theme}")
        self._theme = theme

    @property
    def theme(self):
        return self._theme

    def set_theme(self, theme):
        if theme not in THEMES:
            raise MalformedInput(f"Unknown theme: {theme}")
        previous = self._theme
        if theme == previous:
            return
        self._theme = theme
        self._channel.publish(Topic.THEME_CHANGED, ThemeChanged(theme=theme, previous=previous))

    def toggle_theme(self):
        self.set_theme(THEME_LIGHT if self._theme == THEME_DARK else THEME_DARK)
        return self._theme

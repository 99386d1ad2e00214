"""Client-side key-value state such as the enrolled flag and theme."""

from dataclasses import dataclass, field
from typing import Protocol

ENROLLED_KEY = "pid_inscrito"
THEME_KEY = "pid_tema"

DARK_THEME = "dark"
LIGHT_THEME = "light"
DEFAULT_THEME = DARK_THEME


class KeyValueStore(Protocol):
    """Persistent client storage with string values."""

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    """Dictionary-backed store."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value for a key, if present."""
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value under a key."""
        self.values[key] = value


def is_enrolled(store: KeyValueStore) -> bool:
    """Return true when this client has submitted a registration."""
    return store.get(ENROLLED_KEY) == "true"


def mark_enrolled(store: KeyValueStore) -> None:
    """Remember that this client has submitted a registration."""
    store.set(ENROLLED_KEY, "true")


def current_theme(store: KeyValueStore) -> str:
    """Return the stored theme preference, falling back to the default."""
    theme = store.get(THEME_KEY)
    if theme in {DARK_THEME, LIGHT_THEME}:
        return theme
    return DEFAULT_THEME


def toggle_theme(store: KeyValueStore) -> str:
    """Flip the theme preference and return the new value."""
    theme = LIGHT_THEME if current_theme(store) == DARK_THEME else DARK_THEME
    store.set(THEME_KEY, theme)
    return theme

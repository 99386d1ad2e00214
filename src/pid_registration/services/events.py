"""In-process channel for auth state changes."""

from collections.abc import Callable

from pid_registration.domain.auth import AuthEvent

AuthEventCallback = Callable[[AuthEvent], None]


class Subscription:
    """Handle returned by subscribe; call unsubscribe on teardown."""

    def __init__(self, channel: "AuthEventChannel", callback: AuthEventCallback):
        self._channel = channel
        self._callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        """Stop receiving events. Safe to call more than once."""
        if self.active:
            self._channel._remove(self._callback)
            self.active = False


class AuthEventChannel:
    """Publishes SIGNED_IN / SIGNED_OUT events to subscribers."""

    def __init__(self) -> None:
        self._subscribers: list[AuthEventCallback] = []

    def subscribe(self, callback: AuthEventCallback) -> Subscription:
        """Register a callback for every subsequent event."""
        self._subscribers.append(callback)
        return Subscription(self, callback)

    def publish(self, event: AuthEvent) -> None:
        """Deliver an event to the current subscribers in order."""
        for callback in list(self._subscribers):
            callback(event)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _remove(self, callback: AuthEventCallback) -> None:
        self._subscribers.remove(callback)

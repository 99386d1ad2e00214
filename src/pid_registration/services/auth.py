"""Admin login, session tracking and route guarding."""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Protocol
from uuid import UUID

from pid_registration.domain.auth import (
    AdminSession,
    AuthEvent,
    AuthEventType,
    AuthTokens,
    AuthUser,
)
from pid_registration.services.errors import AccessDeniedError, RemoteServiceError
from pid_registration.services.events import AuthEventChannel, Subscription

_logger = logging.getLogger(__name__)


class AuthGateway(Protocol):
    """Interface to the hosted auth provider."""

    def sign_in_with_password(self, email: str, password: str) -> AuthTokens:
        """Authenticate credentials and return the new session tokens."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user owning a live access token, if any."""

    def sign_out(self, access_token: str, refresh_token: str) -> None:
        """Revoke a remote session."""


class AdminRepository(Protocol):
    """Persistence interface for the admin allow-list."""

    def is_admin(self, user_id: UUID) -> bool:
        """Return true when the identity is an administrator."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class AdminSessionStore:
    """In-memory registry of signed-in admin sessions."""

    def __init__(self) -> None:
        self._sessions: dict[str, AdminSession] = {}
        self._expired: dict[str, datetime] = {}

    def add(self, session: AdminSession) -> None:
        self._sessions[session.id] = session

    def get(self, session_id: str) -> AdminSession | None:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> AdminSession | None:
        return self._sessions.pop(session_id, None)

    def all(self) -> list[AdminSession]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

    def mark_expired(self, session_id: str, expired_at: datetime) -> None:
        self._expired[session_id] = expired_at

    def pop_expired(self, session_id: str) -> bool:
        """Return true once for a session that was force-expired."""
        return self._expired.pop(session_id, None) is not None

    def prune_expired(self, before: datetime) -> int:
        """Forget expiry notices recorded before ``before``."""
        stale = [key for key, at in self._expired.items() if at < before]
        for session_id in stale:
            del self._expired[session_id]
        return len(stale)

    def pending_expiry_notices(self) -> int:
        return len(self._expired)


@dataclass
class AdminAuthService:
    """Two-phase admin login plus the local session lifetime rules.

    Authentication (password sign-in) and authorization (admin allow-list
    lookup) are separate calls; a user who passes the first but not the
    second is signed out again and gets the same error as a bad password.
    Sessions are dropped once ``session_duration_seconds`` have elapsed since
    login, whatever the lifetime of the backend token.
    """

    gateway: AuthGateway
    admin_repository: AdminRepository
    events: AuthEventChannel
    sessions: AdminSessionStore = field(default_factory=AdminSessionStore)
    session_duration_seconds: int = 3600
    clock: Callable[[], datetime] = _utcnow

    def login(self, email: str, password: str) -> AdminSession:
        """Sign in an administrator or raise AccessDeniedError."""
        try:
            tokens = self.gateway.sign_in_with_password(email, password)
        except RemoteServiceError as exc:
            _logger.warning("Admin authentication failed: %s", exc.message)
            raise AccessDeniedError from exc

        try:
            authorized = self.admin_repository.is_admin(tokens.user.id)
        except RemoteServiceError as exc:
            _logger.warning("Admin membership lookup failed: %s", exc.message)
            authorized = False
        if not authorized:
            _logger.warning("User %s is not an administrator", tokens.user.id)
            self._revoke(tokens.access_token, tokens.refresh_token)
            raise AccessDeniedError

        session = AdminSession(
            id=secrets.token_urlsafe(32),
            user=tokens.user,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            login_at=self.clock(),
        )
        self.sessions.add(session)
        self.events.publish(AuthEvent(AuthEventType.SIGNED_IN, session.id))
        _logger.info("Admin %s signed in", tokens.user.id)
        return session

    def current_session(self, session_id: str) -> AdminSession | None:
        """Return a live local session, expiring it first when it is due."""
        session = self.sessions.get(session_id)
        if session is None:
            return None
        if self.is_expired(session):
            self.expire(session_id)
            return None
        return session

    def verify_session(self, session_id: str) -> AdminSession | None:
        """Check a session locally and against the remote auth provider."""
        session = self.current_session(session_id)
        if session is None:
            return None
        try:
            user = self.gateway.get_user(session.access_token)
        except RemoteServiceError as exc:
            _logger.warning("Remote session check failed: %s", exc.message)
            user = None
        if user is None or user.id != session.user.id:
            self._discard(session_id)
            return None
        return session

    def is_expired(self, session: AdminSession) -> bool:
        return self.elapsed_seconds(session) >= self.session_duration_seconds

    def elapsed_seconds(self, session: AdminSession) -> float:
        return (self.clock() - session.login_at).total_seconds()

    def remaining_seconds(self, session: AdminSession) -> int:
        """Seconds left before the session is force-expired."""
        remaining = self.session_duration_seconds - self.elapsed_seconds(session)
        return max(int(remaining), 0)

    def logout(self, session_id: str) -> None:
        """Sign out on request; the session survives a remote failure."""
        session = self.sessions.get(session_id)
        if session is None:
            return
        self.gateway.sign_out(session.access_token, session.refresh_token)
        self._discard(session_id)

    def expire(self, session_id: str) -> None:
        """Force a sign-out and remember to tell the user why."""
        session = self.sessions.get(session_id)
        if session is None:
            return
        self._revoke(session.access_token, session.refresh_token)
        self.sessions.mark_expired(session_id, self.clock())
        self._discard(session_id, expired=True)
        _logger.info("Admin session for %s expired", session.user.id)

    def expire_due_sessions(self) -> list[str]:
        """Expire every session past its lifetime and return their ids."""
        self.sessions.prune_expired(
            self.clock() - timedelta(seconds=self.session_duration_seconds)
        )
        expired = [
            session.id for session in self.sessions.all() if self.is_expired(session)
        ]
        for session_id in expired:
            self.expire(session_id)
        return expired

    def consume_expiry_notice(self, session_id: str) -> bool:
        """Return true once after a session was force-expired."""
        return self.sessions.pop_expired(session_id)

    def _discard(self, session_id: str, expired: bool = False) -> None:
        if self.sessions.remove(session_id) is None:
            return
        self.events.publish(
            AuthEvent(AuthEventType.SIGNED_OUT, session_id, expired=expired)
        )

    def _revoke(self, access_token: str, refresh_token: str) -> None:
        try:
            self.gateway.sign_out(access_token, refresh_token)
        except RemoteServiceError as exc:
            _logger.warning("Remote sign-out failed: %s", exc.message)


class GuardState(Enum):
    """Resolution of the admin route guard."""

    CHECKING = "checking"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


@dataclass
class AdminGuard:
    """Tracks whether one browser session may see the admin dashboard."""

    auth_service: AdminAuthService
    session_id: str | None
    state: GuardState = GuardState.CHECKING
    session: AdminSession | None = None
    _subscription: Subscription | None = field(default=None, repr=False)

    def start(self) -> GuardState:
        """Subscribe to auth changes, then resolve the current session."""
        self._subscription = self.auth_service.events.subscribe(self._on_event)
        if self.session_id:
            self.session = self.auth_service.verify_session(self.session_id)
        self.state = (
            GuardState.AUTHENTICATED if self.session else GuardState.UNAUTHENTICATED
        )
        return self.state

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_event(self, event: AuthEvent) -> None:
        if event.session_id != self.session_id:
            return
        if event.type is AuthEventType.SIGNED_OUT:
            self.session = None
            self.state = GuardState.UNAUTHENTICATED
        else:
            self.session = self.auth_service.sessions.get(event.session_id)
            self.state = GuardState.AUTHENTICATED

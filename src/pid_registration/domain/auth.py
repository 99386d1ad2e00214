"""Domain models for admin authentication."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Identity returned by the auth provider."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class AuthTokens:
    """Result of a successful password sign-in."""

    user: AuthUser
    access_token: str
    refresh_token: str


@dataclass(frozen=True)
class AdminSession:
    """Server-side record of a signed-in administrator."""

    id: str
    user: AuthUser
    access_token: str
    refresh_token: str
    login_at: datetime


class AuthEventType(Enum):
    """Auth state transitions published on the event channel."""

    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"


@dataclass(frozen=True)
class AuthEvent:
    """Auth state change for one admin session."""

    type: AuthEventType
    session_id: str
    expired: bool = False

"""Domain models for program registrations."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Registration:
    """A submitted name and phone sign-up."""

    id: str
    name: str
    phone: str
    created_at: datetime | None

"""Admin dashboard over the registrations table."""

from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from pid_registration.domain.registrations import Registration
from pid_registration.messages import EMPTY_PLACEHOLDER, LOADING_PLACEHOLDER
from pid_registration.services.errors import (
    ConfirmationRequiredError,
    InvalidRegistrationError,
)
from pid_registration.services.registrations import RegistrationRepository
from pid_registration.services.validation import format_phone, validate_registration


@dataclass
class DashboardView:
    """Mirror of the last successful fetch."""

    registrations: list[Registration] = field(default_factory=list)
    loading: bool = True

    def placeholder(self) -> str | None:
        """Message shown instead of rows, distinguishing loading from empty."""
        if self.loading:
            return LOADING_PLACEHOLDER
        if not self.registrations:
            return EMPTY_PLACEHOLDER
        return None


@dataclass
class DashboardService:
    """List, edit and delete registrations; every mutation re-fetches."""

    repository: RegistrationRepository
    display_timezone: str = "America/Sao_Paulo"

    def refresh(self, view: DashboardView) -> DashboardView:
        """Replace the view contents with a fresh name-ordered fetch.

        On failure the previous rows are kept and loading ends.
        """
        try:
            view.registrations = self.repository.list_registrations()
        finally:
            view.loading = False
        return view

    def save_edit(
        self, view: DashboardView, registration_id: str, name: str, phone: str
    ) -> DashboardView:
        """Validate and update a registration, then re-fetch."""
        phone = format_phone(phone)
        errors = validate_registration(name, phone)
        if errors:
            raise InvalidRegistrationError(errors)
        self.repository.update_registration(registration_id, name.strip(), phone)
        return self.refresh(view)

    def delete(
        self, view: DashboardView, registration_id: str, confirmed: bool
    ) -> DashboardView:
        """Delete a registration after explicit confirmation, then re-fetch."""
        if not confirmed:
            raise ConfirmationRequiredError
        self.repository.delete_registration(registration_id)
        return self.refresh(view)

    def serialize(self, view: DashboardView) -> dict[str, object]:
        return {
            "registrations": [
                self._serialize_registration(registration)
                for registration in view.registrations
            ],
            "placeholder": view.placeholder(),
        }

    def format_created_at(self, created_at: datetime | None) -> str:
        """Render a timestamp as dd/mm/yyyy hh:mm in the display timezone."""
        if created_at is None:
            return ""
        local = created_at.astimezone(ZoneInfo(self.display_timezone))
        return local.strftime("%d/%m/%Y %H:%M")

    def _serialize_registration(self, registration: Registration) -> dict[str, object]:
        return {
            "id": registration.id,
            "name": registration.name,
            "phone": registration.phone,
            "created_at": registration.created_at.isoformat()
            if registration.created_at
            else None,
            "created_at_display": self.format_created_at(registration.created_at),
            "clipboard_text": clipboard_text(registration),
        }


def clipboard_text(registration: Registration) -> str:
    """Text copied by the dashboard copy action."""
    return f"{registration.name} - {registration.phone}"

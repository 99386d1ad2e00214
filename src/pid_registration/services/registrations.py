"""Public registration form and submission flow."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from pid_registration.domain.registrations import Registration
from pid_registration.messages import REGISTRATION_SUCCESS, registration_failure
from pid_registration.services.errors import RemoteServiceError
from pid_registration.services.storage import KeyValueStore, mark_enrolled
from pid_registration.services.validation import (
    FormField,
    format_phone,
    validate_field,
    validate_registration,
)

GROUP_PATH = "/grupo"

_logger = logging.getLogger(__name__)


class RegistrationRepository(Protocol):
    """Persistence interface for registrations."""

    def create_registration(self, name: str, phone: str) -> Registration:
        """Insert a registration and return the stored row."""

    def list_registrations(self) -> list[Registration]:
        """Return every registration ordered by name ascending."""

    def update_registration(
        self, registration_id: str, name: str, phone: str
    ) -> None:
        """Update the name and phone of a registration."""

    def delete_registration(self, registration_id: str) -> None:
        """Delete a registration."""


class SubmissionStatus(Enum):
    """Lifecycle of one form submission."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class RegistrationForm:
    """Values and field errors of the public sign-up form."""

    name: str = ""
    phone: str = ""
    errors: dict[FormField, str] = field(default_factory=dict)
    status: SubmissionStatus = SubmissionStatus.IDLE

    def change(self, form_field: FormField, value: str) -> None:
        """Apply a typed value, formatting the phone and refreshing its error."""
        if form_field is FormField.PHONE:
            value = format_phone(value)
            self.phone = value
        else:
            self.name = value
        error = validate_field(form_field, value)
        if error:
            self.errors[form_field] = error
        else:
            self.errors.pop(form_field, None)

    def validate(self) -> bool:
        """Re-validate every field; return true when the form may be sent."""
        self.errors = validate_registration(self.name, self.phone)
        return not self.errors

    def clear(self) -> None:
        self.name = ""
        self.phone = ""
        self.errors = {}


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submit action."""

    status: SubmissionStatus
    message: str | None = None
    registration: Registration | None = None
    redirect_to: str | None = None
    errors: dict[FormField, str] = field(default_factory=dict)


@dataclass
class RegistrationService:
    """Submits sign-ups to the remote table and marks the client enrolled."""

    repository: RegistrationRepository

    def submit(self, form: RegistrationForm, store: KeyValueStore) -> SubmissionResult:
        """Validate and send the form once; never retries."""
        if form.status is SubmissionStatus.SUBMITTING:
            return SubmissionResult(status=SubmissionStatus.SUBMITTING)
        if not form.validate():
            form.status = SubmissionStatus.IDLE
            return SubmissionResult(
                status=SubmissionStatus.IDLE, errors=dict(form.errors)
            )

        form.status = SubmissionStatus.SUBMITTING
        try:
            registration = self.repository.create_registration(
                form.name.strip(), form.phone
            )
        except RemoteServiceError as exc:
            _logger.warning("Registration insert failed: %s", exc.message)
            form.status = SubmissionStatus.FAILURE
            return SubmissionResult(
                status=SubmissionStatus.FAILURE,
                message=registration_failure(exc.message),
            )

        form.clear()
        form.status = SubmissionStatus.SUCCESS
        mark_enrolled(store)
        return SubmissionResult(
            status=SubmissionStatus.SUCCESS,
            message=REGISTRATION_SUCCESS,
            registration=registration,
            redirect_to=GROUP_PATH,
        )

"""Service-level exceptions."""


class RemoteServiceError(RuntimeError):
    """Raised when the hosted backend rejects or fails a call."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "")
        self.message = message


class AccessDeniedError(Exception):
    """Raised when an admin login fails at any phase."""


class ConfirmationRequiredError(Exception):
    """Raised when a destructive action is requested without confirmation."""


class InvalidRegistrationError(ValueError):
    """Raised when registration fields fail validation."""

    def __init__(self, errors: dict) -> None:
        super().__init__("Invalid registration fields")
        self.errors = errors

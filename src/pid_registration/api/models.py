"""Request bodies accepted by the JSON endpoints."""

from pydantic import BaseModel


class RegistrationPayload(BaseModel):
    """Public sign-up form values."""

    name: str = ""
    phone: str = ""


class RegistrationUpdatePayload(BaseModel):
    """Dashboard inline edit values."""

    name: str
    phone: str


class LoginPayload(BaseModel):
    """Admin credentials."""

    email: str
    password: str

"""Phone formatting and registration field validation."""

import re
from enum import Enum

from pid_registration.messages import NAME_TOO_SHORT, PHONE_INVALID

NAME_MIN_LENGTH = 3
PHONE_MAX_DIGITS = 11

_PHONE_PATTERN = re.compile(r"\(\d{2}\) \d{5}-\d{4}", re.ASCII)
_PHONE_GROUPS = re.compile(r"(\d{2})?(\d{5})?(\d{4})?", re.ASCII)
_NON_DIGITS = re.compile(r"\D", re.ASCII)


class FormField(Enum):
    """Fields of the registration form."""

    NAME = "name"
    PHONE = "phone"


def format_phone(raw: str) -> str:
    """Format typed digits as ``(DD) DDDDD-DDDD`` while the number is typed.

    Groups of 2, 5 and 4 digits are decorated as soon as each one is complete;
    leftover digits are kept as typed. Input with more than eleven digits is
    returned untouched.
    """
    digits = _NON_DIGITS.sub("", raw)
    if len(digits) > PHONE_MAX_DIGITS:
        return raw
    match = _PHONE_GROUPS.match(digits)
    ddd, prefix, suffix = match.groups()
    formatted = ""
    if ddd:
        formatted += f"({ddd}"
    if prefix:
        formatted += f") {prefix}"
    if suffix:
        formatted += f"-{suffix}"
    return formatted + digits[match.end() :]


def validate_field(field: FormField, value: str) -> str | None:
    """Return the error message for a field value, or None when valid."""
    if field is FormField.NAME:
        if len(value.strip()) < NAME_MIN_LENGTH:
            return NAME_TOO_SHORT
        return None
    if not _PHONE_PATTERN.fullmatch(value):
        return PHONE_INVALID
    return None


def validate_registration(name: str, phone: str) -> dict[FormField, str]:
    """Validate every form field and return the errors by field."""
    errors: dict[FormField, str] = {}
    for field, value in ((FormField.NAME, name), (FormField.PHONE, phone)):
        error = validate_field(field, value)
        if error:
            errors[field] = error
    return errors

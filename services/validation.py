"""
Validation rules for user payloads.

``validate`` checks raw request data before anything touches storage.
``validate_record`` re-checks a ``User`` row right before it is persisted,
so the record's own constraints hold no matter who built it.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from models.db import User, UserRole, UserStatus

ROLES = tuple(role.value for role in UserRole)
STATUSES = tuple(status.value for status in UserStatus)

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255

ROLE_MESSAGE = "Role must be one of: " + ", ".join(ROLES)
STATUS_MESSAGE = "Status must be one of: " + ", ".join(STATUSES)

_email_adapter = TypeAdapter(EmailStr)

# wire name -> (record attribute, label)
_TEXT_FIELDS = {
    "firstName": ("first_name", "First name"),
    "lastName": ("last_name", "Last name"),
}


def is_valid_email(value: str) -> bool:
    # EmailStr also accepts "Name <addr>"; only bare addresses are stored.
    if "<" in value or ">" in value:
        return False
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _supplied(data: Mapping[str, Any], field: str) -> bool:
    return data.get(field) is not None


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_text(value: Any, label: str) -> str | None:
    if _blank(value):
        return f"{label} is required"
    if not isinstance(value, str):
        return f"{label} must be a string"
    return None


def _check_email(value: Any) -> str | None:
    if _blank(value):
        return "Email is required"
    if not isinstance(value, str):
        return "Email must be a string"
    if not is_valid_email(value):
        return "Invalid email format"
    return None


def _check_role(value: Any) -> str | None:
    if _blank(value):
        return "Role is required"
    if value not in ROLES:
        return ROLE_MESSAGE
    return None


def _check_status(value: Any) -> str | None:
    if value not in STATUSES:
        return STATUS_MESSAGE
    return None


def validate(data: Mapping[str, Any], is_update: bool = False) -> Dict[str, str]:
    """
    Return a mapping of field name to error message; empty when ``data`` is valid.

    On create every required field is checked. On update only the fields
    present in ``data`` are checked. ``status`` is optional either way but
    must be a known value when given. A ``None`` value counts as absent.
    """
    errors: Dict[str, str] = {}

    for field, (_, label) in _TEXT_FIELDS.items():
        if not is_update or _supplied(data, field):
            message = _check_text(data.get(field), label)
            if message:
                errors[field] = message

    if not is_update or _supplied(data, "email"):
        message = _check_email(data.get("email"))
        if message:
            errors["email"] = message

    if not is_update or _supplied(data, "role"):
        message = _check_role(data.get("role"))
        if message:
            errors["role"] = message

    if _supplied(data, "status"):
        message = _check_status(data.get("status"))
        if message:
            errors["status"] = message

    return errors


def validate_record(user: User) -> Dict[str, str]:
    """Entity-level constraints for a row about to be written."""
    errors: Dict[str, str] = {}

    for field, (attribute, label) in _TEXT_FIELDS.items():
        value = getattr(user, attribute)
        message = _check_text(value, label)
        if message is None and not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
            message = f"{label} must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters"
        if message:
            errors[field] = message

    message = _check_email(user.email)
    if message is None and len(user.email) > EMAIL_MAX_LENGTH:
        message = f"Email must be at most {EMAIL_MAX_LENGTH} characters"
    if message:
        errors["email"] = message

    message = _check_role(user.role)
    if message:
        errors["role"] = message

    message = _check_status(user.status)
    if message:
        errors["status"] = message

    return errors

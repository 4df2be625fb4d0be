"""
Error taxonomy for the User Service.

Every error carries a field-keyed ``errors`` mapping so the HTTP layer can
render it without knowing which check produced it.
"""

from typing import Dict, Optional


class UserServiceError(Exception):
    """Base class for expected, client-facing failures."""

    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = dict(errors)


class ValidationError(UserServiceError):
    """One or more fields failed validation."""


class ConflictError(ValidationError):
    """A unique field collides with an existing row."""

    def __init__(self, field: str = "email", message: str = "Email already exists") -> None:
        super().__init__({field: message})
        self.field = field


class NotFoundError(UserServiceError):
    def __init__(self, entity_id: Optional[int] = None) -> None:
        super().__init__({"id": "User not found"})
        self.entity_id = entity_id


class MalformedInputError(Exception):
    """The request body could not be parsed into a JSON object."""

    def __init__(self, message: str = "Invalid JSON data") -> None:
        super().__init__(message)
        self.message = message

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional

from errors import ConflictError, NotFoundError, UserServiceError, ValidationError
from models.db import User, UserStatus
from repositories.user_repository import UserRepository
from services.validation import validate, validate_record

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "email": "email",
    "role": "role",
    "status": "status",
}


def utcnow() -> datetime:
    """Naive UTC, matching what the ``users`` timestamp columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass
class ServiceResult:
    """
    Outcome of a service operation.

    On failure ``error`` holds the ``UserServiceError`` describing it and
    ``errors`` its field-keyed messages.
    """

    success: bool
    user: Optional[User] = None
    errors: Dict[str, str] = field(default_factory=dict)
    error: Optional[UserServiceError] = None

    @classmethod
    def ok(cls, user: Optional[User] = None) -> "ServiceResult":
        return cls(success=True, user=user)

    @classmethod
    def fail(cls, error: UserServiceError) -> "ServiceResult":
        return cls(success=False, errors=dict(error.errors), error=error)


class UserService:
    """
    Business rules for users: validation, email uniqueness and timestamps.

    Expected failures come back as ``ServiceResult`` values; only
    unexpected storage errors propagate.
    """

    def __init__(
        self,
        repository: UserRepository,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._repo = repository
        self._clock = clock or utcnow

    def list_users(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        return self._repo.find_paginated(page, limit)

    def get_user(self, user_id: int) -> Optional[User]:
        return self._repo.find(user_id)

    def create_user(self, data: Mapping[str, Any]) -> ServiceResult:
        errors = validate(data)
        if errors:
            return ServiceResult.fail(ValidationError(errors))

        email = data["email"].strip().lower()
        if self._repo.email_exists(email):
            return ServiceResult.fail(ConflictError())

        now = self._clock()
        user = User(
            first_name=data["firstName"],
            last_name=data["lastName"],
            email=email,
            role=data["role"],
            status=data.get("status") or UserStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )

        errors = validate_record(user)
        if errors:
            return ServiceResult.fail(ValidationError(errors))

        try:
            user = self._repo.add(user)
        except ConflictError as exc:
            return ServiceResult.fail(exc)

        logger.info("Created user %s <%s>", user.id, user.email)
        return ServiceResult.ok(user)

    def update_user(self, user_id: int, data: Mapping[str, Any]) -> ServiceResult:
        user = self._repo.find(user_id)
        if user is None:
            return ServiceResult.fail(NotFoundError(user_id))

        errors = validate(data, is_update=True)
        if errors:
            return ServiceResult.fail(ValidationError(errors))

        changes = {
            attribute: data[key]
            for key, attribute in UPDATABLE_FIELDS.items()
            if data.get(key) is not None
        }
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()
            if self._repo.email_exists(changes["email"], exclude_id=user_id):
                return ServiceResult.fail(ConflictError())

        for attribute, value in changes.items():
            setattr(user, attribute, value)

        now = self._clock()
        if now <= user.updated_at:
            now = user.updated_at + timedelta(microseconds=1)
        user.updated_at = now

        errors = validate_record(user)
        if errors:
            self._repo.discard()
            return ServiceResult.fail(ValidationError(errors))

        try:
            user = self._repo.save(user)
        except ConflictError as exc:
            return ServiceResult.fail(exc)

        logger.info("Updated user %s (%s)", user.id, ", ".join(sorted(changes)) or "no fields")
        return ServiceResult.ok(user)

    def delete_user(self, user_id: int) -> ServiceResult:
        user = self._repo.find(user_id)
        if user is None:
            return ServiceResult.fail(NotFoundError(user_id))

        self._repo.remove(user)
        logger.info("Deleted user %s", user_id)
        return ServiceResult.ok()

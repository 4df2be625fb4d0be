# CREATE TABLE users (
#     id INT NOT NULL AUTO_INCREMENT PRIMARY KEY,
#     first_name VARCHAR(255) NOT NULL,
#     last_name VARCHAR(255) NOT NULL,
#     email VARCHAR(255) NOT NULL UNIQUE,
#     role VARCHAR(20) NOT NULL,
#     status VARCHAR(20) NOT NULL,
#     created_at DATETIME(6) NOT NULL,
#     updated_at DATETIME(6) NOT NULL,
#     CONSTRAINT ck_users_role CHECK (role IN ('admin', 'manager', 'user')),
#     CONSTRAINT ck_users_status CHECK (status IN ('active', 'inactive', 'pending'))
# );

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


class UserRead(BaseModel):
    """JSON-facing projection of a stored user."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="The unique identifier of the user")
    first_name: str = Field(..., alias="firstName", description="The user's first name")
    last_name: str = Field(..., alias="lastName", description="The user's last name")
    email: str = Field(..., description="The user's email address")
    role: str = Field(..., description="One of admin, manager, user")
    status: str = Field(..., description="One of active, inactive, pending")
    created_at: datetime = Field(..., alias="createdAt", description="Timestamp when the user was created")
    updated_at: datetime = Field(..., alias="updatedAt", description="Timestamp when the user was last updated")

    @field_serializer("created_at", "updated_at")
    def _format_timestamp(self, value: datetime) -> str:
        return value.strftime(TIMESTAMP_FORMAT)


class Pagination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")


class UserListResponse(BaseModel):
    data: List[UserRead]
    pagination: Pagination


class UserResponse(BaseModel):
    data: UserRead
    message: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
    errors: Optional[Dict[str, str]] = None

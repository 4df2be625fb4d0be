from __future__ import annotations

import math
from typing import Any, Dict, Optional

from models.db import User
from repositories.user_store import UserStore

# Newest first; equal timestamps fall back to the most recent insert.
NEWEST_FIRST = (("created_at", "desc"), ("id", "desc"))


class UserRepository:
    """
    User data access: pagination and uniqueness checks over a ``UserStore``.
    """

    def __init__(self, store: UserStore) -> None:
        self._store = store

    def find_paginated(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        """
        Return one page of users, newest first.

        ``page`` is 1-based. A page past the end yields an empty ``users``
        list with the real ``total`` and ``total_pages``.
        """
        offset = (page - 1) * limit
        total = self._store.count_all()

        if offset >= total:
            users = []
        else:
            users = self._store.find_page(offset, limit, NEWEST_FIRST)

        return {
            "users": users,
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit),
        }

    def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Case-insensitive; ``exclude_id`` skips the user being updated."""
        return self._store.exists_by_email(email, exclude_id=exclude_id)

    def find(self, user_id: int) -> Optional[User]:
        return self._store.find_by_id(user_id)

    def add(self, user: User) -> User:
        return self._store.insert(user)

    def save(self, user: User) -> User:
        return self._store.update(user)

    def remove(self, user: User) -> None:
        self._store.delete(user)

    def discard(self) -> None:
        """Drop pending, unpersisted changes."""
        self._store.rollback()

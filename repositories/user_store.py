from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from errors import ConflictError
from models.db import User

logger = logging.getLogger(__name__)

OrderBy = Sequence[Tuple[str, str]]

SORTABLE_COLUMNS = {
    "id": User.id,
    "created_at": User.created_at,
    "updated_at": User.updated_at,
    "email": User.email,
    "last_name": User.last_name,
}


class UserStore(Protocol):
    """Narrow data-access interface the repository is written against."""

    def find_by_id(self, user_id: int) -> Optional[User]: ...

    def find_page(self, offset: int, limit: int, order_by: OrderBy) -> List[User]: ...

    def count_all(self) -> int: ...

    def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool: ...

    def insert(self, user: User) -> User: ...

    def update(self, user: User) -> User: ...

    def delete(self, user: User) -> None: ...

    def rollback(self) -> None: ...


def _is_email_violation(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: users.email"
    # MySQL:  "Duplicate entry 'a@b.c' for key 'users.ix_users_email'"
    return "email" in str(exc.orig).lower()


class SqlAlchemyUserStore:
    """
    ``UserStore`` backed by a SQLAlchemy session.

    Writes commit immediately: each service operation is one
    read-check-write unit.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    @property
    def session(self) -> Session:
        return self._session

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def find_page(self, offset: int, limit: int, order_by: OrderBy) -> List[User]:
        stmt = select(User)
        for column_name, direction in order_by:
            column = SORTABLE_COLUMNS.get(column_name)
            if column is None:
                raise ValueError(f"Cannot order users by {column_name!r}")
            if direction.lower() == "desc":
                stmt = stmt.order_by(column.desc())
            elif direction.lower() == "asc":
                stmt = stmt.order_by(column.asc())
            else:
                raise ValueError(f"Unknown sort direction {direction!r}")

        stmt = stmt.offset(offset).limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def count_all(self) -> int:
        return self.session.execute(select(func.count(User.id))).scalar_one()

    def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        stmt = select(func.count(User.id)).where(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return self.session.execute(stmt).scalar_one() > 0

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def insert(self, user: User) -> User:
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def update(self, user: User) -> User:
        self._commit()
        self.session.refresh(user)
        return user

    def delete(self, user: User) -> None:
        self.session.delete(user)
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if _is_email_violation(exc):
                logger.warning("Storage rejected duplicate email: %s", exc.orig)
                raise ConflictError() from exc
            raise

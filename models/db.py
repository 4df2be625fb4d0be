import enum

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.dialects import mysql

from database import Base


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class UserStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


def _choices_sql(column: str, choices) -> str:
    values = ", ".join(f"'{choice.value}'" for choice in choices)
    return f"{column} IN ({values})"


# MySQL DATETIME drops fractional seconds unless fsp is given.
Timestamp = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(_choices_sql("role", UserRole), name="ck_users_role"),
        CheckConstraint(_choices_sql("status", UserStatus), name="ck_users_status"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    role = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=UserStatus.PENDING.value)
    # Stamped by UserService, never by the database.
    created_at = Column(Timestamp, nullable=False)
    updated_at = Column(Timestamp, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "status": self.status,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id!r} email={self.email!r}>"

from .user_repository import UserRepository
from .user_store import SqlAlchemyUserStore, UserStore

__all__ = [
    "UserRepository",
    "SqlAlchemyUserStore",
    "UserStore",
]

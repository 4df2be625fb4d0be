from __future__ import annotations

import os
from datetime import datetime, timedelta
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite://")

from database import Base, get_db
from main import app
from repositories.user_repository import UserRepository
from repositories.user_store import SqlAlchemyUserStore
from services.user_service import UserService


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def session(session_factory) -> Iterator[Session]:
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(session: Session) -> SqlAlchemyUserStore:
    return SqlAlchemyUserStore(session)


@pytest.fixture()
def repository(store: SqlAlchemyUserStore) -> UserRepository:
    return UserRepository(store)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def service(repository: UserRepository, clock: FakeClock) -> UserService:
    return UserService(repository, clock=clock)


@pytest.fixture()
def client(session_factory) -> Iterator[TestClient]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def make_payload():
    def _make(index: int = 0, **overrides) -> dict:
        payload = {
            "firstName": "John",
            "lastName": "Doe",
            "email": f"john{index}@example.com" if index else "john@example.com",
            "role": "user",
        }
        payload.update(overrides)
        return payload

    return _make

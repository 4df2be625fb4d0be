# main.py
from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import settings
from database import Base, engine, get_db
from errors import MalformedInputError, NotFoundError
from models.user import (
    MessageResponse,
    Pagination,
    UserListResponse,
    UserRead,
    UserResponse,
)
from repositories.user_repository import UserRepository
from repositories.user_store import SqlAlchemyUserStore
from services.user_service import UserService

logger = logging.getLogger("user_service")


def configure_logging(level: Optional[str] = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s %s", settings.APP_NAME, settings.APP_VERSION)
    # Create tables (with error handling for connection issues)
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created/verified successfully")
    except SQLAlchemyError as exc:
        logger.warning("Could not connect to database during startup: %s", exc)
        logger.warning(
            "Application will start, but database operations will fail until connection is available"
        )

    yield

    logger.info("Shutting down %s", settings.APP_NAME)
    engine.dispose()


configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Central service for all user information. "
        "Manages user profiles including first name, last name, email, role and status. "
        "Supports paginated listing, registration, retrieval, partial updates and deletion."
    ),
    lifespan=lifespan,
)


# ----------------------- DEPENDENCIES -----------------------
def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UserRepository(SqlAlchemyUserStore(db)))


async def json_body(request: Request) -> Dict[str, Any]:
    """Parse the request body as a non-empty JSON object."""
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else None
    except (ValueError, UnicodeDecodeError):
        raise MalformedInputError() from None

    if not data or not isinstance(data, dict):
        raise MalformedInputError()
    return data


def _clamp(raw: Optional[str], default: int, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        value = default
    value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def _user_view(user) -> UserRead:
    return UserRead(**user.to_dict())


def _error(status_code: int, error: str, errors: Optional[Dict[str, str]] = None) -> JSONResponse:
    content: Dict[str, Any] = {"error": error}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(MalformedInputError)
async def malformed_input_handler(request: Request, exc: MalformedInputError) -> JSONResponse:
    return _error(status.HTTP_400_BAD_REQUEST, exc.message)


# ----------------------- USERS -----------------------
@app.get(
    "/api/users",
    response_model=UserListResponse,
    summary="List users, newest first",
)
def list_users(
    page: Optional[str] = Query(None, description="1-based page number (default 1)"),
    limit: Optional[str] = Query(None, description="Page size, 1-100 (default 10)"),
    service: UserService = Depends(get_user_service),
) -> UserListResponse:
    page_number = _clamp(page, 1, 1)
    page_size = _clamp(limit, settings.DEFAULT_PAGE_LIMIT, 1, settings.MAX_PAGE_LIMIT)

    result = service.list_users(page_number, page_size)
    return UserListResponse(
        data=[_user_view(u) for u in result["users"]],
        pagination=Pagination(
            page=result["page"],
            limit=result["limit"],
            total=result["total"],
            total_pages=result["total_pages"],
        ),
    )


@app.get(
    "/api/users/{user_id}",
    response_model=UserResponse,
    response_model_exclude_none=True,
    summary="Get detailed user info",
)
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    user = service.get_user(user_id)
    if user is None:
        return _error(status.HTTP_404_NOT_FOUND, "User not found")
    return UserResponse(data=_user_view(user))


@app.post(
    "/api/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def create_user(
    body: Dict[str, Any] = Depends(json_body),
    service: UserService = Depends(get_user_service),
):
    result = service.create_user(body)
    if not result.success:
        return _error(status.HTTP_400_BAD_REQUEST, "Validation failed", result.errors)

    return UserResponse(data=_user_view(result.user), message="User created successfully")


@app.put(
    "/api/users/{user_id}",
    response_model=UserResponse,
    summary="Update user information (partial)",
)
def update_user(
    user_id: int,
    body: Dict[str, Any] = Depends(json_body),
    service: UserService = Depends(get_user_service),
):
    result = service.update_user(user_id, body)
    if not result.success:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if isinstance(result.error, NotFoundError)
            else status.HTTP_400_BAD_REQUEST
        )
        return _error(status_code, "Update failed", result.errors)

    return UserResponse(data=_user_view(result.user), message="User updated successfully")


@app.delete(
    "/api/users/{user_id}",
    response_model=MessageResponse,
    summary="Delete a user",
)
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    result = service.delete_user(user_id)
    if not result.success:
        return _error(status.HTTP_404_NOT_FOUND, "User not found")

    return MessageResponse(message="User deleted successfully")


# ------------------------ Root ------------------------
@app.get("/health", tags=["system"])
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable"},
        )
    return {"status": "ok", "version": settings.APP_VERSION}


@app.get("/")
def root():
    return {"message": "Welcome to the User Service. See /docs for Swagger UI."}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=True)

from __future__ import annotations

import pytest

from models.db import User
from services.validation import (
    ROLE_MESSAGE,
    STATUS_MESSAGE,
    is_valid_email,
    validate,
    validate_record,
)

VALID = {
    "firstName": "John",
    "lastName": "Doe",
    "email": "john@example.com",
    "role": "user",
}


def test_valid_create_payload_has_no_errors() -> None:
    assert validate(VALID) == {}


def test_create_requires_all_core_fields() -> None:
    errors = validate({})

    assert errors == {
        "firstName": "First name is required",
        "lastName": "Last name is required",
        "email": "Email is required",
        "role": "Role is required",
    }


def test_blank_strings_count_as_missing() -> None:
    errors = validate({**VALID, "firstName": "   ", "lastName": ""})

    assert errors["firstName"] == "First name is required"
    assert errors["lastName"] == "Last name is required"


def test_non_string_name_is_rejected() -> None:
    errors = validate({**VALID, "firstName": 42})
    assert errors == {"firstName": "First name must be a string"}


@pytest.mark.parametrize("email", ["not-an-email", "john@", "@example.com", "john doe@example.com"])
def test_invalid_email_format(email: str) -> None:
    assert validate({**VALID, "email": email}) == {"email": "Invalid email format"}


def test_unknown_role_mentions_allowed_set() -> None:
    errors = validate({**VALID, "role": "superadmin"})

    assert errors == {"role": ROLE_MESSAGE}
    assert "admin, manager, user" in errors["role"]


def test_status_is_optional_on_create() -> None:
    assert "status" not in validate(VALID)


def test_invalid_status_is_a_hard_failure_on_create() -> None:
    errors = validate({**VALID, "status": "archived"})
    assert errors == {"status": STATUS_MESSAGE}


def test_empty_status_is_rejected_not_defaulted() -> None:
    assert validate({**VALID, "status": ""}) == {"status": STATUS_MESSAGE}


def test_errors_accumulate() -> None:
    errors = validate({"firstName": "John", "email": "nope", "role": "root", "status": "x"})

    assert set(errors) == {"lastName", "email", "role", "status"}


def test_update_only_checks_supplied_fields() -> None:
    assert validate({"lastName": "Smith"}, is_update=True) == {}
    assert validate({}, is_update=True) == {}


def test_update_checks_supplied_fields() -> None:
    errors = validate({"email": "bad", "role": "owner"}, is_update=True)

    assert errors == {"email": "Invalid email format", "role": ROLE_MESSAGE}


def test_update_treats_null_as_omitted() -> None:
    assert validate({"firstName": None, "email": None}, is_update=True) == {}


def test_is_valid_email() -> None:
    assert is_valid_email("jane.doe+tag@example.org")
    assert not is_valid_email("jane.doe@")


def _record(**overrides) -> User:
    values = {
        "first_name": "John",
        "last_name": "Doe",
        "email": "john@example.com",
        "role": "user",
        "status": "pending",
    }
    values.update(overrides)
    return User(**values)


def test_valid_record_has_no_errors() -> None:
    assert validate_record(_record()) == {}


def test_record_rejects_short_and_long_names() -> None:
    errors = validate_record(_record(first_name="J", last_name="x" * 256))

    assert errors == {
        "firstName": "First name must be between 2 and 255 characters",
        "lastName": "Last name must be between 2 and 255 characters",
    }


def test_record_rejects_what_payload_validation_rejects() -> None:
    record = _record(first_name="", email="nope", role="superadmin", status="gone")
    payload = {"firstName": "", "lastName": "Doe", "email": "nope", "role": "superadmin", "status": "gone"}

    assert set(validate_record(record)) == set(validate(payload))

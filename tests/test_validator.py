# tests/test_validator.py
import pytest

from cinema_api.errors import ErrorKind, FailedValidationError
from cinema_api.validator import EMAIL_RX, Validator, matches, permitted_value, unique


def test_new_validator_is_valid():
    v = Validator()
    assert v.valid()
    assert v.errors == {}
    v.raise_if_invalid()


def test_check_records_only_first_message_per_key():
    v = Validator()
    v.check(False, "title", "must be provided")
    v.check(False, "title", "must not be more than 500 bytes long")
    v.check(True, "year", "must be provided")

    assert not v.valid()
    assert v.errors == {"title": "must be provided"}


def test_raise_if_invalid_carries_every_field():
    v = Validator()
    v.add_error("title", "must be provided")
    v.add_error("genres", "must not contain duplicate values")

    with pytest.raises(FailedValidationError) as exc_info:
        v.raise_if_invalid()

    err = exc_info.value
    assert err.kind is ErrorKind.VALIDATION_FAILED
    assert err.status_code == 422
    assert err.errors == {"title": "must be provided", "genres": "must not contain duplicate values"}
    assert err.detail == {"error": err.errors}


def test_permitted_value():
    assert permitted_value("id", "id", "-id")
    assert not permitted_value("name", "id", "-id")
    assert not permitted_value("id")


@pytest.mark.parametrize("email,expected", [
    ("alice@example.com", True),
    ("first.last+tag@sub.example.org", True),
    ("no-at-sign.example.com", False),
    ("alice@", False),
    ("alice@example.com\n", False),
    ("", False),
])
def test_email_pattern(email, expected):
    assert matches(email, EMAIL_RX) is expected


def test_unique():
    assert unique([])
    assert unique(["drama", "comedy"])
    assert not unique(["drama", "comedy", "drama"])

# tests/test_runtime.py
import pytest
from pydantic import ValidationError

from cinema_api.movies.models import Movie, MovieCreate
from cinema_api.movies.runtime import InvalidRuntimeFormatError, decode_runtime, encode_runtime


def test_encode_runtime():
    assert encode_runtime(102) == "102 mins"
    assert encode_runtime(0) == "0 mins"


@pytest.mark.parametrize("raw,expected", [
    ("102 mins", 102),
    ("+7 mins", 7),
    ("-5 mins", -5),
    ("9223372036854775807 mins", 2 ** 63 - 1),
    ("-9223372036854775808 mins", -(2 ** 63)),
])
def test_decode_runtime(raw, expected):
    assert decode_runtime(raw) == expected


@pytest.mark.parametrize("raw", [
    "102",
    "102 min",
    "102 MINS",
    "102  mins",
    " 102 mins",
    "one hundred mins",
    "1.5 mins",
    "9223372036854775808 mins",
    "-9223372036854775809 mins",
    "99999999999999999999 mins",
    102,
    None,
])
def test_decode_runtime_rejects_other_forms(raw):
    with pytest.raises(InvalidRuntimeFormatError) as exc_info:
        decode_runtime(raw)
    assert str(exc_info.value) == "invalid runtime format"


def test_movie_renders_runtime_as_minutes_string_in_json():
    movie = Movie(id=1, title="Moana", year=2016, runtime=107, genres=["animation"], version=1)

    assert movie.model_dump(mode="json")["runtime"] == "107 mins"
    assert movie.model_dump()["runtime"] == 107


def test_movie_json_omits_empty_optional_fields():
    data = Movie(id=3, title="Untitled", version=1).model_dump(mode="json")

    assert "year" not in data
    assert "runtime" not in data
    assert "genres" not in data
    assert data["title"] == "Untitled"


def test_request_body_accepts_only_the_minutes_form():
    assert MovieCreate.model_validate({"runtime": "148 mins"}).runtime == 148

    with pytest.raises(ValidationError):
        MovieCreate.model_validate({"runtime": 148})
    with pytest.raises(ValidationError):
        MovieCreate.model_validate({"runtime": "148"})
